from datetime import datetime

import pytest

from shippingapi import reports
from shippingapi.constants import TRANSACTIONS_REPORT_PATH
from shippingapi.exceptions import ShippingApiException
from shippingapi.models.shipping import ReportRequest
from shippingapi.transport.mock import MockResponse

from tests.conftest import make_session


def page(ids, last):
    return MockResponse(body={
        "content": [
            {"transactionId": i, "transactionType": "POSTAGE PRINT" if i.endswith("p") else "POSTAGE REFUND"}
            for i in ids
        ],
        "last": last,
    })


@pytest.fixture
def report_request():
    return ReportRequest(developer_id="44397664", from_date=datetime(2024, 1, 1), size=2)


async def test_iterates_all_pages(session, requester, report_request):
    requester.program(TRANSACTIONS_REPORT_PATH, page(["1p", "2r"], False), page(["3p"], True))

    found = [t.transaction_id async for t in reports.transactions(report_request, session=session)]

    assert found == ["1p", "2r", "3p"]
    assert [c.request.page for c in requester.calls] == [0, 1]
    assert report_request.page == 0


async def test_predicate_filters(session, requester, report_request):
    requester.program(TRANSACTIONS_REPORT_PATH, page(["1p", "2r"], False), page(["3p"], True))

    found = [
        t.transaction_id
        async for t in reports.transactions(
            report_request, predicate=lambda t: t.transaction_type == "POSTAGE PRINT", session=session
        )
    ]

    assert found == ["1p", "3p"]


async def test_max_pages(session, requester, report_request):
    requester.program(TRANSACTIONS_REPORT_PATH, page(["1p", "2r"], False))

    found = [t async for t in reports.transactions(report_request, max_pages=2, session=session)]

    assert len(found) == 4
    assert len(requester.calls) == 2


async def test_empty_page_ends_iteration(session, requester, report_request):
    requester.program(TRANSACTIONS_REPORT_PATH, page(["1p"], False), page([], False))

    found = [t async for t in reports.transactions(report_request, session=session)]

    assert len(found) == 1
    assert len(requester.calls) == 2


async def test_failed_page_ends_iteration(session, requester, report_request):
    requester.program(
        TRANSACTIONS_REPORT_PATH,
        page(["1p"], False),
        MockResponse.error("PB-LEDGER-ERR-1", "Report unavailable", status=500),
    )

    found = [t async for t in reports.transactions(report_request, session=session)]

    assert len(found) == 1
    assert session.counters.get(TRANSACTIONS_REPORT_PATH).error_count == 1


def test_failed_page_is_reported_as_warning(session, requester, report_request, log):
    requester.program(
        TRANSACTIONS_REPORT_PATH,
        page(["1p"], False),
        MockResponse.error("PB-LEDGER-ERR-1", "Report unavailable", status=500),
    )

    found = list(reports.transactions_sync(report_request, session=session))

    assert len(found) == 1
    warnings = log.messages("warning")
    assert len(warnings) == 1
    assert "failed page 1" in warnings[0]
    assert "Report unavailable" in warnings[0]


async def test_last_page_logs_no_warning(session, requester, report_request, log):
    requester.program(TRANSACTIONS_REPORT_PATH, page(["1p"], True))

    found = [t async for t in reports.transactions(report_request, session=session)]

    assert len(found) == 1
    assert log.messages("warning") == []


async def test_failed_page_raises_when_throwing(requester, token_provider, report_request):
    session = make_session(requester, token_provider, throw_exceptions=True)
    requester.program(TRANSACTIONS_REPORT_PATH, MockResponse.error("PB-LEDGER-ERR-1", status=500))

    with pytest.raises(ShippingApiException):
        [t async for t in reports.transactions(report_request, session=session)]


def test_sync_iteration(session, requester, report_request):
    requester.program(TRANSACTIONS_REPORT_PATH, page(["1p", "2r"], False), page(["3p"], True))

    found = [t.transaction_id for t in reports.transactions_sync(report_request, session=session)]

    assert found == ["1p", "2r", "3p"]
    assert requester.calls[0].request.from_date == datetime(2024, 1, 1)
