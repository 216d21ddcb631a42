"""
Transaction report iteration.

The ledger report endpoint is paged. ``transactions`` walks the pages and
yields the individual transactions, optionally filtered, stopping at the last
page, at ``max_pages``, or at the first failed page. A failed page raises if
the session is configured to throw and is otherwise reported through the
session's warning hook.
"""

from typing import AsyncIterator, Callable, Iterator, Optional

from shippingapi import web_method
from shippingapi.constants import TRANSACTIONS_REPORT_PATH
from shippingapi.models.base import ShippingApiResponse
from shippingapi.models.shipping import ReportRequest, Transaction, TransactionsPage
from shippingapi.session import Session, resolve_session

Predicate = Callable[[Transaction], bool]


def _page_request(request: ReportRequest, page: int) -> ReportRequest:
    return request.model_copy(update={"page": page, "authorization": None})


def _report_failed_page(session: Session, page_number: int, response: ShippingApiResponse) -> None:
    session.log_warning(f"Transactions report stopped at failed page {page_number}: {response}")


def _page_items(response: ShippingApiResponse, predicate: Optional[Predicate]):
    page: TransactionsPage = response.api_response or TransactionsPage()
    items = [t for t in page.content if predicate is None or predicate(t)]
    return items, page.last or not page.content


async def transactions(
    request: ReportRequest,
    predicate: Optional[Predicate] = None,
    max_pages: Optional[int] = None,
    session: Optional[Session] = None
) -> AsyncIterator[Transaction]:
    """
    Iterate the transactions report.

    Args:
        request: Report query; ``page`` is the first page to read
        predicate: Optional filter applied to each transaction
        max_pages: Maximum number of pages to read
        session: Session to use (defaults to the process-wide default)

    Yields:
        Transaction: Matching transactions in report order
    """
    session = resolve_session(session)
    page_number = request.page
    pages_read = 0
    while max_pages is None or pages_read < max_pages:
        response = await web_method.get(
            TRANSACTIONS_REPORT_PATH, _page_request(request, page_number), TransactionsPage, session
        )
        pages_read += 1
        if not response.success:
            _report_failed_page(session, page_number, response)
            return
        items, last = _page_items(response, predicate)
        for item in items:
            yield item
        if last:
            return
        page_number += 1


def transactions_sync(
    request: ReportRequest,
    predicate: Optional[Predicate] = None,
    max_pages: Optional[int] = None,
    session: Optional[Session] = None
) -> Iterator[Transaction]:
    """Blocking variant of ``transactions``; one event loop per page."""
    session = resolve_session(session)
    page_number = request.page
    pages_read = 0
    while max_pages is None or pages_read < max_pages:
        response = web_method.get_sync(
            TRANSACTIONS_REPORT_PATH, _page_request(request, page_number), TransactionsPage, session
        )
        pages_read += 1
        if not response.success:
            _report_failed_page(session, page_number, response)
            return
        items, last = _page_items(response, predicate)
        yield from items
        if last:
            return
        page_number += 1
