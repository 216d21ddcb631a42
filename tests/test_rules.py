from shippingapi.constants import COUNTRIES_PATH
from shippingapi.rules import CountryRule
from shippingapi.session import set_default_session
from shippingapi.transport.mock import MockResponse

COUNTRIES = [
    {"countryCode": "CA", "countryName": "Canada"},
    {"countryCode": "MX", "countryName": "Mexico"},
]


def test_validate_uses_downloaded_list(session, requester):
    requester.program(COUNTRIES_PATH, MockResponse(body=COUNTRIES))
    rule = CountryRule(session)

    assert rule.validate("CA")
    assert not rule.validate("ZZ")
    assert rule.rules == {"CA": "Canada", "MX": "Mexico"}


def test_list_is_cached(session, requester):
    requester.program(COUNTRIES_PATH, MockResponse(body=COUNTRIES))
    rule = CountryRule(session)

    rule.validate("CA")
    rule.validate("MX")

    assert len(requester.calls_to(COUNTRIES_PATH)) == 1
    assert requester.calls[0].request.origin_country_code == "US"


def test_stale_list_is_reloaded(session, requester):
    requester.program(COUNTRIES_PATH, MockResponse(body=COUNTRIES))
    rule = CountryRule(session, ttl=3600)
    rule.validate("CA")

    rule.last_update -= 3601
    rule.validate("CA")

    assert len(requester.calls_to(COUNTRIES_PATH)) == 2


def test_failed_reload_keeps_previous_list(session, requester, log):
    requester.program(
        COUNTRIES_PATH,
        MockResponse(body=COUNTRIES),
        MockResponse.error("PB-APIM-ERR-1002", "Service unavailable", status=503),
    )
    rule = CountryRule(session)
    rule.load()

    rule.load(force=True)

    assert rule.validate("MX")
    assert any("Country rules could not be loaded" in m for m in log.messages("error"))


def test_uses_default_session(session, requester):
    requester.program(COUNTRIES_PATH, MockResponse(body=COUNTRIES))
    set_default_session(session)

    rule = CountryRule(carrier="USPS", origin_country_code="US")

    assert rule.session is session
    assert rule.validate("CA")
