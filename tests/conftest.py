from pathlib import Path
from typing import List, Tuple

import pytest

from shippingapi.session import Session, set_default_session
from shippingapi.token import MockTokenProvider
from shippingapi.transport.mock import MockRequester

ENDPOINT = "https://api.example.test"
FIXTURES = Path(__file__).parent / "fixtures"
MOCK_RESPONSES = FIXTURES / "mock_responses"

CONFIG = {
    "ApiKey": "test-key",
    "ApiSecret": "test-secret",
    "ShipperID": "9024324564",
    "DeveloperID": "44397664",
}


class LogRecorder:
    """Collects messages sent to a session's log hooks."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str]] = []

    def hook(self, level: str):
        return lambda message: self.records.append((level, message))

    def messages(self, level: str) -> List[str]:
        return [message for lvl, message in self.records if lvl == level]


@pytest.fixture
def log() -> LogRecorder:
    return LogRecorder()


@pytest.fixture
def requester() -> MockRequester:
    return MockRequester()


@pytest.fixture
def token_provider() -> MockTokenProvider:
    return MockTokenProvider("token-1")


def make_session(requester, token_provider, log: LogRecorder = None, **overrides) -> Session:
    log = log or LogRecorder()
    options = dict(
        endpoint=ENDPOINT,
        requester=requester,
        token_provider=token_provider,
        retries=3,
        timeout_milliseconds=5000,
        throw_exceptions=False,
        get_config_item=CONFIG.get,
        log_debug=log.hook("debug"),
        log_warning=log.hook("warning"),
        log_error=log.hook("error"),
        log_config_error=log.hook("config_error"),
    )
    options.update(overrides)
    return Session(**options)


@pytest.fixture
def session(requester, token_provider, log) -> Session:
    return make_session(requester, token_provider, log)


@pytest.fixture(autouse=True)
def reset_default_session():
    yield
    set_default_session(None)
