"""
Client session.

A session holds everything the request orchestrator needs for a logical client
configuration: endpoint, transport, token provider, cached token, retry policy,
log hooks, configuration lookup and per-endpoint counters. Sessions are passed
explicitly to API calls; a process-wide default can be installed once at the
application entry point with ``set_default_session``.
"""

import threading
from typing import Callable, Optional

from shippingapi.config import Settings, settings as default_settings
from shippingapi.counters import Counters
from shippingapi.exceptions import ConfigurationError
from shippingapi.logger import get_logger
from shippingapi.models.base import AuthToken
from shippingapi.token import MockTokenProvider, OAuthTokenProvider, TokenProvider
from shippingapi.transport.base import Requester
from shippingapi.transport.http import HttpRequester
from shippingapi.transport.mock import MockRequester

logger = get_logger(__name__)

LogHook = Callable[[str], None]


class Session:
    """
    Mutable per-client context shared by every call made through it.

    The cached token and the counters are the only state mutated by calls;
    both are guarded by locks that are never held across an await.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        requester: Optional[Requester] = None,
        token_provider: Optional[TokenProvider] = None,
        retries: Optional[int] = None,
        timeout_milliseconds: Optional[int] = None,
        throw_exceptions: Optional[bool] = None,
        get_config_item: Optional[Callable[[str], Optional[str]]] = None,
        get_api_secret: Optional[Callable[[], str]] = None,
        log_debug: Optional[LogHook] = None,
        log_warning: Optional[LogHook] = None,
        log_error: Optional[LogHook] = None,
        log_config_error: Optional[LogHook] = None,
        config: Optional[Settings] = None
    ):
        """
        Initialize a session.

        Any argument left as None falls back to ``config`` (the global
        settings by default). Log hooks default to the ``shippingapi.session``
        logger, with configuration errors logged at CRITICAL.
        """
        cfg = config or default_settings

        self.endpoint = (endpoint or cfg.endpoint).rstrip("/")
        self.requester = requester or HttpRequester(timeout=cfg.http_timeout)
        self.token_provider = token_provider or OAuthTokenProvider(timeout=cfg.http_timeout)
        self.retries = cfg.retries if retries is None else retries
        self.timeout_milliseconds = cfg.timeout_milliseconds if timeout_milliseconds is None else timeout_milliseconds
        self.throw_exceptions = cfg.throw_exceptions if throw_exceptions is None else throw_exceptions

        self.get_config_item = get_config_item or cfg.config_item
        self.get_api_secret = get_api_secret

        self.log_debug = log_debug or logger.debug
        self.log_warning = log_warning or logger.warning
        self.log_error = log_error or logger.error
        self.log_config_error = log_config_error or logger.critical

        self.counters = Counters()

        self._token_lock = threading.Lock()
        self._auth_token: Optional[AuthToken] = None

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None, **overrides) -> "Session":
        """
        Build a session from settings.

        With ``mock`` enabled the session uses a ``MockRequester`` (loaded
        from ``mock_dir`` when set) and a ``MockTokenProvider``.
        """
        cfg = config or default_settings
        if cfg.mock:
            requester = MockRequester.from_directory(cfg.mock_dir) if cfg.mock_dir else MockRequester()
            overrides.setdefault("requester", requester)
            overrides.setdefault("token_provider", MockTokenProvider())
        return cls(config=cfg, **overrides)

    @property
    def auth_token(self) -> Optional[AuthToken]:
        with self._token_lock:
            return self._auth_token

    @auth_token.setter
    def auth_token(self, token: Optional[AuthToken]) -> None:
        with self._token_lock:
            self._auth_token = token

    def valid_access_token(self) -> Optional[str]:
        """Return the cached access token string, or None if missing or expired."""
        with self._token_lock:
            token = self._auth_token
            if token is not None and token.is_valid():
                return token.access_token
            return None

    def update_counters(self, uri: str, success: bool, elapsed: float) -> None:
        self.counters.record(uri, success, elapsed)

    def __repr__(self) -> str:
        return (
            f"Session(endpoint='{self.endpoint}', requester={self.requester!r}, "
            f"retries={self.retries}, timeout_milliseconds={self.timeout_milliseconds})"
        )


# Process-wide default session, installed by the application entry point
_default_session: Optional[Session] = None


def set_default_session(session: Optional[Session]) -> None:
    """Install (or clear, with None) the process-wide default session."""
    global _default_session
    _default_session = session


def get_default_session() -> Session:
    """
    Get the process-wide default session.

    Raises:
        ConfigurationError: If no default session has been installed
    """
    if _default_session is None:
        message = "No session given and no default session configured. Call set_default_session() first."
        logger.critical(message)
        raise ConfigurationError(message)
    return _default_session


def resolve_session(session: Optional[Session]) -> Session:
    return session if session is not None else get_default_session()
