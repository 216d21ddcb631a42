"""
shippingapi - Python client for the Pitney Bowes Shipping API.

Every call flows through ``web_method.execute``, which attaches an OAuth bearer
token from the session, retries transient failures within the session's
budget, records per-endpoint counters and returns a ``ShippingApiResponse``
envelope (or raises ``ShippingApiException`` when the session opts in).
"""

from shippingapi._version import __version__, __version_info__
from shippingapi.config import settings
from shippingapi.exceptions import ConfigurationError, ShippingApiError, ShippingApiException
from shippingapi.logger import logger
from shippingapi.models.base import AuthToken, ErrorDetail, ShippingApiRequest, ShippingApiResponse
from shippingapi.session import Session, get_default_session, set_default_session

__all__ = [
    "settings",
    "logger",
    "Session",
    "get_default_session",
    "set_default_session",
    "AuthToken",
    "ErrorDetail",
    "ShippingApiRequest",
    "ShippingApiResponse",
    "ShippingApiError",
    "ShippingApiException",
    "ConfigurationError",
    "__version__",
    "__version_info__",
]
