"""
Transport package.

Contains the abstract requester interface and its two implementations: the
httpx-backed network requester and the programmable mock.
"""

from shippingapi.transport.base import Requester
from shippingapi.transport.http import HttpRequester
from shippingapi.transport.mock import MockCall, MockRequester, MockResponse

__all__ = [
    "Requester",
    "HttpRequester",
    "MockRequester",
    "MockResponse",
    "MockCall",
]
