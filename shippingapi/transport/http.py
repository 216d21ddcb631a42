"""
HTTP requester backed by httpx.

Serializes a ``ShippingApiRequest`` onto the wire (path, headers, query string,
JSON body), performs exactly one exchange and turns the reply into a response
envelope.
"""

from typing import Any, Dict, Optional

import httpx

from shippingapi._version import __version__
from shippingapi.config import settings
from shippingapi.constants import NETWORK_ERROR, HttpVerb
from shippingapi.models.base import ShippingApiRequest, ShippingApiResponse
from shippingapi.transport.base import Requester, parse_error_details, parse_response_body


def has_body(verb: str, delete_body: bool) -> bool:
    """Return True if a call with ``verb`` sends a JSON body."""
    if verb == HttpVerb.DELETE:
        return delete_body
    return verb in (HttpVerb.POST, HttpVerb.PUT)


class HttpRequester(Requester):
    """
    Requester performing real HTTP calls.

    By default a short-lived ``httpx.AsyncClient`` is opened per call, which
    keeps the requester usable from the blocking façades (each runs its own
    event loop). Pass ``client`` to reuse a pooled client inside one event
    loop, or ``transport`` to swap the network layer (e.g. ``httpx.MockTransport``).
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None
    ):
        self._client = client
        self._transport = transport
        self.timeout = timeout or settings.http_timeout

    @property
    def requester_name(self) -> str:
        return "HTTP"

    def build_headers(self, request: ShippingApiRequest, with_body: bool) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"shippingapi-python/{__version__}",
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        if request.authorization:
            headers["Authorization"] = f"Bearer {request.authorization}"
        headers.update(request.headers())
        return headers

    async def _send(self, verb: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(verb, url, **kwargs)
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport
        ) as client:
            return await client.request(verb, url, **kwargs)

    async def http_request(
        self,
        uri: str,
        verb: str,
        request: ShippingApiRequest,
        response_type: Any,
        delete_body: bool,
        session: Any
    ) -> ShippingApiResponse:
        with_body = has_body(verb, delete_body)
        url = f"{session.endpoint}{request.resource_path(uri)}"
        kwargs: Dict[str, Any] = {"headers": self.build_headers(request, with_body)}

        params = request.query_params(uri, with_body)
        if params:
            kwargs["params"] = params
        if with_body:
            kwargs["json"] = request.body(uri)

        try:
            response = await self._send(verb, url, **kwargs)
        except httpx.HTTPError as e:
            session.log_warning(f"{verb} {url} failed: {type(e).__name__}: {str(e)}")
            return ShippingApiResponse.failure(503, NETWORK_ERROR, f"{type(e).__name__}: {str(e)}")

        session.log_debug(f"{verb} {url} -> {response.status_code}")

        if response.is_success:
            return ShippingApiResponse(
                api_response=parse_response_body(response.content, response_type),
                http_status=response.status_code
            )

        return ShippingApiResponse(
            http_status=response.status_code,
            errors=parse_error_details(response.status_code, response.content, response.reason_phrase)
        )
