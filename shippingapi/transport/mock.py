"""
Deterministic mock requester.

Returns pre-programmed responses keyed by endpoint URI or request type, without
any network access. Each key holds a queue of responses that is consumed in
order; the last response repeats once the queue is down to one entry. That is
enough to script retry paths such as "transient error twice, then success".
"""

import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from shippingapi.logger import get_logger
from shippingapi.models.base import ErrorDetail, ShippingApiRequest, ShippingApiResponse
from shippingapi.transport.base import (
    Requester,
    parse_error_details,
    parse_response_body,
    validate_response_data,
)

logger = get_logger(__name__)

ErrorLike = Union[ErrorDetail, Tuple[str, str], str]

MOCK_NOT_PROGRAMMED = "Mock not programmed"


def _to_error_detail(item: ErrorLike) -> ErrorDetail:
    if isinstance(item, ErrorDetail):
        return item.model_copy()
    if isinstance(item, tuple):
        code, message = item
        return ErrorDetail(error_code=code, message=message)
    return ErrorDetail(error_code=item, message=item)


@dataclass
class MockResponse:
    """
    One programmed reply.

    ``body`` may be a dict or list (validated into the response type) or a raw
    string (parsed exactly like a network body, so malformed JSON raises
    ``DeserializationError``). ``delay`` is awaited before replying.
    """
    status: int = 200
    body: Any = None
    errors: Sequence[ErrorLike] = ()
    delay: float = 0.0

    @classmethod
    def error(cls, code: str, message: Optional[str] = None, status: int = 400, delay: float = 0.0) -> "MockResponse":
        return cls(status=status, errors=[(code, message or code)], delay=delay)

    def to_response(self, response_type: Any) -> ShippingApiResponse:
        if self.errors:
            return ShippingApiResponse(
                http_status=self.status,
                errors=[_to_error_detail(e) for e in self.errors]
            )
        if not 200 <= self.status < 300:
            raw = self.body if isinstance(self.body, str) or self.body is None else json.dumps(self.body)
            return ShippingApiResponse(
                http_status=self.status,
                errors=parse_error_details(self.status, raw)
            )
        if isinstance(self.body, (str, bytes)):
            api_response = parse_response_body(self.body, response_type)
        elif self.body is None or response_type is None:
            api_response = self.body
        else:
            api_response = validate_response_data(self.body, response_type)
        return ShippingApiResponse(api_response=api_response, http_status=self.status)


@dataclass
class MockCall:
    """A call observed by the mock."""
    verb: str
    uri: str
    request: ShippingApiRequest
    authorization: Optional[str]
    delete_body: bool = False


@dataclass
class _Program:
    responses: List[MockResponse] = field(default_factory=list)

    def next(self) -> MockResponse:
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class MockRequester(Requester):
    """
    Requester returning programmed responses.

    Usage:
        mock = MockRequester()
        mock.program("/shippingservices/v1/rates",
                     MockResponse.error("PB-APIM-ERR-1003", status=429),
                     MockResponse(body={"rates": []}))

    Lookups try the endpoint URI first, then the request type, then the
    default response. Unmatched calls get a 404 envelope.
    """

    def __init__(self, default: Optional[MockResponse] = None):
        self._programs: Dict[Any, _Program] = {}
        self.default = default
        self.calls: List[MockCall] = []

    @property
    def requester_name(self) -> str:
        return "Mock"

    def program(self, key: Any, *responses: MockResponse) -> "MockRequester":
        """
        Queue responses for a URI (str) or request type (class).

        Returns:
            MockRequester: self, for chaining
        """
        if not responses:
            raise ValueError("At least one response must be programmed")
        self._programs[key] = _Program(list(responses))
        return self

    def calls_to(self, uri: str) -> List[MockCall]:
        return [c for c in self.calls if c.uri == uri]

    def reset(self) -> None:
        self._programs.clear()
        self.calls.clear()

    def _next(self, uri: str, request_type: type) -> Optional[MockResponse]:
        for key in (uri, request_type):
            program = self._programs.get(key)
            if program is not None:
                return program.next()
        return self.default

    async def http_request(
        self,
        uri: str,
        verb: str,
        request: ShippingApiRequest,
        response_type: Any,
        delete_body: bool,
        session: Any
    ) -> ShippingApiResponse:
        self.calls.append(MockCall(verb, uri, request, request.authorization, delete_body))
        reply = self._next(uri, type(request))
        if reply is None:
            logger.warning(f"No mock response programmed for {verb} {uri}")
            return ShippingApiResponse.failure(404, MOCK_NOT_PROGRAMMED, f"{verb} {uri}")
        if reply.delay:
            await asyncio.sleep(reply.delay)
        return reply.to_response(response_type)

    @staticmethod
    def file_name_for(uri: str) -> str:
        """Canned response file name for ``uri``: path segments joined by dots."""
        return ".".join(segment for segment in uri.split("/") if segment) + ".json"

    @classmethod
    def from_directory(cls, path: Union[str, Path]) -> "MockRequester":
        """
        Build a mock from a directory of canned JSON responses.

        Each ``<segment>.<segment>....json`` file answers the URI made of the
        same segments, e.g. ``shippingservices.v1.rates.json`` answers
        ``/shippingservices/v1/rates``.
        """
        directory = Path(path)
        if not directory.is_dir():
            raise FileNotFoundError(f"Mock response directory not found: {directory}")
        mock = cls()
        for file in sorted(directory.glob("*.json")):
            uri = "/" + "/".join(file.name[:-len(".json")].split("."))
            mock.program(uri, MockResponse(body=file.read_text(encoding="utf-8")))
            logger.debug(f"Loaded mock response for {uri} from {file.name}")
        return mock
