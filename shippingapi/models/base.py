"""
Core wire models shared by every API call.

Defines the request base class that knows how to place its fields on the wire
(path, headers, query string, JSON body), the response envelope returned by
every call, error details and the OAuth token.
"""

import time
from string import Formatter
from typing import Any, ClassVar, Dict, Generic, List, Optional, Tuple, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field

T = TypeVar("T")

# Tokens are refreshed this many seconds before the server-side expiry
TOKEN_EXPIRY_MARGIN_SECONDS = 30


class ErrorDetail(BaseModel):
    """A single error reported by the server or synthesized by the client."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    error_code: str = Field(..., alias="errorCode")
    message: str = ""
    additional_info: Optional[Any] = Field(default=None, alias="additionalInfo")

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class AuthToken(BaseModel):
    """
    OAuth bearer token returned by the token endpoint.

    The token is treated as expired ``TOKEN_EXPIRY_MARGIN_SECONDS`` before the
    lifetime reported by the server runs out, measured from when the client
    received it. Short-lived tokens use half their lifetime as the margin.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    access_token: Optional[str] = None
    token_type: Optional[str] = Field(default=None, alias="tokenType")
    issued_at: Optional[int] = Field(default=None, alias="issuedAt")
    expires_in: Optional[int] = Field(default=None, alias="expiresIn")
    client_id: Optional[str] = Field(default=None, alias="clientID")

    _received_at: float = PrivateAttr(default_factory=time.time)

    def is_valid(self, now: Optional[float] = None) -> bool:
        """Return True if the token carries an access token that has not expired."""
        if self.access_token is None:
            return False
        if self.expires_in is None:
            return True
        now = time.time() if now is None else now
        margin = min(TOKEN_EXPIRY_MARGIN_SECONDS, self.expires_in / 2)
        return now < self._received_at + self.expires_in - margin


def token_is_valid(token: Optional[AuthToken]) -> bool:
    return token is not None and token.is_valid()


class ShippingApiResponse(BaseModel, Generic[T]):
    """
    Envelope returned for every API call.

    ``success`` is derived: a response succeeded if and only if it carries no
    error details and its HTTP status is 2xx. ``api_response`` is only set on
    success. ``request_time`` is the elapsed wall-clock time in seconds across
    all attempts.
    """

    api_response: Optional[T] = None
    http_status: int = 0
    errors: List[ErrorDetail] = Field(default_factory=list)
    request_time: float = 0.0

    @computed_field
    @property
    def success(self) -> bool:
        return not self.errors and 200 <= self.http_status < 300

    @classmethod
    def failure(cls, http_status: int, error_code: str, message: Optional[str] = None) -> "ShippingApiResponse":
        """Build a failed envelope carrying one error detail."""
        return cls(
            http_status=http_status,
            errors=[ErrorDetail(error_code=error_code, message=message or error_code)]
        )

    def add_error(self, error_code: str, message: Optional[str] = None) -> None:
        self.errors.append(ErrorDetail(error_code=error_code, message=message or error_code))

    def __str__(self) -> str:
        if self.success:
            return f"HTTP {self.http_status} OK ({self.request_time:.3f}s)"
        details = "; ".join(str(e) for e in self.errors) or "no error details"
        return f"HTTP {self.http_status} failed: {details}"


class ShippingApiRequest(BaseModel):
    """
    Base class for every request sent through the orchestrator.

    Subclasses declare where fields go on the wire:

    * ``{field_name}`` placeholders in the URI are filled from fields.
    * ``header_fields`` maps field names to HTTP header names.
    * ``query_fields`` lists fields sent in the query string even when the
      request has a JSON body.

    Every other non-None field goes to the query string for body-less calls
    and to the JSON body otherwise, using the field aliases.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    header_fields: ClassVar[Dict[str, str]] = {}
    query_fields: ClassVar[Tuple[str, ...]] = ()

    authorization: Optional[str] = Field(default=None, exclude=True)

    @staticmethod
    def path_fields(uri: str) -> List[str]:
        return [name for _, name, _, _ in Formatter().parse(uri) if name]

    def resource_path(self, uri: str) -> str:
        """
        Substitute path placeholders in ``uri`` with URL-quoted field values.

        Raises:
            ValueError: If a placeholder has no value on this request
        """
        values = {}
        for name in self.path_fields(uri):
            value = getattr(self, name, None)
            if value is None:
                raise ValueError(f"{type(self).__name__} has no value for path parameter '{name}'")
            values[name] = quote(str(value), safe="")
        return uri.format(**values)

    def headers(self) -> Dict[str, str]:
        headers = {}
        for field_name, header in self.header_fields.items():
            value = getattr(self, field_name, None)
            if value is not None:
                headers[header] = str(value)
        return headers

    def _dump(self, include: Optional[set] = None, exclude: Optional[set] = None) -> Dict[str, Any]:
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            include=include,
            exclude=exclude,
        )

    def _placed_fields(self, uri: str) -> set:
        return set(self.path_fields(uri)) | set(self.header_fields) | set(self.query_fields)

    def query_params(self, uri: str, has_body: bool) -> Dict[str, Any]:
        """Return the query string parameters for a call to ``uri``."""
        params = self._dump(include=set(self.query_fields)) if self.query_fields else {}
        if not has_body:
            params.update(self._dump(exclude=self._placed_fields(uri)))
        return params

    def body(self, uri: str) -> Dict[str, Any]:
        """Return the JSON body for a call to ``uri``."""
        return self._dump(exclude=self._placed_fields(uri))


class EmptyRequest(ShippingApiRequest):
    """Request without payload, for endpoints that only need authorization."""
    pass
