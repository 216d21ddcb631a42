"""
Abstract base class for transports.

This module defines the interface every requester implements, plus the body
parsing helpers shared by the real HTTP requester and the mock so both turn
malformed payloads into the same ``DeserializationError``.
"""

import json
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from shippingapi.exceptions import DeserializationError
from shippingapi.models.base import ErrorDetail, ShippingApiRequest, ShippingApiResponse


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


def parse_json(raw: Union[str, bytes, None]) -> Any:
    """
    Decode a JSON payload.

    Raises:
        DeserializationError: If the payload is not UTF-8 or not valid JSON
    """
    if raw is None:
        return None
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DeserializationError(f"Response is not valid UTF-8: {str(e)}") from e
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise DeserializationError(f"Invalid JSON response: {str(e)}") from e


def parse_response_body(raw: Union[str, bytes, None], response_type: Any) -> Any:
    """
    Decode a successful response body into ``response_type``.

    Args:
        raw: Raw response body
        response_type: Pydantic model, ``List[Model]`` or any type a
                       ``TypeAdapter`` accepts. None returns the decoded JSON.

    Returns:
        The validated response object, or None for an empty body

    Raises:
        DeserializationError: If the body is not JSON or does not validate
    """
    data = parse_json(raw)
    if data is None or response_type is None:
        return data
    return validate_response_data(data, response_type)


def validate_response_data(data: Any, response_type: Any) -> Any:
    try:
        return _adapter(response_type).validate_python(data)
    except ValidationError as e:
        raise DeserializationError(
            f"Response does not match {getattr(response_type, '__name__', response_type)}: {str(e)}"
        ) from e


def parse_error_details(
    http_status: int,
    raw: Union[str, bytes, None],
    reason: Optional[str] = None
) -> List[ErrorDetail]:
    """
    Extract error details from an error response body.

    Accepts ``{"errors": [...]}``, a bare list of errors, or a single error
    object. Bodies that match none of these shapes produce one detail keyed by
    the HTTP status.
    """
    fallback_message = reason or f"HTTP {http_status}"
    try:
        data = parse_json(raw)
    except DeserializationError:
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else (raw or "")
        return [ErrorDetail(error_code=str(http_status), message=text.strip() or fallback_message)]

    if isinstance(data, dict) and isinstance(data.get("errors"), list):
        items = data["errors"]
    elif isinstance(data, list):
        items = data
    elif isinstance(data, dict) and ("errorCode" in data or "error_code" in data):
        items = [data]
    else:
        items = []

    details = []
    for item in items:
        if not isinstance(item, dict):
            continue
        code = item.get("errorCode") or item.get("error_code") or item.get("key") or str(http_status)
        message = item.get("message") or item.get("errorDescription") or fallback_message
        details.append(ErrorDetail(
            error_code=str(code),
            message=str(message),
            additional_info=item.get("additionalInfo"),
        ))

    if not details:
        details.append(ErrorDetail(error_code=str(http_status), message=fallback_message))
    return details


class Requester(ABC):
    """
    Abstract base class for transports.

    A requester performs exactly one HTTP exchange and reports the outcome as a
    response envelope. Retry, timeout and token handling belong to the
    orchestrator, never to the requester.
    """

    @abstractmethod
    async def http_request(
        self,
        uri: str,
        verb: str,
        request: ShippingApiRequest,
        response_type: Any,
        delete_body: bool,
        session: Any
    ) -> ShippingApiResponse:
        """
        Perform one HTTP call.

        Args:
            uri: Endpoint path, possibly containing ``{field}`` placeholders
            verb: HTTP verb (see ``constants.HttpVerb``)
            request: Request carrying the authorization token and payload
            response_type: Type the success body is validated into
            delete_body: Whether a DELETE carries a JSON body
            session: Session supplying the endpoint and log hooks

        Returns:
            ShippingApiResponse: Envelope with the parsed body or error details

        Raises:
            DeserializationError: If a success body cannot be parsed
        """
        pass

    @property
    @abstractmethod
    def requester_name(self) -> str:
        """Human-readable name of the requester."""
        pass

    def __str__(self) -> str:
        return f"{self.requester_name} requester"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(requester_name='{self.requester_name}')"
