"""
Authenticated request orchestration.

Every API call goes through ``execute``. It makes sure the session holds a
valid bearer token (obtaining a new one when needed), hands the request to the
session's transport, retries transient failures within the session's attempt
and wall-clock budgets, records per-endpoint counters, and either returns the
response envelope or raises ``ShippingApiException`` when the session opts in.

The verb façades (``post``, ``get``, ``put``, ``delete``, ``delete_with_body``)
are fixed-arity wrappers around ``execute``; each has a blocking ``*_sync``
counterpart.
"""

import asyncio
import time
from typing import Any, Optional

from shippingapi.constants import (
    CLIENT_TIMEOUT,
    DESERIALIZATION_ERROR,
    SUPPORTED_HTTP_METHODS,
    TRANSIENT_ERROR_CODES,
    HttpVerb,
)
from shippingapi.exceptions import DeserializationError, ShippingApiException
from shippingapi.models.base import ShippingApiRequest, ShippingApiResponse
from shippingapi.session import Session, resolve_session

INVALID_TOKEN = "Invalid token"


def is_retryable(response: ShippingApiResponse) -> bool:
    """Return True if any error detail carries a transient error code."""
    return any(e.error_code in TRANSIENT_ERROR_CODES for e in response.errors)


def _elapsed(started: float) -> float:
    return time.perf_counter() - started


def _over_budget(started: float, session: Session) -> bool:
    return _elapsed(started) * 1000 > session.timeout_milliseconds


def _add_client_timeout(response: ShippingApiResponse) -> None:
    response.http_status = 408
    response.add_error(CLIENT_TIMEOUT)


async def _obtain_token(session: Session) -> ShippingApiResponse:
    token_response = await session.token_provider.obtain(session)
    token = token_response.api_response
    if token_response.success and (token is None or not token.access_token):
        return ShippingApiResponse.failure(
            401, INVALID_TOKEN, "Token endpoint did not return a usable access token"
        )
    return token_response


async def execute(
    uri: str,
    verb: str,
    request: ShippingApiRequest,
    response_type: Any = None,
    delete_body: bool = False,
    session: Optional[Session] = None
) -> ShippingApiResponse:
    """
    Perform an authenticated API call with retry.

    Args:
        uri: Endpoint path, e.g. ``/shippingservices/v1/rates``
        verb: HTTP verb (see ``constants.HttpVerb``)
        request: Request object; its ``authorization`` field is overwritten
        response_type: Type the success body is validated into
        delete_body: Whether a DELETE carries a JSON body
        session: Session to use (defaults to the process-wide default)

    Returns:
        ShippingApiResponse: Final envelope with ``request_time`` set

    Raises:
        ConfigurationError: If no session is given and no default is set
        ValueError: If ``uri`` is empty or ``verb`` is not supported
        ShippingApiException: If the session throws and the call failed
    """
    if not uri:
        raise ValueError("uri must not be empty")
    if verb not in SUPPORTED_HTTP_METHODS:
        raise ValueError(f"Unsupported HTTP verb: {verb}")
    session = resolve_session(session)

    attempts = max(1, session.retries)
    response: ShippingApiResponse = ShippingApiResponse()
    started = time.perf_counter()

    try:
        try:
            for attempt in range(1, attempts + 1):
                last_attempt = attempt == attempts
                session.log_debug(f"Calling {verb} {uri} (attempt {attempt}/{attempts})")

                access_token = session.valid_access_token()
                if access_token is None:
                    token_response = await _obtain_token(session)
                    if not token_response.success:
                        session.auth_token = None
                        session.log_warning(f"Token request failed: {token_response}")
                        if last_attempt:
                            response = ShippingApiResponse(
                                http_status=token_response.http_status,
                                errors=list(token_response.errors)
                            )
                            break
                        if _over_budget(started, session):
                            _add_client_timeout(response)
                            break
                        continue
                    session.auth_token = token_response.api_response
                    access_token = token_response.api_response.access_token

                request.authorization = access_token
                response = await session.requester.http_request(
                    uri, verb, request, response_type, delete_body, session
                )

                if response.success:
                    break
                if not is_retryable(response):
                    break
                if _over_budget(started, session):
                    _add_client_timeout(response)
                    break
                if not last_attempt:
                    session.log_warning(f"Transient error from {verb} {uri}, retrying: {response}")

        except DeserializationError as e:
            response = ShippingApiResponse.failure(500, DESERIALIZATION_ERROR, str(e))
            if session.throw_exceptions:
                raise ShippingApiException(response, "DeserializationError") from e
    finally:
        response.request_time = _elapsed(started)
        session.update_counters(uri, response.success, response.request_time)
        if not response.success:
            session.log_error(f"{verb} {uri} failed: {response}")

    if session.throw_exceptions and not response.success:
        raise ShippingApiException(response)
    return response


async def post(uri: str, request: ShippingApiRequest, response_type: Any = None,
               session: Optional[Session] = None) -> ShippingApiResponse:
    """Call a POST endpoint with the session's bearer token."""
    return await execute(uri, HttpVerb.POST, request, response_type, False, session)


async def get(uri: str, request: ShippingApiRequest, response_type: Any = None,
              session: Optional[Session] = None) -> ShippingApiResponse:
    """Call a GET endpoint; request fields go to the path and query string."""
    return await execute(uri, HttpVerb.GET, request, response_type, False, session)


async def put(uri: str, request: ShippingApiRequest, response_type: Any = None,
              session: Optional[Session] = None) -> ShippingApiResponse:
    """Call a PUT endpoint with the session's bearer token."""
    return await execute(uri, HttpVerb.PUT, request, response_type, False, session)


async def delete(uri: str, request: ShippingApiRequest, response_type: Any = None,
                 session: Optional[Session] = None) -> ShippingApiResponse:
    """Call a DELETE endpoint without a request body."""
    return await execute(uri, HttpVerb.DELETE, request, response_type, False, session)


async def delete_with_body(uri: str, request: ShippingApiRequest, response_type: Any = None,
                           session: Optional[Session] = None) -> ShippingApiResponse:
    """
    Call a DELETE endpoint that expects a JSON body.

    Whether DELETE may carry a body is ambiguous in the HTTP standards, but
    the shipment cancel endpoint requires one.
    """
    return await execute(uri, HttpVerb.DELETE, request, response_type, True, session)


# Blocking variants. Each runs its own event loop, so they must not be called
# from inside a running loop.

def post_sync(uri: str, request: ShippingApiRequest, response_type: Any = None,
              session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(post(uri, request, response_type, session))


def get_sync(uri: str, request: ShippingApiRequest, response_type: Any = None,
             session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(get(uri, request, response_type, session))


def put_sync(uri: str, request: ShippingApiRequest, response_type: Any = None,
             session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(put(uri, request, response_type, session))


def delete_sync(uri: str, request: ShippingApiRequest, response_type: Any = None,
                session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(delete(uri, request, response_type, session))


def delete_with_body_sync(uri: str, request: ShippingApiRequest, response_type: Any = None,
                          session: Optional[Session] = None) -> ShippingApiResponse:
    return asyncio.run(delete_with_body(uri, request, response_type, session))
