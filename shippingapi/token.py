"""
OAuth token providers.

A token provider performs one exchange with the token endpoint and reports the
outcome as a response envelope. It never retries and never raises for HTTP or
network failures; the orchestrator layers its retry and timeout policy around
repeated calls.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Union

import httpx

from shippingapi.config import settings
from shippingapi.constants import CONFIGURATION_ERROR, NETWORK_ERROR, TOKEN_PATH
from shippingapi.exceptions import DeserializationError
from shippingapi.models.base import AuthToken, ShippingApiResponse
from shippingapi.transport.base import parse_error_details, parse_response_body


class TokenProvider(ABC):
    """Abstract base class for token providers."""

    @abstractmethod
    async def obtain(self, session: Any) -> ShippingApiResponse:
        """
        Obtain a fresh bearer token.

        Args:
            session: Session supplying endpoint, credentials and log hooks

        Returns:
            ShippingApiResponse: Envelope whose ``api_response`` is an
                                 ``AuthToken`` on success

        Raises:
            DeserializationError: If the token endpoint returns a malformed body
        """
        pass


class OAuthTokenProvider(TokenProvider):
    """
    Client-credentials token provider.

    Posts ``grant_type=client_credentials`` to ``{endpoint}/oauth/token`` with
    the API key and secret as HTTP Basic credentials.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None
    ):
        self._transport = transport
        self.timeout = timeout or settings.http_timeout

    @staticmethod
    def _credentials(session: Any):
        api_key = session.get_config_item("ApiKey")
        if session.get_api_secret is not None:
            api_secret = session.get_api_secret()
        else:
            api_secret = session.get_config_item("ApiSecret")
        return api_key, api_secret

    async def obtain(self, session: Any) -> ShippingApiResponse:
        api_key, api_secret = self._credentials(session)
        if not api_key or not api_secret:
            message = "ApiKey and ApiSecret must be configured to obtain an access token"
            session.log_config_error(message)
            return ShippingApiResponse.failure(401, CONFIGURATION_ERROR, message)

        url = f"{session.endpoint}{TOKEN_PATH}"
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport
            ) as client:
                response = await client.post(
                    url,
                    data={"grant_type": "client_credentials"},
                    auth=httpx.BasicAuth(api_key, api_secret),
                    headers={"Accept": "application/json"}
                )
        except httpx.HTTPError as e:
            session.log_warning(f"Token request to {url} failed: {type(e).__name__}: {str(e)}")
            return ShippingApiResponse.failure(503, NETWORK_ERROR, f"{type(e).__name__}: {str(e)}")

        if response.is_success:
            token = parse_response_body(response.content, AuthToken)
            if token is None:
                raise DeserializationError("Empty token response")
            session.log_debug(f"Obtained access token from {url}")
            return ShippingApiResponse(api_response=token, http_status=response.status_code)

        return ShippingApiResponse(
            http_status=response.status_code,
            errors=parse_error_details(response.status_code, response.content, response.reason_phrase)
        )


TokenResult = Union[ShippingApiResponse, AuthToken, str, Exception]


class MockTokenProvider(TokenProvider):
    """
    Token provider returning programmed results in order.

    Each result is an access token string, an ``AuthToken``, a full response
    envelope (e.g. a failure) or an exception to raise. The last result repeats.
    ``calls`` counts every ``obtain`` call.
    """

    def __init__(self, *results: TokenResult):
        self._results: List[TokenResult] = list(results) or ["mock-access-token"]
        self.calls = 0

    async def obtain(self, session: Any) -> ShippingApiResponse:
        self.calls += 1
        result = self._results.pop(0) if len(self._results) > 1 else self._results[0]
        if isinstance(result, Exception):
            raise result
        if isinstance(result, ShippingApiResponse):
            return result.model_copy(deep=True)
        if isinstance(result, AuthToken):
            token = result.model_copy()
        else:
            token = AuthToken(access_token=result)
        return ShippingApiResponse(api_response=token, http_status=200)
