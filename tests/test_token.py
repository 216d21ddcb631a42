import base64
from urllib.parse import parse_qs

import httpx
import pytest

from shippingapi.constants import CONFIGURATION_ERROR, NETWORK_ERROR
from shippingapi.exceptions import DeserializationError
from shippingapi.models.base import AuthToken, ShippingApiResponse
from shippingapi.token import MockTokenProvider, OAuthTokenProvider
from shippingapi.transport.mock import MockRequester

from tests.conftest import make_session

TOKEN_BODY = {
    "access_token": "tok-123",
    "tokenType": "BearerToken",
    "issuedAt": 1562000000000,
    "expiresIn": 35999,
    "clientID": "client-1",
}


def basic(key: str, secret: str) -> str:
    return "Basic " + base64.b64encode(f"{key}:{secret}".encode()).decode()


def provider_for(handler) -> OAuthTokenProvider:
    return OAuthTokenProvider(transport=httpx.MockTransport(handler))


class TestOAuthTokenProvider:
    async def test_client_credentials_exchange(self, log):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=TOKEN_BODY)

        session = make_session(MockRequester(), None, log)
        response = await provider_for(handler).obtain(session)

        assert response.success
        assert isinstance(response.api_response, AuthToken)
        assert response.api_response.access_token == "tok-123"
        assert response.api_response.client_id == "client-1"

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.example.test/oauth/token"
        assert request.headers["Authorization"] == basic("test-key", "test-secret")
        assert parse_qs(request.content.decode()) == {"grant_type": ["client_credentials"]}
        assert log.messages("debug")

    async def test_secret_hook_takes_precedence(self, log):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=TOKEN_BODY)

        session = make_session(MockRequester(), None, log, get_api_secret=lambda: "vault-secret")
        await provider_for(handler).obtain(session)

        assert seen[0].headers["Authorization"] == basic("test-key", "vault-secret")

    async def test_missing_credentials_are_a_configuration_error(self, log):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        session = make_session(MockRequester(), None, log, get_config_item=lambda key: None)
        response = await provider_for(handler).obtain(session)

        assert response.http_status == 401
        assert response.errors[0].error_code == CONFIGURATION_ERROR
        assert len(log.messages("config_error")) == 1

    async def test_rejected_credentials(self, log):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"errorCode": "PB-APIM-ERR-1001", "message": "Invalid API key"})

        session = make_session(MockRequester(), None, log)
        response = await provider_for(handler).obtain(session)

        assert not response.success
        assert response.http_status == 401
        assert response.errors[0].error_code == "PB-APIM-ERR-1001"

    async def test_network_error(self, log):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        session = make_session(MockRequester(), None, log)
        response = await provider_for(handler).obtain(session)

        assert response.http_status == 503
        assert response.errors[0].error_code == NETWORK_ERROR
        assert log.messages("warning")

    @pytest.mark.parametrize("content", [b"not json", b""])
    async def test_malformed_token_body(self, log, content):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=content)

        session = make_session(MockRequester(), None, log)

        with pytest.raises(DeserializationError):
            await provider_for(handler).obtain(session)


class TestMockTokenProvider:
    async def test_default_token(self, session):
        response = await MockTokenProvider().obtain(session)

        assert response.api_response.access_token == "mock-access-token"

    async def test_results_in_order_and_last_repeats(self, session):
        failure = ShippingApiResponse.failure(401, "PB-APIM-ERR-1001")
        provider = MockTokenProvider(failure, AuthToken(access_token="t2"), "t3")

        results = [await provider.obtain(session) for _ in range(4)]

        assert not results[0].success
        assert results[1].api_response.access_token == "t2"
        assert results[2].api_response.access_token == "t3"
        assert results[3].api_response.access_token == "t3"
        assert provider.calls == 4

    async def test_exception_is_raised(self, session):
        provider = MockTokenProvider(DeserializationError("bad token body"))

        with pytest.raises(DeserializationError):
            await provider.obtain(session)
