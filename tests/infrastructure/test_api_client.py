"""Tests for the storefront API client."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from storefront.infrastructure.api_client import APIError, StorefrontAPIClient


def _mock_http(client: StorefrontAPIClient, **request_kwargs):
    """Patch ``_get_client`` to return an AsyncMock HTTP client."""
    patcher = patch.object(client, "_get_client", new_callable=AsyncMock)
    mock_get_client = patcher.start()
    mock_http_client = AsyncMock()
    mock_http_client.request = AsyncMock(**request_kwargs)
    mock_get_client.return_value = mock_http_client
    return patcher, mock_http_client


def _mock_response(status_code: int, body=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    return response


class TestStorefrontAPIClient:
    """Tests for request handling and error capture."""

    @pytest.fixture
    def client(self):
        """Create a test client."""
        return StorefrontAPIClient(base_url="http://localhost:8082/api/v1/", timeout=5.0)

    def test_client_initialization(self, client):
        assert client.base_url == "http://localhost:8082/api/v1"
        assert client.timeout == 5.0
        assert client._client is None

    def test_defaults_from_settings(self):
        client = StorefrontAPIClient()

        assert client.base_url == "http://localhost:8082/api/v1"
        assert client.timeout == 30.0

    @pytest.mark.asyncio
    async def test_list_products_success(self, client):
        patcher, http = _mock_http(
            client, return_value=_mock_response(200, [{"_id": "p1", "name": "Ball", "cost": 10}])
        )
        try:
            result = await client.list_products()
        finally:
            patcher.stop()

        assert result.success is True
        assert result.status_code == 200
        assert result.data[0]["_id"] == "p1"
        assert http.request.call_args.kwargs["url"] == "/products"
        assert "Authorization" not in http.request.call_args.kwargs["headers"]

    @pytest.mark.asyncio
    async def test_error_with_server_message(self, client):
        patcher, _ = _mock_http(
            client,
            return_value=_mock_response(400, {"success": False, "message": "Cart is empty"}),
        )
        try:
            result = await client.checkout("token", "a1")
        finally:
            patcher.stop()

        assert result.success is False
        assert result.status_code == 400
        assert result.error.error_code == "HTTP_400"
        assert result.error.message == "Cart is empty"
        assert not result.error.is_transport_error

    @pytest.mark.asyncio
    async def test_error_without_message(self, client):
        patcher, _ = _mock_http(client, return_value=_mock_response(500, {"success": False}))
        try:
            result = await client.list_products()
        finally:
            patcher.stop()

        assert result.error.message is None
        assert result.error.user_message("fallback") == "fallback"

    @pytest.mark.asyncio
    async def test_error_with_non_json_body(self, client):
        response = _mock_response(502)
        response.json.side_effect = ValueError("not json")
        patcher, _ = _mock_http(client, return_value=response)
        try:
            result = await client.list_products()
        finally:
            patcher.stop()

        assert result.error.error_code == "HTTP_502"
        assert result.error.message is None

    @pytest.mark.asyncio
    async def test_no_content(self, client):
        patcher, _ = _mock_http(client, return_value=_mock_response(204))
        try:
            result = await client.delete_address("token", "a1")
        finally:
            patcher.stop()

        assert result.success is True
        assert result.data is None

    @pytest.mark.asyncio
    async def test_invalid_json(self, client):
        response = _mock_response(200)
        response.json.side_effect = ValueError("Expecting value")
        patcher, _ = _mock_http(client, return_value=response)
        try:
            result = await client.list_products()
        finally:
            patcher.stop()

        assert result.success is False
        assert result.error.error_code == "INVALID_RESPONSE"
        assert result.error.is_transport_error

    @pytest.mark.asyncio
    async def test_request_timeout(self, client):
        patcher, _ = _mock_http(
            client, side_effect=httpx.TimeoutException("Connection timeout")
        )
        try:
            result = await client.list_products()
        finally:
            patcher.stop()

        assert result.success is False
        assert result.error.error_code == "TIMEOUT"
        assert result.error.status_code is None
        assert result.error.message is None

    @pytest.mark.asyncio
    async def test_request_error(self, client):
        patcher, _ = _mock_http(client, side_effect=httpx.RequestError("Connection failed"))
        try:
            result = await client.get_cart("token")
        finally:
            patcher.stop()

        assert result.success is False
        assert result.error.error_code == "REQUEST_ERROR"
        assert result.error.details == {"reason": "Connection failed"}


class TestStorefrontAPIClientWire:
    """Tests for the requests sent over the wire, using a mock transport."""

    @pytest.fixture
    def captured(self) -> list[httpx.Request]:
        return []

    @pytest.fixture
    def client(self, captured):
        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=[])

        return StorefrontAPIClient(
            base_url="http://storefront.test/api/v1",
            transport=httpx.MockTransport(handler),
        )

    @pytest.mark.asyncio
    async def test_update_cart_body_and_auth(self, client, captured):
        async with client:
            await client.update_cart("secret", "p1", 2)

        request = captured[0]
        assert request.method == "POST"
        assert request.url.path == "/api/v1/cart"
        assert request.headers["Authorization"] == "Bearer secret"
        assert json.loads(request.content) == {"productId": "p1", "qty": 2}

    @pytest.mark.asyncio
    async def test_checkout_body(self, client, captured):
        async with client:
            await client.checkout("secret", "addr-9")

        request = captured[0]
        assert request.url.path == "/api/v1/cart/checkout"
        assert json.loads(request.content) == {"addressId": "addr-9"}

    @pytest.mark.asyncio
    async def test_search_query_parameter(self, client, captured):
        async with client:
            await client.search_products("smart watch")

        request = captured[0]
        assert request.url.path == "/api/v1/products/search"
        assert request.url.params["value"] == "smart watch"

    @pytest.mark.asyncio
    async def test_address_endpoints(self, client, captured):
        async with client:
            await client.add_address("secret", "12th street, Mumbai, India 400001")
            await client.delete_address("secret", "a1")

        assert json.loads(captured[0].content) == {"address": "12th street, Mumbai, India 400001"}
        assert captured[1].method == "DELETE"
        assert captured[1].url.path == "/api/v1/user/addresses/a1"

    @pytest.mark.asyncio
    async def test_login_body_is_unauthenticated(self, client, captured):
        async with client:
            await client.login("crio.do", "learnbydoing")

        request = captured[0]
        assert request.url.path == "/api/v1/auth/login"
        assert "Authorization" not in request.headers
        assert json.loads(request.content) == {"username": "crio.do", "password": "learnbydoing"}

    @pytest.mark.asyncio
    async def test_close_resets_client(self, client):
        await client.list_products()
        assert client._client is not None

        await client.close()

        assert client._client is None


class TestAPIError:
    def test_user_message_prefers_server_text(self):
        error = APIError(error_code="HTTP_400", message="Address not set", status_code=400)

        assert error.user_message("fallback") == "Address not set"

    def test_transport_error_has_no_status(self):
        assert APIError(error_code="TIMEOUT").is_transport_error
