"""Storefront API Client.

Thin HTTP client for the remote catalog/cart/order service. Handles
bearer authentication, error capture, and response parsing. Failures
never raise: they come back as an ``APIResponse`` with ``success=False``.
"""

from dataclasses import dataclass, field
from typing import Any, Self

import httpx
import structlog

from storefront.infrastructure.config import settings
from storefront.infrastructure.schemas import (
    AddressCreateRequest,
    CartItemRequest,
    CheckoutRequest,
    CredentialsRequest,
)

logger = structlog.get_logger()


@dataclass
class APIError:
    """Represents a failed API call.

    ``message`` is only set when the server supplied one in its body;
    transport failures (timeouts, refused connections, bad JSON) leave it
    empty so callers can fall back to a generic connectivity message.
    """

    error_code: str
    message: str | None = None
    status_code: int | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_transport_error(self) -> bool:
        return self.status_code is None

    def user_message(self, fallback: str) -> str:
        """Server-provided message if there is one, ``fallback`` otherwise."""
        return self.message or fallback


@dataclass
class APIResponse:
    """Represents an API response."""

    success: bool
    data: dict[str, Any] | list[Any] | None = None
    error: APIError | None = None
    status_code: int | None = None


class StorefrontAPIClient:
    """HTTP client for the storefront REST API.

    One method per endpoint. Authenticated endpoints take the session
    token and send it as a bearer token.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: Storefront API base URL; defaults to settings.
            timeout: Request timeout in seconds; defaults to settings.
            transport: Optional httpx transport (e.g. ASGI transport in tests).
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> APIResponse:
        """Make an API request.

        Args:
            method: HTTP method.
            path: API endpoint path.
            json: Request body as JSON.
            params: Query parameters.
            token: Session token for bearer authentication.

        Returns:
            APIResponse with success status and data or error.
        """
        client = await self._get_client()

        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            logger.debug(
                "Making API request",
                method=method,
                path=path,
                has_body=json is not None,
                authenticated=token is not None,
            )

            response = await client.request(
                method=method,
                url=path,
                json=json,
                params=params,
                headers=headers,
            )

            if response.status_code >= 400:
                return APIResponse(
                    success=False,
                    status_code=response.status_code,
                    error=APIError(
                        error_code=f"HTTP_{response.status_code}",
                        message=_server_message(response),
                        status_code=response.status_code,
                    ),
                )

            # Handle empty responses (204 No Content)
            if response.status_code == 204:
                return APIResponse(success=True, data=None, status_code=204)

            return APIResponse(
                success=True,
                data=response.json(),
                status_code=response.status_code,
            )

        except httpx.TimeoutException as e:
            logger.error("API request timeout", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(error_code="TIMEOUT", details={"reason": str(e)}),
            )
        except httpx.RequestError as e:
            logger.error("API request failed", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(error_code="REQUEST_ERROR", details={"reason": str(e)}),
            )
        except ValueError as e:
            logger.error("API returned invalid JSON", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(error_code="INVALID_RESPONSE", details={"reason": str(e)}),
            )

    # =========================================================================
    # Product Endpoints
    # =========================================================================

    async def list_products(self) -> APIResponse:
        """List all products.

        Returns:
            APIResponse with a list of products.
        """
        return await self._request(method="GET", path="/products")

    async def search_products(self, query: str) -> APIResponse:
        """Search products by name or category.

        Args:
            query: Text to search for.

        Returns:
            APIResponse with matching products; 404 when nothing matches.
        """
        return await self._request(
            method="GET",
            path="/products/search",
            params={"value": query},
        )

    # =========================================================================
    # Cart Endpoints
    # =========================================================================

    async def get_cart(self, token: str) -> APIResponse:
        """Get the user's cart rows."""
        return await self._request(method="GET", path="/cart", token=token)

    async def update_cart(self, token: str, product_id: str, qty: int) -> APIResponse:
        """Add or update a cart item.

        Args:
            token: Session token.
            product_id: Product to add or update.
            qty: Desired quantity; 0 removes the row.

        Returns:
            APIResponse with the updated cart rows.
        """
        body = CartItemRequest(product_id=product_id, qty=qty)
        return await self._request(
            method="POST",
            path="/cart",
            json=body.model_dump(by_alias=True),
            token=token,
        )

    async def checkout(self, token: str, address_id: str) -> APIResponse:
        """Place an order for the current cart.

        Args:
            token: Session token.
            address_id: Shipping address identifier.

        Returns:
            APIResponse with ``{"success": bool}``.
        """
        body = CheckoutRequest(address_id=address_id)
        return await self._request(
            method="POST",
            path="/cart/checkout",
            json=body.model_dump(by_alias=True),
            token=token,
        )

    # =========================================================================
    # Address Endpoints
    # =========================================================================

    async def list_addresses(self, token: str) -> APIResponse:
        """List the user's saved addresses."""
        return await self._request(method="GET", path="/user/addresses", token=token)

    async def add_address(self, token: str, text: str) -> APIResponse:
        """Save a new address.

        Returns:
            APIResponse with the full updated address list.
        """
        body = AddressCreateRequest(address=text)
        return await self._request(
            method="POST",
            path="/user/addresses",
            json=body.model_dump(by_alias=True),
            token=token,
        )

    async def delete_address(self, token: str, address_id: str) -> APIResponse:
        """Delete a saved address.

        Returns:
            APIResponse with the full updated address list.
        """
        return await self._request(
            method="DELETE",
            path=f"/user/addresses/{address_id}",
            token=token,
        )

    # =========================================================================
    # Auth Endpoints
    # =========================================================================

    async def login(self, username: str, password: str) -> APIResponse:
        """Log in and obtain a session token and wallet balance."""
        body = CredentialsRequest(username=username, password=password)
        return await self._request(
            method="POST",
            path="/auth/login",
            json=body.model_dump(),
        )

    async def register(self, username: str, password: str) -> APIResponse:
        """Register a new user."""
        body = CredentialsRequest(username=username, password=password)
        return await self._request(
            method="POST",
            path="/auth/register",
            json=body.model_dump(),
        )


def _server_message(response: httpx.Response) -> str | None:
    """Extract ``message`` from an error body, if the body has one."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    message = data.get("message")
    return message if isinstance(message, str) and message else None
