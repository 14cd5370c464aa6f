"""Pytest configuration and shared fixtures."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.domain.models import Address, AddressBook, CartRow, Product, Session
from storefront.infrastructure.api_client import APIError, APIResponse, StorefrontAPIClient
from storefront.infrastructure.notifier import InMemoryNotifier
from storefront.infrastructure.session_store import InMemorySessionStore


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def catalog() -> list[Product]:
    """A small product catalog."""
    return [
        Product(
            id="p1",
            name="Basketball",
            category="Sports",
            cost=Decimal("100"),
            rating=5,
            image_url="https://example.com/p1.png",
        ),
        Product(
            id="p2",
            name="Sunglasses",
            category="Fashion",
            cost=Decimal("49.50"),
            rating=4,
            image_url="https://example.com/p2.png",
        ),
        Product(
            id="p3",
            name="Headphones",
            category="Electronics",
            cost=Decimal("0"),
            rating=3,
        ),
    ]


@pytest.fixture
def cart_rows() -> list[CartRow]:
    """Cart with two units of p1 (total 200)."""
    return [CartRow(product_id="p1", qty=2)]


@pytest.fixture
def address_book() -> AddressBook:
    """Address book with one address, selected."""
    return AddressBook(
        addresses=[Address(id="addr-1", text="12th street, Mumbai, India 400001")],
        selected_id="addr-1",
    )


@pytest.fixture
def session() -> Session:
    """Logged-in session with a wallet balance of 1000."""
    return Session(token="test-token", username="crio.user", wallet_balance=Decimal("1000"))


@pytest.fixture
def session_store(session: Session) -> InMemorySessionStore:
    """Session store holding ``session``."""
    return InMemorySessionStore(
        {
            "token": session.token,
            "username": session.username,
            "balance": "1000",
        }
    )


@pytest.fixture
def notifier() -> InMemoryNotifier:
    """Notifier that records messages."""
    return InMemoryNotifier()


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest.fixture
def mock_api_client() -> MagicMock:
    """Create a mock storefront API client."""
    client = MagicMock(spec=StorefrontAPIClient)

    # Make all methods async
    client.list_products = AsyncMock()
    client.search_products = AsyncMock()
    client.get_cart = AsyncMock()
    client.update_cart = AsyncMock()
    client.checkout = AsyncMock()
    client.list_addresses = AsyncMock()
    client.add_address = AsyncMock()
    client.delete_address = AsyncMock()
    client.login = AsyncMock()
    client.register = AsyncMock()
    client.close = AsyncMock()

    return client


def make_success_response(data, status_code: int = 200) -> APIResponse:
    """Create a successful API response."""
    return APIResponse(success=True, data=data, status_code=status_code)


def make_error_response(
    status_code: int,
    message: str | None = None,
) -> APIResponse:
    """Create an HTTP error API response."""
    return APIResponse(
        success=False,
        status_code=status_code,
        error=APIError(
            error_code=f"HTTP_{status_code}",
            message=message,
            status_code=status_code,
        ),
    )


def make_transport_error_response(error_code: str = "REQUEST_ERROR") -> APIResponse:
    """Create a response for a request that never reached the server."""
    return APIResponse(
        success=False,
        error=APIError(error_code=error_code, details={"reason": "Connection refused"}),
    )
