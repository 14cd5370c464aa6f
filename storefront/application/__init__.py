"""Application layer module.

Contains application services (use cases) that orchestrate
domain logic and infrastructure.
"""

from storefront.application.address_service import AddressService
from storefront.application.auth_service import AuthService
from storefront.application.cart_service import CartService
from storefront.application.catalog_service import (
    CatalogService,
    SearchDebouncer,
    SearchResult,
)
from storefront.application.checkout_service import CheckoutOutcome, CheckoutService

__all__ = [
    "AddressService",
    "AuthService",
    "CartService",
    "CatalogService",
    "SearchDebouncer",
    "SearchResult",
    "CheckoutOutcome",
    "CheckoutService",
]
