"""Cart application service.

Fetches and updates the server-persisted cart. The server returns the
full updated cart after every change; callers replace their local rows
with it.
"""

from collections.abc import Sequence

import structlog
from pydantic import ValidationError

from storefront.domain.cart import CartSummary, find_row, summarize_cart
from storefront.domain.models import CartRow, Product
from storefront.infrastructure.api_client import StorefrontAPIClient
from storefront.infrastructure.notifier import Notifier, Severity
from storefront.infrastructure.schemas import parse_cart

logger = structlog.get_logger()

FETCH_CART_MESSAGE = (
    "Could not fetch cart details. Check that the backend is running, "
    "reachable and returns valid JSON."
)
UPDATE_CART_MESSAGE = (
    "Could not update the cart. Check that the backend is running, "
    "reachable and returns valid JSON."
)
LOGIN_REQUIRED_MESSAGE = "Login to add an item to the Cart"
DUPLICATE_ITEM_MESSAGE = (
    "Item already in cart. Use the cart sidebar to update quantity or remove item."
)


class CartService:
    """Application service for the user's cart."""

    def __init__(self, api_client: StorefrontAPIClient, notifier: Notifier) -> None:
        self.api_client = api_client
        self.notifier = notifier

    async def fetch_cart(self, token: str | None) -> list[CartRow] | None:
        """Fetch the user's cart rows.

        Returns:
            Cart rows, or None if not logged in or the call failed.
        """
        if not token:
            return None

        response = await self.api_client.get_cart(token)
        if not response.success:
            error = response.error
            if error is not None and error.status_code == 400 and error.message:
                message = error.message
            else:
                message = FETCH_CART_MESSAGE
            logger.error("Cart fetch failed", status_code=response.status_code)
            self.notifier.notify(message, Severity.ERROR)
            return None

        return self._parse(response.data, FETCH_CART_MESSAGE)

    async def add_to_cart(
        self,
        token: str | None,
        cart_rows: Sequence[CartRow],
        product_id: str,
        qty: int,
        prevent_duplicate: bool = False,
    ) -> list[CartRow] | None:
        """Add a product to the cart or set its quantity.

        Args:
            token: Session token; a warning is shown when missing.
            cart_rows: Current cart rows, used for the duplicate check.
            product_id: Product to add or update.
            qty: Desired quantity; 0 removes the product.
            prevent_duplicate: Refuse (with a warning) if the product is
                already in the cart. Used by the product card's
                "Add to cart" button.

        Returns:
            The updated cart rows, or None if nothing changed.
        """
        if not token:
            self.notifier.notify(LOGIN_REQUIRED_MESSAGE, Severity.WARNING)
            return None

        if qty < 0:
            logger.error("Refusing negative cart quantity", product_id=product_id, qty=qty)
            return None

        if prevent_duplicate and find_row(cart_rows, product_id) is not None:
            self.notifier.notify(DUPLICATE_ITEM_MESSAGE, Severity.WARNING)
            return None

        response = await self.api_client.update_cart(token, product_id, qty)
        if not response.success or response.status_code != 200:
            message = (
                response.error.user_message(UPDATE_CART_MESSAGE)
                if response.error
                else UPDATE_CART_MESSAGE
            )
            logger.error(
                "Failed to add item to cart",
                product_id=product_id,
                status_code=response.status_code,
            )
            self.notifier.notify(message, Severity.ERROR)
            return None

        rows = self._parse(response.data, UPDATE_CART_MESSAGE)
        if rows is not None:
            logger.info("Cart updated", product_id=product_id, qty=qty, row_count=len(rows))
        return rows

    async def update_quantity(
        self,
        token: str | None,
        cart_rows: Sequence[CartRow],
        product_id: str,
        qty: int,
    ) -> list[CartRow] | None:
        """Set the quantity of a product already in the cart; 0 removes it."""
        return await self.add_to_cart(token, cart_rows, product_id, qty)

    @staticmethod
    def summarize(cart_rows: Sequence[CartRow], catalog: Sequence[Product]) -> CartSummary:
        return summarize_cart(cart_rows, catalog)

    def _parse(self, data: object, failure_message: str) -> list[CartRow] | None:
        try:
            return parse_cart(data)
        except ValidationError as e:
            logger.error("Invalid cart in response", error=str(e))
            self.notifier.notify(failure_message, Severity.ERROR)
            return None
