"""Domain models for the storefront.

Products and addresses come from the remote service and are immutable.
Cart rows are the sparse server-side cart; line items are derived from
cart rows and the catalog on every read and never stored.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Self

from storefront.domain.exceptions import InvalidQuantityError


# ============================================================================
# Catalog
# ============================================================================


@dataclass(frozen=True)
class Product:
    """A product available to buy.

    Attributes:
        id: Unique product identifier.
        name: Product title.
        category: Category the product belongs to.
        cost: Unit price, non-negative.
        rating: Aggregate rating, integer out of five.
        image_url: URL of the product image.
    """

    id: str
    name: str
    category: str
    cost: Decimal
    rating: int = 0
    image_url: str = ""


# ============================================================================
# Cart
# ============================================================================


@dataclass(frozen=True)
class CartRow:
    """Desired purchase quantity for one product, as persisted by the server."""

    product_id: str
    qty: int

    def __post_init__(self) -> None:
        if self.qty <= 0:
            raise InvalidQuantityError(self.qty)


@dataclass(frozen=True)
class LineItem:
    """A cart row enriched with full product data."""

    id: str
    name: str
    category: str
    cost: Decimal
    rating: int
    image_url: str
    qty: int

    @classmethod
    def from_product(cls, product: Product, qty: int) -> Self:
        """Merge a product with the quantity requested for it.

        Args:
            product: Catalog product.
            qty: Quantity from the cart row.

        Returns:
            New LineItem.
        """
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            cost=product.cost,
            rating=product.rating,
            image_url=product.image_url,
            qty=qty,
        )

    @property
    def line_total(self) -> Decimal:
        """Cost multiplied by quantity."""
        return self.cost * self.qty


# ============================================================================
# Addresses
# ============================================================================


@dataclass(frozen=True)
class Address:
    """A saved shipping address."""

    id: str
    text: str


@dataclass
class AddressBook:
    """All saved addresses plus the currently selected one.

    An empty ``selected_id`` means no address is selected. A non-empty
    value is expected to reference an address in ``addresses``, but this
    is not enforced after a deletion; see ``clear_dangling_selection``.
    """

    addresses: list[Address] = field(default_factory=list)
    selected_id: str = ""

    @property
    def has_selection(self) -> bool:
        return bool(self.selected_id)

    def get(self, address_id: str) -> Address | None:
        for address in self.addresses:
            if address.id == address_id:
                return address
        return None

    def clear_dangling_selection(self) -> bool:
        """Clear ``selected_id`` if it no longer references a saved address.

        Returns:
            True if the selection was cleared.
        """
        if self.selected_id and self.get(self.selected_id) is None:
            self.selected_id = ""
            return True
        return False


@dataclass
class AddressDraft:
    """Transient state of a new address being typed."""

    is_editing: bool = False
    text: str = ""

    def clear(self) -> None:
        self.is_editing = False
        self.text = ""


# ============================================================================
# Session
# ============================================================================


@dataclass(frozen=True)
class Session:
    """Logged-in user session.

    Created on login and destroyed on logout by the auth flow. The
    checkout flow only ever replaces ``wallet_balance``.
    """

    token: str
    username: str
    wallet_balance: Decimal = Decimal("0")

    def with_balance(self, wallet_balance: Decimal) -> "Session":
        return replace(self, wallet_balance=wallet_balance)
