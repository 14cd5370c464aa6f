"""Domain layer - models, cart math, checkout validation, state machine.

Example usage:
    from storefront.domain import CartRow, Product, summarize_cart

    summary = summarize_cart(
        [CartRow(product_id="p1", qty=2)],
        [Product(id="p1", name="Mug", category="Kitchen", cost=Decimal("100"))],
    )
    print(summary.total_value)  # 200
"""

from storefront.domain.cart import (
    CartSummary,
    find_row,
    resolve_line_items,
    summarize_cart,
    total_units,
    total_value,
)
from storefront.domain.exceptions import (
    CartError,
    DomainError,
    InvalidBalanceError,
    InvalidQuantityError,
    InvalidStateTransitionError,
    SessionError,
)
from storefront.domain.models import (
    Address,
    AddressBook,
    AddressDraft,
    CartRow,
    LineItem,
    Product,
    Session,
)
from storefront.domain.state_machines import CheckoutState, validate_checkout_transition
from storefront.domain.validation import (
    CheckoutRejection,
    ValidationResult,
    validate_checkout,
)

__all__ = [
    # Models
    "Address",
    "AddressBook",
    "AddressDraft",
    "CartRow",
    "LineItem",
    "Product",
    "Session",
    # Cart
    "CartSummary",
    "find_row",
    "resolve_line_items",
    "summarize_cart",
    "total_units",
    "total_value",
    # Validation
    "CheckoutRejection",
    "ValidationResult",
    "validate_checkout",
    # State machine
    "CheckoutState",
    "validate_checkout_transition",
    # Exceptions
    "CartError",
    "DomainError",
    "InvalidBalanceError",
    "InvalidQuantityError",
    "InvalidStateTransitionError",
    "SessionError",
]
