"""Checkout precondition checks.

The validator is a pure decision oracle: it is used by the checkout
service before submitting an order and by the UI to enable or disable
the place-order action. Only the first failing check is reported.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Self

from storefront.domain.cart import resolve_line_items, total_value
from storefront.domain.models import AddressBook, CartRow, Product


class CheckoutRejection(str, Enum):
    """Reasons a checkout is rejected before anything is submitted."""

    INSUFFICIENT_BALANCE = "insufficient_balance"
    NO_ADDRESS = "no_address"
    NO_ADDRESS_SELECTED = "no_address_selected"
    # Returned by the checkout service in-flight guard; validate_checkout never yields it
    CHECKOUT_IN_PROGRESS = "checkout_in_progress"

    @property
    def message(self) -> str:
        """User-facing message for this rejection."""
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES: dict[CheckoutRejection, str] = {
    CheckoutRejection.INSUFFICIENT_BALANCE: (
        "You do not have enough balance in your wallet for this purchase"
    ),
    CheckoutRejection.NO_ADDRESS: "Please add a new address before proceeding.",
    CheckoutRejection.NO_ADDRESS_SELECTED: "Please select one shipping address to proceed.",
    CheckoutRejection.CHECKOUT_IN_PROGRESS: "An order is already being placed. Please wait.",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checkout validation: pass, or fail with a reason."""

    passed: bool
    reason: CheckoutRejection | None = None

    @classmethod
    def ok(cls) -> Self:
        return cls(passed=True)

    @classmethod
    def fail(cls, reason: CheckoutRejection) -> Self:
        return cls(passed=False, reason=reason)

    @property
    def message(self) -> str | None:
        return self.reason.message if self.reason else None


def validate_checkout(
    cart_rows: Sequence[CartRow],
    catalog: Iterable[Product],
    address_book: AddressBook,
    wallet_balance: Decimal,
) -> ValidationResult:
    """Run the checkout precondition checks in order.

    1. The cart total must not exceed the wallet balance.
    2. At least one address must exist.
    3. An address must be selected.

    Args:
        cart_rows: Current cart rows.
        catalog: All known products.
        address_book: Saved addresses and current selection.
        wallet_balance: Spendable wallet credit.

    Returns:
        ValidationResult with the first failing reason, or a pass.
    """
    cart_value = total_value(resolve_line_items(cart_rows, catalog))
    if cart_value > wallet_balance:
        return ValidationResult.fail(CheckoutRejection.INSUFFICIENT_BALANCE)

    if not address_book.addresses:
        return ValidationResult.fail(CheckoutRejection.NO_ADDRESS)

    if not address_book.selected_id:
        return ValidationResult.fail(CheckoutRejection.NO_ADDRESS_SELECTED)

    return ValidationResult.ok()
