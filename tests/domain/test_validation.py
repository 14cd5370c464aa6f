"""Tests for checkout precondition validation."""

from decimal import Decimal

import pytest

from storefront.domain import (
    Address,
    AddressBook,
    CartRow,
    CheckoutRejection,
    Product,
    ValidationResult,
    validate_checkout,
)


@pytest.fixture
def priced_catalog() -> list[Product]:
    return [Product(id="p1", name="Ball", category="Sports", cost=Decimal("100"))]


@pytest.fixture
def cart_of_200() -> list[CartRow]:
    return [CartRow(product_id="p1", qty=2)]


def _book(address_count: int, selected: str = "") -> AddressBook:
    return AddressBook(
        addresses=[Address(id=f"a{i}", text=f"Address {i}") for i in range(address_count)],
        selected_id=selected,
    )


class TestValidateCheckout:
    """Tests for validate_checkout ordering and outcomes."""

    def test_insufficient_balance(self, cart_of_200, priced_catalog) -> None:
        result = validate_checkout(cart_of_200, priced_catalog, _book(1, "a0"), Decimal("150"))

        assert not result.passed
        assert result.reason == CheckoutRejection.INSUFFICIENT_BALANCE
        assert result.message == (
            "You do not have enough balance in your wallet for this purchase"
        )

    def test_no_address(self, cart_of_200, priced_catalog) -> None:
        result = validate_checkout(cart_of_200, priced_catalog, _book(0), Decimal("250"))

        assert result.reason == CheckoutRejection.NO_ADDRESS
        assert result.message == "Please add a new address before proceeding."

    def test_no_address_selected(self, cart_of_200, priced_catalog) -> None:
        result = validate_checkout(cart_of_200, priced_catalog, _book(1), Decimal("250"))

        assert result.reason == CheckoutRejection.NO_ADDRESS_SELECTED
        assert result.message == "Please select one shipping address to proceed."

    def test_all_checks_pass(self, cart_of_200, priced_catalog) -> None:
        result = validate_checkout(cart_of_200, priced_catalog, _book(1, "a0"), Decimal("250"))

        assert result == ValidationResult.ok()
        assert result.passed
        assert result.reason is None
        assert result.message is None

    def test_balance_check_wins_over_missing_address(self, cart_of_200, priced_catalog) -> None:
        """With both an overdrawn balance and no addresses, balance is reported."""
        result = validate_checkout(cart_of_200, priced_catalog, _book(0), Decimal("150"))

        assert result.reason == CheckoutRejection.INSUFFICIENT_BALANCE

    def test_address_check_wins_over_selection(self, cart_of_200, priced_catalog) -> None:
        result = validate_checkout(cart_of_200, priced_catalog, _book(0, "stale"), Decimal("250"))

        assert result.reason == CheckoutRejection.NO_ADDRESS

    def test_total_equal_to_balance_passes(self, cart_of_200, priced_catalog) -> None:
        result = validate_checkout(cart_of_200, priced_catalog, _book(1, "a0"), Decimal("200"))

        assert result.passed

    def test_unknown_products_do_not_count_toward_total(self, priced_catalog) -> None:
        rows = [CartRow(product_id="ghost", qty=100)]

        result = validate_checkout(rows, priced_catalog, _book(1, "a0"), Decimal("0"))

        assert result.passed

    @pytest.mark.parametrize("bad_row", [None, {"productId": "p1", "qty": 2}])
    def test_malformed_cart_counts_as_empty(self, priced_catalog, bad_row) -> None:
        """Malformed rows never raise; the cart is treated as worth nothing."""
        rows = [bad_row]

        assert validate_checkout(rows, priced_catalog, _book(1, "a0"), Decimal("10")).passed
        assert (
            validate_checkout(rows, priced_catalog, AddressBook(), Decimal("10")).reason
            == CheckoutRejection.NO_ADDRESS
        )

    def test_validation_does_not_mutate_address_book(self, cart_of_200, priced_catalog) -> None:
        book = _book(2, "a1")

        validate_checkout(cart_of_200, priced_catalog, book, Decimal("1000"))

        assert book.selected_id == "a1"
        assert len(book.addresses) == 2


class TestCheckoutRejection:
    def test_every_reason_has_a_message(self) -> None:
        assert all(reason.message for reason in CheckoutRejection)

    def test_validator_never_reports_in_progress(self, cart_of_200, priced_catalog) -> None:
        """In-progress rejections come only from the checkout service guard."""
        books = [_book(0), _book(1), _book(1, "a0")]
        balances = [Decimal("0"), Decimal("1000")]

        reasons = {
            validate_checkout(cart_of_200, priced_catalog, book, balance).reason
            for book in books
            for balance in balances
        }

        assert CheckoutRejection.CHECKOUT_IN_PROGRESS not in reasons
