"""Tests for the checkout state machine."""

import pytest

from storefront.domain import CheckoutState
from storefront.domain.exceptions import InvalidStateTransitionError
from storefront.domain.state_machines import validate_checkout_transition


class TestCheckoutState:
    """Tests for CheckoutState transitions."""

    def test_validating_can_submit_or_reject(self) -> None:
        assert CheckoutState.VALIDATING.can_transition_to(CheckoutState.SUBMITTING)
        assert CheckoutState.VALIDATING.can_transition_to(CheckoutState.REJECTED)

    def test_validating_cannot_skip_to_reconciling(self) -> None:
        """Reconciliation is only reachable after submission."""
        assert not CheckoutState.VALIDATING.can_transition_to(CheckoutState.RECONCILING)
        assert not CheckoutState.VALIDATING.can_transition_to(CheckoutState.DONE)

    def test_submitting_can_reconcile_or_fail(self) -> None:
        assert CheckoutState.SUBMITTING.can_transition_to(CheckoutState.RECONCILING)
        assert CheckoutState.SUBMITTING.can_transition_to(CheckoutState.FAILED)

    def test_submitting_cannot_be_rejected(self) -> None:
        assert not CheckoutState.SUBMITTING.can_transition_to(CheckoutState.REJECTED)

    def test_reconciling_only_finishes(self) -> None:
        assert CheckoutState.RECONCILING.allowed_transitions() == [CheckoutState.DONE]

    @pytest.mark.parametrize(
        "state",
        [CheckoutState.DONE, CheckoutState.REJECTED, CheckoutState.FAILED],
    )
    def test_terminal_states(self, state: CheckoutState) -> None:
        assert state.is_terminal()
        assert state.allowed_transitions() == []

    def test_in_flight_states(self) -> None:
        assert CheckoutState.SUBMITTING.is_in_flight()
        assert CheckoutState.RECONCILING.is_in_flight()
        assert not CheckoutState.VALIDATING.is_in_flight()
        assert not CheckoutState.DONE.is_in_flight()


class TestValidateCheckoutTransition:
    """Tests for validate_checkout_transition."""

    def test_valid_transition_passes(self) -> None:
        validate_checkout_transition("attempt-1", CheckoutState.VALIDATING, CheckoutState.SUBMITTING)

    def test_invalid_transition_raises(self) -> None:
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            validate_checkout_transition("attempt-1", CheckoutState.FAILED, CheckoutState.DONE)

        details = exc_info.value.details
        assert details["entity_type"] == "Checkout"
        assert details["entity_id"] == "attempt-1"
        assert details["current_state"] == "failed"
        assert details["target_state"] == "done"
        assert details["allowed_transitions"] == []
