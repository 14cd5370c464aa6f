"""State machine for a checkout attempt.

State diagram:
    VALIDATING ─────────────► REJECTED
      │
      │ validation passed
      ▼
    SUBMITTING ─────────────► FAILED
      │
      │ order confirmed
      ▼
    RECONCILING
      │
      │ balance persisted
      ▼
    DONE
"""

from enum import Enum

from storefront.domain.exceptions import InvalidStateTransitionError


class CheckoutState(str, Enum):
    """Checkout attempt lifecycle states."""

    VALIDATING = "validating"
    SUBMITTING = "submitting"
    RECONCILING = "reconciling"
    DONE = "done"
    REJECTED = "rejected"
    FAILED = "failed"

    def can_transition_to(self, target: "CheckoutState") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _CHECKOUT_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["CheckoutState"]:
        """Get list of valid target states."""
        return sorted(_CHECKOUT_TRANSITIONS.get(self, set()), key=lambda s: s.value)

    def is_terminal(self) -> bool:
        """Check if no further transitions are possible."""
        return len(_CHECKOUT_TRANSITIONS.get(self, set())) == 0

    def is_in_flight(self) -> bool:
        """Check if an order request has been sent but the attempt is not finished."""
        return self in {CheckoutState.SUBMITTING, CheckoutState.RECONCILING}


# Defined outside the enum to avoid Enum member restrictions
_CHECKOUT_TRANSITIONS: dict[CheckoutState, set[CheckoutState]] = {
    CheckoutState.VALIDATING: {CheckoutState.SUBMITTING, CheckoutState.REJECTED},
    CheckoutState.SUBMITTING: {CheckoutState.RECONCILING, CheckoutState.FAILED},
    CheckoutState.RECONCILING: {CheckoutState.DONE},
    CheckoutState.DONE: set(),
    CheckoutState.REJECTED: set(),
    CheckoutState.FAILED: set(),
}


def validate_checkout_transition(
    attempt_id: str,
    current_state: CheckoutState,
    target_state: CheckoutState,
) -> None:
    """Validate and raise if checkout state transition is invalid.

    Args:
        attempt_id: Checkout attempt identifier for error message.
        current_state: Current checkout state.
        target_state: Target checkout state.

    Raises:
        InvalidStateTransitionError: If transition is not valid.
    """
    if not current_state.can_transition_to(target_state):
        raise InvalidStateTransitionError(
            entity_type="Checkout",
            entity_id=attempt_id,
            current_state=current_state.value,
            target_state=target_state.value,
            allowed_transitions=[s.value for s in current_state.allowed_transitions()],
        )
