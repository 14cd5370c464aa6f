"""Checkout application service.

Orchestrates one checkout attempt:
1. Validate preconditions (balance, address exists, address selected)
2. Submit the order to the remote service
3. Reconcile the wallet balance in the session store

The balance is only written after the server confirms the order.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import uuid4

import structlog

from storefront.domain.cart import resolve_line_items, total_value
from storefront.domain.models import AddressBook, CartRow, Product, Session
from storefront.domain.state_machines import CheckoutState, validate_checkout_transition
from storefront.domain.validation import CheckoutRejection, validate_checkout
from storefront.infrastructure.api_client import StorefrontAPIClient
from storefront.infrastructure.notifier import Notifier, Severity
from storefront.infrastructure.session_store import SessionStore, save_balance

logger = structlog.get_logger()

CHECKOUT_CONNECTIVITY_MESSAGE = (
    "Could not place order. Check that the backend is running, "
    "reachable and returns valid JSON."
)


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class CheckoutOutcome:
    """Result of a checkout attempt.

    Attributes:
        attempt_id: Identifier used in logs for this attempt.
        state: Terminal state reached (DONE, REJECTED or FAILED).
        history: Every state the attempt passed through, in order.
        rejection: Why validation rejected the attempt, if it did.
        message: User-facing message reported for a rejection or failure.
        session: Session with the reconciled balance, on success.
    """

    attempt_id: str
    state: CheckoutState = CheckoutState.VALIDATING
    history: list[CheckoutState] = field(default_factory=list)
    rejection: CheckoutRejection | None = None
    message: str | None = None
    session: Session | None = None

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.state)

    @property
    def succeeded(self) -> bool:
        """True when the order was placed; the caller shows the confirmation view."""
        return self.state == CheckoutState.DONE

    @property
    def new_balance(self) -> Decimal | None:
        return self.session.wallet_balance if self.session else None

    def transition(self, target: CheckoutState) -> None:
        validate_checkout_transition(self.attempt_id, self.state, target)
        self.state = target
        self.history.append(target)


# ============================================================================
# Checkout Service
# ============================================================================


class CheckoutService:
    """Application service placing orders against the wallet balance.

    Only one checkout may be in flight at a time. A second call made while
    the first is submitting or reconciling is rejected without any network
    call.
    """

    def __init__(
        self,
        api_client: StorefrontAPIClient,
        session_store: SessionStore,
        notifier: Notifier,
    ) -> None:
        """Initialize service.

        Args:
            api_client: Client for the remote order service.
            session_store: Store holding the persisted wallet balance.
            notifier: Sink for user-facing messages.
        """
        self.api_client = api_client
        self.session_store = session_store
        self.notifier = notifier
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        """True while an attempt is running; the UI disables place-order."""
        return self._in_flight

    async def checkout(
        self,
        cart_rows: Sequence[CartRow],
        catalog: Sequence[Product],
        address_book: AddressBook,
        session: Session,
    ) -> CheckoutOutcome:
        """Run a checkout attempt.

        Args:
            cart_rows: Current cart rows.
            catalog: All known products.
            address_book: Saved addresses and current selection.
            session: Logged-in session (token and wallet balance).

        Returns:
            CheckoutOutcome in state DONE, REJECTED or FAILED.
        """
        outcome = CheckoutOutcome(attempt_id=uuid4().hex[:12])
        log = logger.bind(attempt_id=outcome.attempt_id, username=session.username)

        if self._in_flight:
            log.warning("Checkout already in flight, rejecting")
            return self._reject(outcome, CheckoutRejection.CHECKOUT_IN_PROGRESS)

        self._in_flight = True
        try:
            return await self._run(outcome, cart_rows, catalog, address_book, session, log)
        finally:
            self._in_flight = False

    async def _run(
        self,
        outcome: CheckoutOutcome,
        cart_rows: Sequence[CartRow],
        catalog: Sequence[Product],
        address_book: AddressBook,
        session: Session,
        log: structlog.stdlib.BoundLogger,
    ) -> CheckoutOutcome:
        # VALIDATING
        result = validate_checkout(cart_rows, catalog, address_book, session.wallet_balance)
        if not result.passed:
            log.info("Checkout rejected", reason=result.reason.value)
            return self._reject(outcome, result.reason)

        # SUBMITTING
        outcome.transition(CheckoutState.SUBMITTING)
        log.info("Submitting order", address_id=address_book.selected_id)
        response = await self.api_client.checkout(session.token, address_book.selected_id)

        body = response.data if isinstance(response.data, dict) else {}
        if not response.success or body.get("success") is not True:
            if response.error is not None:
                message = response.error.user_message(CHECKOUT_CONNECTIVITY_MESSAGE)
            else:
                server_message = body.get("message")
                message = (
                    server_message
                    if isinstance(server_message, str) and server_message
                    else CHECKOUT_CONNECTIVITY_MESSAGE
                )
            outcome.transition(CheckoutState.FAILED)
            outcome.message = message
            self.notifier.notify(message, Severity.ERROR)
            log.error(
                "Order submission failed",
                status_code=response.status_code,
                error_code=response.error.error_code if response.error else None,
            )
            return outcome

        # RECONCILING
        outcome.transition(CheckoutState.RECONCILING)
        cart_value = total_value(resolve_line_items(cart_rows, catalog))
        new_balance = session.wallet_balance - cart_value
        save_balance(self.session_store, new_balance)
        outcome.session = session.with_balance(new_balance)

        # DONE
        outcome.transition(CheckoutState.DONE)
        log.info(
            "Order placed",
            cart_value=str(cart_value),
            new_balance=str(new_balance),
        )
        return outcome

    def _reject(self, outcome: CheckoutOutcome, reason: CheckoutRejection) -> CheckoutOutcome:
        outcome.transition(CheckoutState.REJECTED)
        outcome.rejection = reason
        outcome.message = reason.message
        self.notifier.notify(reason.message, Severity.WARNING)
        return outcome
