"""Session store capability.

The persisted session (``token``, ``username``, ``balance``) lives in an
external key-value store. The core only talks to it through the
``SessionStore`` protocol so tests and different hosts can supply their
own implementation.
"""

from decimal import Decimal, InvalidOperation
from typing import Protocol

import structlog

from storefront.domain.exceptions import InvalidBalanceError
from storefront.domain.models import Session

logger = structlog.get_logger()

TOKEN_KEY = "token"
USERNAME_KEY = "username"
BALANCE_KEY = "balance"

SESSION_KEYS = (BALANCE_KEY, TOKEN_KEY, USERNAME_KEY)


class SessionStore(Protocol):
    """Key-value store holding the persisted session."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemorySessionStore:
    """Dict-backed session store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)


# ============================================================================
# Session Helpers
# ============================================================================


def parse_balance(raw: str | None) -> Decimal:
    """Parse a stored balance string.

    Args:
        raw: Value stored under the ``balance`` key.

    Returns:
        The balance; zero when nothing is stored.

    Raises:
        InvalidBalanceError: If the value is not numeric.
    """
    if raw is None or raw == "":
        return Decimal("0")
    try:
        value = Decimal(raw)
    except InvalidOperation as e:
        raise InvalidBalanceError(raw) from e
    if not value.is_finite():
        raise InvalidBalanceError(raw)
    return value


def format_balance(balance: Decimal) -> str:
    """Format a balance for storage as a plain numeric string."""
    return format(balance.normalize(), "f") if balance == balance.to_integral() else str(balance)


def load_session(store: SessionStore) -> Session | None:
    """Read the persisted session.

    Returns:
        The session, or None if no user is logged in. A corrupt balance is
        logged and read as zero.
    """
    token = store.get(TOKEN_KEY)
    if not token:
        return None

    raw_balance = store.get(BALANCE_KEY)
    try:
        balance = parse_balance(raw_balance)
    except InvalidBalanceError as e:
        logger.warning("Stored wallet balance is invalid", error=e.message)
        balance = Decimal("0")

    return Session(
        token=token,
        username=store.get(USERNAME_KEY) or "",
        wallet_balance=balance,
    )


def persist_session(store: SessionStore, session: Session) -> None:
    """Write all session fields to the store."""
    store.set(TOKEN_KEY, session.token)
    store.set(USERNAME_KEY, session.username)
    store.set(BALANCE_KEY, format_balance(session.wallet_balance))


def save_balance(store: SessionStore, balance: Decimal) -> None:
    """Write only the wallet balance to the store."""
    store.set(BALANCE_KEY, format_balance(balance))


def clear_session(store: SessionStore) -> None:
    """Remove every session key from the store."""
    for key in SESSION_KEYS:
        store.remove(key)
