"""Authentication application service.

Validates login and registration input, calls the auth endpoints, and
keeps the persisted session (token, username, wallet balance) in the
session store.
"""

import structlog
from pydantic import ValidationError

from storefront.domain.models import Session
from storefront.infrastructure.api_client import APIResponse, StorefrontAPIClient
from storefront.infrastructure.notifier import Notifier, Severity
from storefront.infrastructure.schemas import LoginResponse
from storefront.infrastructure.session_store import (
    SessionStore,
    clear_session,
    load_session,
    persist_session,
)

logger = structlog.get_logger()

MIN_CREDENTIAL_LENGTH = 6
GENERIC_AUTH_MESSAGE = (
    "Something went wrong. Check that the backend is running, "
    "reachable, and returns valid JSON."
)


class AuthService:
    """Login, registration and logout."""

    def __init__(
        self,
        api_client: StorefrontAPIClient,
        session_store: SessionStore,
        notifier: Notifier,
    ) -> None:
        self.api_client = api_client
        self.session_store = session_store
        self.notifier = notifier

    def current_session(self) -> Session | None:
        """The logged-in session, or None."""
        return load_session(self.session_store)

    async def login(self, username: str, password: str) -> Session | None:
        """Log in and persist the session.

        Returns:
            The new session, or None if input was invalid or login failed.
        """
        if not username:
            self.notifier.notify("Username is a required field", Severity.WARNING)
            return None
        if not password:
            self.notifier.notify("Password is a required field", Severity.WARNING)
            return None

        response = await self.api_client.login(username, password)
        if not response.success:
            self._report_failure(response)
            return None

        try:
            body = LoginResponse.model_validate(response.data)
        except ValidationError as e:
            logger.error("Invalid login response", error=str(e))
            self.notifier.notify(GENERIC_AUTH_MESSAGE, Severity.ERROR)
            return None

        session = Session(
            token=body.token,
            username=body.username,
            wallet_balance=body.balance,
        )
        persist_session(self.session_store, session)
        self.notifier.notify("Logged in successfully", Severity.SUCCESS)
        logger.info("User logged in", username=session.username)
        return session

    async def register(self, username: str, password: str, confirm_password: str) -> bool:
        """Register a new user.

        Returns:
            True if registration succeeded.
        """
        problem = validate_registration(username, password, confirm_password)
        if problem is not None:
            self.notifier.notify(problem, Severity.WARNING)
            return False

        response = await self.api_client.register(username, password)
        if not response.success:
            self._report_failure(response)
            return False

        self.notifier.notify("Registered Successfully.", Severity.SUCCESS)
        logger.info("User registered", username=username)
        return True

    def logout(self) -> None:
        """Forget the persisted session."""
        clear_session(self.session_store)
        logger.info("User logged out")

    def _report_failure(self, response: APIResponse) -> None:
        error = response.error
        if error is not None and error.status_code == 400 and error.message:
            message = error.message
        else:
            message = GENERIC_AUTH_MESSAGE
        logger.warning("Auth request failed", status_code=response.status_code)
        self.notifier.notify(message, Severity.ERROR)


def validate_registration(username: str, password: str, confirm_password: str) -> str | None:
    """Check registration input.

    Returns:
        The first problem found, or None if the input is valid.
    """
    if not username:
        return "Username is a required field"
    if len(username) < MIN_CREDENTIAL_LENGTH:
        return f"Username must be at least {MIN_CREDENTIAL_LENGTH} characters"
    if not password:
        return "Password is a required field"
    if len(password) < MIN_CREDENTIAL_LENGTH:
        return f"Password must be at least {MIN_CREDENTIAL_LENGTH} characters"
    if password != confirm_password:
        return "Passwords do not match"
    return None
