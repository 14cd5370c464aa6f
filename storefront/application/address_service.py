"""Address application service.

Owns the user's address book and the new-address draft. The server is
the source of truth: after every successful create or delete the local
collection is replaced with the full list the server returns.
"""

import structlog
from pydantic import ValidationError

from storefront.domain.models import Address, AddressBook, AddressDraft
from storefront.infrastructure.api_client import APIResponse, StorefrontAPIClient
from storefront.infrastructure.notifier import Notifier, Severity
from storefront.infrastructure.schemas import parse_addresses

logger = structlog.get_logger()

FETCH_ADDRESSES_MESSAGE = (
    "Could not fetch addresses. Check that the backend is running, "
    "reachable and returns valid JSON."
)
ADD_ADDRESS_MESSAGE = (
    "Could not add this address. Check that the backend is running, "
    "reachable and returns valid JSON."
)
DELETE_ADDRESS_MESSAGE = (
    "Could not delete this address. Check that the backend is running, "
    "reachable and returns valid JSON."
)


class AddressService:
    """Create, select and delete shipping addresses.

    Selection is purely local. Deleting the selected address leaves
    ``book.selected_id`` pointing at it; callers that care should call
    ``book.clear_dangling_selection()``.
    """

    def __init__(
        self,
        api_client: StorefrontAPIClient,
        notifier: Notifier,
        book: AddressBook | None = None,
    ) -> None:
        self.api_client = api_client
        self.notifier = notifier
        self.book = book or AddressBook()
        self.draft = AddressDraft()

    @property
    def addresses(self) -> list[Address]:
        return self.book.addresses

    async def load_addresses(self, token: str | None) -> list[Address] | None:
        """Fetch the saved addresses and replace the local collection.

        Returns:
            The addresses, or None if not logged in or the call failed.
        """
        if not token:
            return None
        response = await self.api_client.list_addresses(token)
        if not response.success:
            # The server message is not surfaced for listing
            self.notifier.notify(FETCH_ADDRESSES_MESSAGE, Severity.ERROR)
            return None
        return self._replace(response, FETCH_ADDRESSES_MESSAGE)

    async def add_address(self, token: str, draft_text: str | None = None) -> list[Address] | None:
        """Save a new address.

        Args:
            token: Session token.
            draft_text: Address text; defaults to the current draft text.

        Returns:
            The server's full address list, or None on failure (local state
            is left unchanged).
        """
        text = self.draft.text if draft_text is None else draft_text
        response = await self.api_client.add_address(token, text)
        if not response.success:
            self._report_failure(response, ADD_ADDRESS_MESSAGE)
            return None

        addresses = self._replace(response, ADD_ADDRESS_MESSAGE)
        if addresses is not None:
            self.draft.clear()
            logger.info("Address added", address_count=len(addresses))
        return addresses

    async def delete_address(self, token: str, address_id: str) -> list[Address] | None:
        """Delete a saved address.

        Returns:
            The server's full address list, or None on failure.
        """
        response = await self.api_client.delete_address(token, address_id)
        if not response.success:
            self._report_failure(response, DELETE_ADDRESS_MESSAGE)
            return None

        addresses = self._replace(response, DELETE_ADDRESS_MESSAGE)
        if addresses is not None:
            logger.info("Address deleted", address_id=address_id, address_count=len(addresses))
        return addresses

    def select_address(self, address_id: str) -> None:
        """Mark an address as the shipping address (no existence check)."""
        self.book.selected_id = address_id

    # =========================================================================
    # Draft
    # =========================================================================

    def start_draft(self) -> None:
        self.draft.is_editing = True

    def update_draft(self, text: str) -> None:
        self.draft.is_editing = True
        self.draft.text = text

    def cancel_draft(self) -> None:
        self.draft.clear()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _replace(self, response: APIResponse, failure_message: str) -> list[Address] | None:
        try:
            addresses = parse_addresses(response.data)
        except ValidationError as e:
            logger.error("Invalid address list in response", error=str(e))
            self.notifier.notify(failure_message, Severity.ERROR)
            return None
        self.book.addresses = addresses
        return addresses

    def _report_failure(self, response: APIResponse, fallback: str) -> None:
        message = response.error.user_message(fallback) if response.error else fallback
        logger.warning(
            "Address request failed",
            status_code=response.status_code,
            message=message,
        )
        self.notifier.notify(message, Severity.ERROR)
