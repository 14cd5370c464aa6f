"""Catalog application service.

Lists and searches products. A search with no matches is a normal
"not found" state, not an error. ``SearchDebouncer`` coalesces rapid
search-box input into a single lookup after a quiet period.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import ValidationError

from storefront.domain.models import Product
from storefront.infrastructure.api_client import StorefrontAPIClient
from storefront.infrastructure.config import settings
from storefront.infrastructure.notifier import Notifier, Severity
from storefront.infrastructure.schemas import parse_products

logger = structlog.get_logger()

FETCH_PRODUCTS_MESSAGE = (
    "Could not fetch products. Check that the backend is running, "
    "reachable and returns valid JSON."
)


@dataclass
class SearchResult:
    """Products matching a search, or the not-found state."""

    products: list[Product] = field(default_factory=list)
    not_found: bool = False


class CatalogService:
    """Application service for browsing the product catalog."""

    def __init__(self, api_client: StorefrontAPIClient, notifier: Notifier) -> None:
        self.api_client = api_client
        self.notifier = notifier

    async def list_products(self) -> list[Product] | None:
        """Fetch the full catalog.

        Returns:
            All products, or None if the call failed (already reported).
        """
        response = await self.api_client.list_products()
        if not response.success:
            error = response.error
            if error is not None and error.status_code == 500 and error.message:
                message = error.message
            else:
                message = FETCH_PRODUCTS_MESSAGE
            logger.error("Product listing failed", status_code=response.status_code)
            self.notifier.notify(message, Severity.ERROR)
            return None
        return self._parse(response.data)

    async def search(self, text: str) -> SearchResult | None:
        """Search products by name or category.

        An empty query lists the whole catalog.

        Args:
            text: Search text as typed.

        Returns:
            SearchResult; ``not_found`` is set when the service reports no
            match. None if the call failed.
        """
        query = text.strip()
        if not query:
            products = await self.list_products()
            return SearchResult(products=products) if products is not None else None

        response = await self.api_client.search_products(query)
        if not response.success:
            if response.status_code == 404:
                logger.debug("No products matched search", query=query)
                return SearchResult(products=[], not_found=True)
            logger.error("Product search failed", query=query, status_code=response.status_code)
            self.notifier.notify(FETCH_PRODUCTS_MESSAGE, Severity.ERROR)
            return None

        products = self._parse(response.data)
        if products is None:
            return None
        return SearchResult(products=products, not_found=not products)

    def _parse(self, data: Any) -> list[Product] | None:
        try:
            return parse_products(data)
        except ValidationError as e:
            logger.error("Invalid product list in response", error=str(e))
            self.notifier.notify(FETCH_PRODUCTS_MESSAGE, Severity.ERROR)
            return None


class SearchDebouncer:
    """Runs a search only after input has been quiet for ``delay`` seconds.

    Each ``trigger`` replaces any pending call, so a burst of keystrokes
    produces one lookup with the latest text.
    """

    def __init__(
        self,
        search: Callable[[str], Awaitable[Any]],
        delay: float | None = None,
    ) -> None:
        self.search = search
        self.delay = settings.search_debounce_seconds if delay is None else delay
        self.last_result: Any = None
        self._pending: asyncio.Task[Any] | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def trigger(self, text: str) -> None:
        """Schedule a search for ``text``, replacing any pending one.

        Must be called from within a running event loop.
        """
        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._run(text))

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def wait(self) -> Any:
        """Wait for the pending search, if any, and return its result.

        A ``trigger`` made while waiting replaces the awaited search; the
        wait then follows the replacement instead of failing.
        """
        task = self._pending
        while task is not None and not task.done():
            await asyncio.wait({task})
            task = self._pending
        if task is not None and not task.cancelled():
            task.result()
        return self.last_result

    async def _run(self, text: str) -> None:
        await asyncio.sleep(self.delay)
        self.last_result = await self.search(text)
