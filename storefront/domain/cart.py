"""Cart resolution and aggregation.

Turns the sparse server cart (product id and quantity pairs) into priced
line items and reduces them to totals. Everything here is a pure
function of its inputs.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import structlog

from storefront.domain.models import CartRow, LineItem, Product

logger = structlog.get_logger()


def _is_row_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def resolve_line_items(
    cart_rows: Sequence[CartRow],
    catalog: Iterable[Product],
) -> list[LineItem]:
    """Resolve cart rows into line items using the product catalog.

    Rows whose product is not in the catalog (for example a product deleted
    server-side after it was added to the cart) are dropped. Output order
    follows ``cart_rows``.

    Args:
        cart_rows: Cart rows as returned by the cart service.
        catalog: All known products.

    Returns:
        Line items for the rows whose product is known. An empty list if
        ``cart_rows`` is not a sequence or holds anything but ``CartRow``.
    """
    if not _is_row_sequence(cart_rows):
        logger.error(
            "Cart data is not a sequence",
            cart_type=type(cart_rows).__name__,
        )
        return []

    malformed = [i for i, row in enumerate(cart_rows) if not isinstance(row, CartRow)]
    if malformed:
        logger.error(
            "Cart data contains malformed rows",
            row_indexes=malformed,
            row_types=sorted({type(cart_rows[i]).__name__ for i in malformed}),
        )
        return []

    products_by_id: dict[str, Product] = {}
    for product in catalog or ():
        products_by_id.setdefault(product.id, product)

    items = []
    for row in cart_rows:
        product = products_by_id.get(row.product_id)
        if product is None:
            logger.debug("Dropping cart row for unknown product", product_id=row.product_id)
            continue
        items.append(LineItem.from_product(product, row.qty))
    return items


def total_value(items: Iterable[LineItem] | None = None) -> Decimal:
    """Sum of ``cost * qty`` over all items; zero for empty or missing input."""
    return sum((item.cost * item.qty for item in items or ()), Decimal("0"))


def total_units(items: Iterable[LineItem] | None = None) -> int:
    """Sum of ``qty`` over all items; zero for empty or missing input."""
    return sum((item.qty for item in items or ()), 0)


@dataclass(frozen=True)
class CartSummary:
    """Resolved cart with its totals."""

    items: list[LineItem] = field(default_factory=list)
    total_value: Decimal = Decimal("0")
    total_units: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.items


def summarize_cart(
    cart_rows: Sequence[CartRow],
    catalog: Iterable[Product],
) -> CartSummary:
    """Resolve the cart and compute its totals in one step."""
    items = resolve_line_items(cart_rows, catalog)
    return CartSummary(
        items=items,
        total_value=total_value(items),
        total_units=total_units(items),
    )


def find_row(cart_rows: Iterable[CartRow], product_id: str) -> CartRow | None:
    """Return the cart row for ``product_id``, if present."""
    for row in cart_rows or ():
        if row.product_id == product_id:
            return row
    return None
