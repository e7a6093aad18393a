"""Inventory views: filtering, search and summary statistics.

This module provides the read-side of the product collection:
- Filter modes narrowing the visible list (all, in stock, out of stock, expired)
- Case-insensitive search over product name and category
- Totals for the stats header (item count, in-stock count, stock value)
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from inventory_tracker.services.dates import is_expired
from inventory_tracker.services.numbers import quantize_money, to_decimal
from inventory_tracker.services.products import Product, product_value


class FilterMode(str, Enum):
    """Filters offered above the product list."""

    ALL = "all"
    IN_STOCK = "inStock"
    OUT_OF_STOCK = "outOfStock"
    EXPIRED = "expired"


@dataclass(frozen=True)
class InventoryTotals:
    """Summary statistics over the whole collection.

    Attributes:
        count: Number of products
        in_stock_count: Products with quantity above zero (expiry ignored)
        total_value: Sum of price * quantity, rounded to cents
    """
    count: int
    in_stock_count: int
    total_value: Decimal


def matches_search(product: Product, search_text: str | None) -> bool:
    """Check whether name or category contains the search text.

    Blank search text matches every product.
    """
    needle = (search_text or "").strip().lower()
    if not needle:
        return True
    name = str(product.name).lower()
    category = str(product.category or "").lower()
    return needle in name or needle in category


def filter_products(
    products: Iterable[Product],
    filter_mode: FilterMode | str = FilterMode.ALL,
    search_text: str | None = None,
    today: date | None = None,
) -> list[Product]:
    """Select the products visible under a filter mode and search text.

    The input order is preserved. Note that ``outOfStock`` does not exclude
    expired products while ``inStock`` does.

    Args:
        products: Products in store order (newest first)
        filter_mode: One of the FilterMode values
        search_text: Free text matched against name and category
        today: Reference date for expiry checks, defaults to today

    Returns:
        The matching products.
    """
    mode = FilterMode(filter_mode)
    today = today or date.today()

    visible: list[Product] = []
    for product in products:
        if not matches_search(product, search_text):
            continue

        quantity = to_decimal(product.quantity)
        if mode is FilterMode.IN_STOCK:
            keep = quantity > 0 and not is_expired(product.expiry_date, today)
        elif mode is FilterMode.OUT_OF_STOCK:
            keep = quantity == 0
        elif mode is FilterMode.EXPIRED:
            keep = is_expired(product.expiry_date, today)
        else:
            keep = True

        if keep:
            visible.append(product)
    return visible


def calculate_totals(products: Sequence[Product]) -> InventoryTotals:
    """Compute the stats header values for a product collection.

    Example:
        Two products priced 10 (qty 2) and 5 (qty 0) give count=2,
        in_stock_count=1 and total_value=Decimal("20.00").
    """
    in_stock = sum(1 for product in products if to_decimal(product.quantity) > 0)
    total = sum((product_value(product) for product in products), Decimal(0))
    return InventoryTotals(
        count=len(products),
        in_stock_count=in_stock,
        total_value=quantize_money(total),
    )
