"""Business logic services for the inventory tracker."""

from inventory_tracker.services.dates import (
    ExpiryState,
    days_until_expiry,
    expiry_state,
    format_date,
    is_expired,
    normalize_date,
)
from inventory_tracker.services.inventory import (
    FilterMode,
    InventoryTotals,
    calculate_totals,
    filter_products,
)
from inventory_tracker.services.products import (
    Product,
    ProductInput,
    ProductValidationError,
    StockStatus,
    stock_status,
)
from inventory_tracker.services.storage import KeyValueStorage, PersistenceError
from inventory_tracker.services.store import ProductNotFoundError, ProductStore

__all__ = [
    "ExpiryState",
    "FilterMode",
    "InventoryTotals",
    "KeyValueStorage",
    "PersistenceError",
    "Product",
    "ProductInput",
    "ProductNotFoundError",
    "ProductStore",
    "ProductValidationError",
    "StockStatus",
    "calculate_totals",
    "days_until_expiry",
    "expiry_state",
    "filter_products",
    "format_date",
    "is_expired",
    "normalize_date",
    "stock_status",
]
