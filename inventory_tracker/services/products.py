"""Product records, form input coercion and stock status."""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from inventory_tracker.config import settings
from inventory_tracker.services.dates import days_until_expiry, is_expired, normalize_date
from inventory_tracker.services.numbers import (
    parse_decimal_input,
    parse_int_input,
    to_decimal,
)

CATEGORIES: tuple[str, ...] = (
    "Hortifruti",
    "Açougue",
    "Laticínios",
    "Padaria",
    "Bebidas",
    "Limpeza",
    "Higiene",
    "Mercearia",
    "Congelados",
    "Outros",
)

NAME_REQUIRED_MESSAGE = "Digite o nome do produto"


class ProductValidationError(Exception):
    """Raised when form input cannot produce a valid product."""


class Product(BaseModel):
    """A tracked product.

    Attributes:
        id: Creation timestamp in milliseconds, unique within the collection
        name: Product name
        quantity: Units on hand, never negative
        price: Unit price
        weight: Weight in kg, 0 when not specified
        expiry_date: Canonical expiry date, None when the product never expires
        category: Product category
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    quantity: int = 0
    price: float = 0.0
    weight: float = 0.0
    expiry_date: str | None = Field(default=None, alias="expiryDate")
    category: str = Field(default_factory=lambda: settings.default_category)


class ProductInput(BaseModel):
    """Raw create/edit form values, before coercion."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    quantity: str | int | float | None = None
    price: str | int | float | None = None
    weight: str | int | float | None = None
    expiry_date: str | None = Field(default=None, alias="expiryDate")
    category: str | None = None


def coerce_product_fields(data: ProductInput) -> dict:
    """Validate and coerce form input into product field values.

    Args:
        data: Raw form input.

    Returns:
        Field values for a Product, without ``id``.

    Raises:
        ProductValidationError: If the name is blank.
    """
    name = (data.name or "").strip()
    if not name:
        raise ProductValidationError(NAME_REQUIRED_MESSAGE)

    return {
        "name": name,
        "quantity": parse_int_input(data.quantity),
        "price": parse_decimal_input(data.price),
        "weight": parse_decimal_input(data.weight),
        "expiry_date": normalize_date(data.expiry_date),
        "category": (data.category or "").strip() or settings.default_category,
    }


def product_value(product: Product) -> Decimal:
    """Stock value of a single product (price times quantity)."""
    return to_decimal(product.price) * to_decimal(product.quantity)


class StockStatus(str, Enum):
    """Display status of a product in the list view."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"

    @property
    def color(self) -> str:
        return _STATUS_COLORS[self]


_STATUS_COLORS = {
    StockStatus.HEALTHY: "#10b981",
    StockStatus.WARNING: "#fbbf24",
    StockStatus.CRITICAL: "#ef4444",
    StockStatus.UNKNOWN: "#6b7280",
}


def stock_status(
    product: Product,
    today: date | None = None,
    near_expiry_days: int | None = None,
) -> StockStatus:
    """Derive the display status of a product.

    Rules are checked in order and the first match wins:

    1. no expiry date -> healthy
    2. expired -> critical
    3. out of stock -> critical
    4. expiry date not parseable -> unknown
    5. expires within ``near_expiry_days`` (inclusive) -> warning
    6. otherwise -> healthy
    """
    if not product.expiry_date:
        return StockStatus.HEALTHY
    if is_expired(product.expiry_date, today):
        return StockStatus.CRITICAL
    if product.quantity == 0:
        return StockStatus.CRITICAL

    days_left = days_until_expiry(product.expiry_date, today)
    if days_left is None:
        return StockStatus.UNKNOWN

    threshold = settings.near_expiry_days if near_expiry_days is None else near_expiry_days
    if days_left <= threshold:
        return StockStatus.WARNING
    return StockStatus.HEALTHY
