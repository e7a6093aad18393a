"""Locale-aware numeric coercion for form input.

Form fields arrive as free text in the pt-BR locale, where a comma is the
decimal separator. Unparseable or negative values fall back to zero rather
than raising.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from inventory_tracker.config import settings

_LEADING_INT = re.compile(r"^[+-]?\d+")
_LEADING_DECIMAL = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

CENTS = Decimal("0.01")


def parse_int_input(value: Any) -> int:
    """Parse a non-negative integer from form input.

    Text is read up to the first non-digit, so ``"12 un"`` gives 12 and
    ``"3,5"`` gives 3.

    Args:
        value: Raw input (text, int, float or None).

    Returns:
        The parsed integer, or 0 when unparseable or negative.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return max(int(value), 0)

    match = _LEADING_INT.match(str(value).strip())
    if not match:
        return 0
    return max(int(match.group()), 0)


def parse_decimal_input(value: Any) -> float:
    """Parse a non-negative decimal from form input.

    The first comma is read as the decimal separator (``"10,50"`` -> 10.5).

    Args:
        value: Raw input (text, int, float or None).

    Returns:
        The parsed value, or 0.0 when unparseable, negative or not finite.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    else:
        text = str(value).strip().replace(",", ".", 1)
        match = _LEADING_DECIMAL.match(text)
        if not match:
            return 0.0
        number = float(match.group())

    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def to_decimal(value: Any) -> Decimal:
    """Convert a stored numeric field to Decimal, treating junk as zero."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        number = Decimal(str(value))
    except (ArithmeticError, ValueError):
        return Decimal(0)
    if not number.is_finite():
        return Decimal(0)
    return number


def quantize_money(amount: Decimal) -> Decimal:
    """Round an amount to two decimal places."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount: Any, symbol: str | None = None) -> str:
    """Render an amount as pt-BR currency, e.g. ``R$ 10,50``."""
    value = quantize_money(to_decimal(amount))
    amount_text = f"{value:.2f}".replace(".", ",")
    return f"{symbol or settings.currency_symbol} {amount_text}"


def format_weight(weight: Any) -> str:
    """Render a weight in kg without exponent notation, e.g. ``1234567 kg``."""
    return f"{to_decimal(weight).normalize():f} kg"
