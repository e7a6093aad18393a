"""Expiry date normalization and classification.

Dates are stored in canonical ``YYYY-MM-DD`` form. User input may arrive as
ISO text, ``DD/MM/YYYY``, ``YYYY/MM/DD`` or any other text a general date
parser understands.
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import Any

import pandas as pd

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SLASH_DMY = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_SLASH_YMD = re.compile(r"^(\d{4})/(\d{2})/(\d{2})$")

NO_EXPIRY_LABEL = "Sem validade"
INVALID_DATE_LABEL = "Data inválida"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class ExpiryState(str, Enum):
    """Expiry state of a raw expiry value."""

    NEVER = "never"
    UNKNOWN = "unknown"
    EXPIRED = "expired"
    ACTIVE = "active"


def normalize_date(value: Any) -> str | None:
    """Convert heterogeneous date input to a canonical ``YYYY-MM-DD`` string.

    ISO text is returned unchanged and the slash forms are only reordered;
    neither is checked against the calendar. Anything else goes through
    ``pandas.to_datetime``.

    Args:
        value: Raw date text, a date/datetime, or None.

    Returns:
        The canonical date string, or None when absent or unparseable.

    Examples:
        >>> normalize_date("15/03/2024")
        '2024-03-15'
        >>> normalize_date("2024/03/15")
        '2024-03-15'
        >>> normalize_date("not a date") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = str(value).strip()
    if not text:
        return None

    if _ISO_DATE.match(text):
        return text

    match = _SLASH_DMY.match(text)
    if match:
        day, month, year = match.groups()
        return f"{year}-{month}-{day}"

    match = _SLASH_YMD.match(text)
    if match:
        year, month, day = match.groups()
        return f"{year}-{month}-{day}"

    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.date().isoformat()


def parse_date(value: Any) -> date | None:
    """Normalize a raw value and turn it into a calendar date.

    Returns None when the value is absent or does not name a real
    calendar day (e.g. ``2024-02-31``).
    """
    normalized = normalize_date(value)
    if normalized is None:
        return None
    try:
        return date.fromisoformat(normalized)
    except ValueError:
        return None


def is_expired(value: Any, today: date | None = None) -> bool:
    """Check whether an expiry date lies strictly before today.

    Absent and unparseable dates are both treated as not expired.
    """
    expiry = parse_date(value)
    if expiry is None:
        return False
    return expiry < (today or date.today())


def expiry_state(value: Any, today: date | None = None) -> ExpiryState:
    """Classify a raw expiry value, keeping "no date" apart from "bad date"."""
    if _is_blank(value):
        return ExpiryState.NEVER
    expiry = parse_date(value)
    if expiry is None:
        return ExpiryState.UNKNOWN
    if expiry < (today or date.today()):
        return ExpiryState.EXPIRED
    return ExpiryState.ACTIVE


def days_until_expiry(value: Any, today: date | None = None) -> int | None:
    """Whole days from today to the expiry date (negative once past)."""
    expiry = parse_date(value)
    if expiry is None:
        return None
    return (expiry - (today or date.today())).days


def format_date(value: Any) -> str:
    """Render an expiry value for display as ``DD/MM/YYYY``."""
    if _is_blank(value):
        return NO_EXPIRY_LABEL
    expiry = parse_date(value)
    if expiry is None:
        return INVALID_DATE_LABEL
    return expiry.strftime("%d/%m/%Y")
