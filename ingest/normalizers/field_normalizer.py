"""
Booking field coercion

Turns a raw extracted value into the typed value of its target field:
- Financial fields -> float
- numNights -> int
- checkInDate / checkOutDate -> "YYYY-MM-DD"
- Everything else -> trimmed text

Total: every input maps to a value or None, nothing raises.
"""

import json
from typing import Any

from core.schema import field_kind
from core.values import is_absent
from .date_normalizer import format_date
from .number_normalizer import parse_integer, parse_money


def to_text(value: Any) -> str:
    """
    String form of a payload value, trimmed.

    Examples:
        >>> to_text("  Jane Doe ")
        "Jane Doe"

        >>> to_text(150.0)
        "150"

        >>> to_text(True)
        "true"
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(',', ':'), default=str)
    return str(value).strip()


def coerce_value(field_name: str, value: Any) -> Any:
    """
    Coerce a raw value for ``field_name``.

    Args:
        field_name: Target booking field
        value: Raw value (None or MISSING when nothing was found)

    Returns:
        float, int, ISO date string, text, or None
    """
    if is_absent(value):
        return None

    kind = field_kind(field_name)
    if kind == 'money':
        return parse_money(value)
    if kind == 'integer':
        return parse_integer(value)
    if kind == 'date':
        return format_date(value)
    return to_text(value)
