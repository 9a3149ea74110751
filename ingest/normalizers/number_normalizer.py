"""
Numeric normalization

Reads money amounts and counts from platform exports and webhook bodies:
- Currency symbols and thousands separators are ignored
- Parenthesized amounts are negative, e.g. "(12.50)"
- Leading-number semantics: "150.00 USD" -> 150.0
- Anything unparseable becomes None, never NaN
"""

import math
import re
from numbers import Real
from typing import Any, Optional

from core.values import is_absent


_MONEY_NOISE = re.compile(r'[$€£¥,\s]')
_LEADING_NUMBER = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')
_LEADING_INTEGER = re.compile(r'[+-]?\d+')


def parse_money(value: Any) -> Optional[float]:
    """
    Parse a money amount.

    Examples:
        >>> parse_money("$1,234.50")
        1234.5

        >>> parse_money("(20)")
        -20.0

        >>> parse_money("abc")
        None
    """
    if is_absent(value) or isinstance(value, bool):
        return None

    if isinstance(value, Real):
        number = float(value)
        return number if math.isfinite(number) else None

    text = str(value).strip()
    negative = text.startswith('(') and text.endswith(')')
    if negative:
        text = text[1:-1]

    match = _LEADING_NUMBER.match(_MONEY_NOISE.sub('', text))
    if not match:
        return None

    number = float(match.group())
    if not math.isfinite(number):
        return None
    return -number if negative else number


def parse_integer(value: Any) -> Optional[int]:
    """
    Parse a whole count; fractional input is truncated.

    Examples:
        >>> parse_integer("3")
        3

        >>> parse_integer("4 nights")
        4
    """
    if is_absent(value) or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, Real):
        number = float(value)
        return int(number) if math.isfinite(number) else None

    match = _LEADING_INTEGER.match(str(value).strip())
    return int(match.group()) if match else None
