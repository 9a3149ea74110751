"""
Date normalization

Formats check-in/check-out values as ISO calendar dates (YYYY-MM-DD).
Values with a UTC offset are converted to UTC first; naive values are
taken as UTC. Numbers are epoch milliseconds. Text without a digit is
never a date.
"""

import logging
from datetime import date, datetime
from numbers import Real
from typing import Any, Optional

import pandas as pd

logger = logging.getLogger(__name__)


def format_date(value: Any) -> Optional[str]:
    """
    Format a date-like value as YYYY-MM-DD.

    Examples:
        >>> format_date("2024-01-15T00:00:00Z")
        "2024-01-15"

        >>> format_date("03/01/2024")
        "2024-03-01"

        >>> format_date("not a date")
        None

        >>> format_date("today")
        None
    """
    if not value or isinstance(value, bool):
        return None

    try:
        if isinstance(value, Real):
            timestamp = pd.to_datetime(value, unit='ms', utc=True, errors='coerce')
        elif isinstance(value, (str, date, datetime)):
            text = value.strip() if isinstance(value, str) else value
            # pandas reads "now" and "today" as the current time
            if isinstance(text, str) and not any(char.isdigit() for char in text):
                logger.debug("Failed to format date value %r", value)
                return None
            timestamp = pd.to_datetime(text, utc=True, errors='coerce')
        else:
            return None
    except (ValueError, TypeError, OverflowError) as exc:
        logger.debug("Failed to format date value %r: %s", value, exc)
        return None

    if pd.isna(timestamp):
        logger.debug("Failed to format date value %r", value)
        return None

    return timestamp.date().isoformat()
