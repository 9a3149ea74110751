"""
Value normalizers for Booking Ingest
"""

from .field_normalizer import coerce_value, to_text
from .number_normalizer import parse_money, parse_integer
from .date_normalizer import format_date

__all__ = [
    'coerce_value',
    'to_text',
    'parse_money',
    'parse_integer',
    'format_date'
]
