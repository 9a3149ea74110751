"""
Payload value kinds

Webhook bodies are arbitrary JSON. These helpers classify a decoded value
and read from it without raising, using MISSING for "no such value" so that
an absent key stays distinct from an explicit JSON null (None).
"""

from enum import Enum
from typing import Any


class _Missing:
    """Singleton marking a value that does not exist."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'MISSING'

    def __reduce__(self):
        return (_Missing, ())


MISSING = _Missing()


class ValueKind(Enum):
    OBJECT = 'object'
    ARRAY = 'array'
    SCALAR = 'scalar'
    NULL = 'null'
    MISSING = 'missing'


def kind_of(value: Any) -> ValueKind:
    if value is MISSING:
        return ValueKind.MISSING
    if value is None:
        return ValueKind.NULL
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.SCALAR


def is_absent(value: Any) -> bool:
    """True for MISSING and None."""
    return value is MISSING or value is None


def get_member(value: Any, key: str) -> Any:
    """``value[key]`` for objects, MISSING otherwise."""
    if kind_of(value) is not ValueKind.OBJECT:
        return MISSING
    return value.get(key, MISSING)


def get_item(value: Any, index: int) -> Any:
    """``value[index]`` for arrays and in-range non-negative indices, MISSING otherwise."""
    if kind_of(value) is not ValueKind.ARRAY or not 0 <= index < len(value):
        return MISSING
    return value[index]
