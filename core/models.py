"""
Booking Ingest Data Models
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional


# Locator meaning "this column is deliberately not mapped"
IGNORE_COLUMN = '__ignore__'


@dataclass(frozen=True)
class ColumnHeader:
    """One source column: ordinal position, trimmed name, first data value."""
    index: int
    name: str
    sample_value: str = ''


@dataclass(frozen=True)
class RejectedRow:
    """A data line left out of a table by the parse policies."""
    line_number: int
    reason: str
    cells: List[str] = field(default_factory=list)


@dataclass
class ParsedTable:
    """Header list plus a matrix of string cells, one list per data row."""
    headers: List[ColumnHeader]
    rows: List[List[str]]
    total_row_count: int
    rejected_rows: List[RejectedRow] = field(default_factory=list)

    @property
    def header_names(self) -> List[str]:
        return [header.name for header in self.headers]

    def column_index(self, name: str) -> Optional[int]:
        """Index of the first column called ``name``, or None."""
        for header in self.headers:
            if header.name == name:
                return header.index
        return None

    def records(self) -> List[Dict[str, str]]:
        names = self.header_names
        return [dict(zip(names, row)) for row in self.rows]


@dataclass
class FieldMapping:
    """
    Maps target booking fields to source locators.

    A locator is a CSV column name (or IGNORE_COLUMN) for uploads, and a path
    expression for webhook payloads.
    """
    locators: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, locators: Dict[str, Optional[str]]) -> 'FieldMapping':
        return cls({k: v for k, v in locators.items() if v is not None})

    def get(self, target_field: str) -> Optional[str]:
        return self.locators.get(target_field)

    def set(self, target_field: str, locator: Optional[str]) -> None:
        if locator is None:
            self.locators.pop(target_field, None)
        else:
            self.locators[target_field] = locator

    def is_mapped(self, target_field: str) -> bool:
        locator = self.locators.get(target_field)
        return bool(locator and locator.strip() and locator != IGNORE_COLUMN)

    def get_mapped_fields(self) -> Dict[str, str]:
        return {k: v for k, v in self.locators.items() if self.is_mapped(k)}

    def missing_fields(self, required: Iterable[str]) -> List[str]:
        return [name for name in required if not self.is_mapped(name)]

    def is_complete(self, required: Iterable[str]) -> bool:
        return not self.missing_fields(required)

    def __len__(self) -> int:
        return len(self.get_mapped_fields())


@dataclass(frozen=True)
class FieldValue:
    """Extraction outcome for one target field."""
    raw_value: Any = None
    coerced_value: Any = None
    error: Optional[str] = None


@dataclass(frozen=True)
class FieldOverride:
    """A manual edit layered over an extracted value."""
    field: str
    original_value: Any
    new_value: Any
    reason: Optional[str] = None


@dataclass(frozen=True)
class ExtractionResult:
    """Per row (or per payload) field values. Never mutated after creation."""
    row_index: int
    values: Dict[str, FieldValue] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return any(value.error for value in self.values.values())

    def errors(self) -> Dict[str, str]:
        return {name: value.error for name, value in self.values.items() if value.error}

    def as_record(self) -> Dict[str, Any]:
        return {name: value.coerced_value for name, value in self.values.items()}

    def with_overrides(self, overrides: Iterable[FieldOverride]) -> Dict[str, Any]:
        """
        Return the record with overrides applied on top.

        Later overrides for the same field win. The result itself is left
        untouched.
        """
        record = self.as_record()
        for override in overrides:
            record[override.field] = override.new_value
        return record


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of checking a mapping against a sample payload."""
    missing_fields: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.missing_fields and not self.errors


@dataclass(frozen=True)
class FieldPreview:
    """Coerced value and a display string truncated for previews."""
    value: Any
    preview: str
