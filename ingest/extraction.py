"""
Row extraction

Applies a column mapping to every row of a ParsedTable, producing one
ExtractionResult per row. Per-field problems become error strings on the
result; nothing here raises for bad data.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from core.models import ColumnHeader, ExtractionResult, FieldMapping, FieldValue, ParsedTable
from core.schema import field_kind
from core.values import is_absent
from .normalizers import coerce_value

logger = logging.getLogger(__name__)


KIND_LABELS = {
    'money': 'an amount',
    'integer': 'a whole number',
    'date': 'a date',
    'string': 'text',
}


def field_result(target_field: str, raw: Any, locator: str, required: bool = False) -> FieldValue:
    """
    Coerce one raw value and describe what went wrong, if anything.

    Args:
        target_field: Booking field name
        raw: Extracted value (None or MISSING when nothing was found)
        locator: Column name or path, used in messages
        required: Whether an empty value is an error
    """
    raw_value = None if is_absent(raw) else raw
    empty = raw_value is None or (isinstance(raw_value, str) and not raw_value.strip())

    if empty:
        error = f"{target_field} is required but '{locator}' has no value" if required else None
        return FieldValue(raw_value=raw_value, coerced_value=None, error=error)

    coerced = coerce_value(target_field, raw_value)
    error = None
    if coerced is None:
        error = f"Could not read {raw_value!r} from '{locator}' as {KIND_LABELS[field_kind(target_field)]}"

    return FieldValue(raw_value=raw_value, coerced_value=coerced, error=error)


def extract_row(
    headers: Sequence[ColumnHeader],
    row: Sequence[str],
    mapping: FieldMapping,
    row_index: int = 0,
    required_fields: Iterable[str] = ()
) -> ExtractionResult:
    """
    Extract the mapped booking fields from one CSV row.

    Ignored and blank locators are skipped. A column name that is not in
    ``headers`` gives a field error.
    """
    required = set(required_fields)
    positions: Dict[str, int] = {}
    for header in headers:
        positions.setdefault(header.name, header.index)

    values: Dict[str, FieldValue] = {}
    for target_field, column in mapping.get_mapped_fields().items():
        index = positions.get(column)
        if index is None:
            values[target_field] = FieldValue(error=f"Column '{column}' not found")
            continue
        raw = row[index] if index < len(row) else None
        values[target_field] = field_result(target_field, raw, column, target_field in required)

    for target_field in mapping.missing_fields(required):
        values[target_field] = FieldValue(error=f"{target_field} is required and must be mapped")

    return ExtractionResult(row_index=row_index, values=values)


@dataclass(frozen=True)
class ExtractionBatch:
    """All row results of one extraction plus error counts."""
    results: List[ExtractionResult] = field(default_factory=list)

    @property
    def rows_in_error(self) -> int:
        return sum(1 for result in self.results if result.has_errors)

    @property
    def fields_in_error(self) -> int:
        return sum(len(result.errors()) for result in self.results)

    @property
    def valid_rows(self) -> List[ExtractionResult]:
        return [result for result in self.results if not result.has_errors]

    def records(self) -> List[Dict[str, Any]]:
        return [result.as_record() for result in self.results]

    def error_messages(self) -> List[str]:
        return [
            f"Row {result.row_index + 1}: {message}"
            for result in self.results
            for message in result.errors().values()
        ]

    def to_dataframe(self, columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
        """Coerced values as a DataFrame, one row per extracted row."""
        frame = pd.DataFrame(self.records(), columns=list(columns) if columns else None)
        frame.index = [result.row_index for result in self.results]
        return frame


def extract_rows(
    table: ParsedTable,
    mapping: FieldMapping,
    required_fields: Iterable[str] = ()
) -> ExtractionBatch:
    """
    Extract every row of ``table``.

    Returns:
        ExtractionBatch with one result per row, in row order
    """
    required = list(required_fields)
    results = [
        extract_row(table.headers, row, mapping, row_index=index, required_fields=required)
        for index, row in enumerate(table.rows)
    ]
    batch = ExtractionBatch(results)

    logger.info(
        "Extracted %d rows (%d with errors, %d field errors)",
        len(results), batch.rows_in_error, batch.fields_in_error
    )
    return batch
