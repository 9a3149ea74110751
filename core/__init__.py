"""Booking Ingest Core"""

from ._version import __version__
from .config import IngestConfig, get_config, reload_config
from .errors import (
    IngestError, EmptyInputError, FileReadError, MalformedRowError, PathSyntaxError,
)
from .models import (
    IGNORE_COLUMN, ColumnHeader, RejectedRow, ParsedTable, FieldMapping,
    FieldValue, FieldOverride, ExtractionResult, ValidationReport, FieldPreview,
)

__all__ = [
    '__version__',
    'IngestConfig', 'get_config', 'reload_config',
    'IngestError', 'EmptyInputError', 'FileReadError', 'MalformedRowError', 'PathSyntaxError',
    'IGNORE_COLUMN', 'ColumnHeader', 'RejectedRow', 'ParsedTable', 'FieldMapping',
    'FieldValue', 'FieldOverride', 'ExtractionResult', 'ValidationReport', 'FieldPreview',
]
