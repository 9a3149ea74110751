"""
Booking Ingest Errors

Structural failures that stop a pipeline. Per-field problems are never
raised; they are reported as data on the extraction results.
"""


class IngestError(Exception):
    """Base class for ingest failures."""


class EmptyInputError(IngestError, ValueError):
    """Input holds no non-blank lines."""


class FileReadError(IngestError, OSError):
    """Input file is missing, unreadable or cannot be decoded."""


class MalformedRowError(IngestError, ValueError):
    """Header row cannot be tokenized under the strict quote policy."""


class PathSyntaxError(IngestError, ValueError):
    """Path expression cannot be parsed."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message} in path {path!r}")
        self.path = path
