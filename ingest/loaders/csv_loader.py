"""
CSV parser and loader

Turns booking-platform CSV exports into a ParsedTable:
- Quote-aware row tokenizing (commas and doubled quotes inside quotes)
- Header names with a sample value from the first data row
- Explicit policies for ragged rows and unterminated quotes
- Encoding detection when loading from disk
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from core.config import RAGGED_ROW_POLICIES, QUOTE_POLICIES, get_config
from core.errors import EmptyInputError, FileReadError, MalformedRowError
from core.models import ColumnHeader, ParsedTable, RejectedRow
from .base import DataLoader

logger = logging.getLogger(__name__)

# Tried in order; latin1 decodes any byte sequence so it goes last
ENCODINGS = ['utf-8-sig', 'cp1252', 'latin1']


def tokenize_row(line: str) -> Tuple[List[str], bool]:
    """
    Split one CSV line into cells.

    Single left-to-right scan with an in-quotes flag. Inside quotes a comma
    is literal and ``""`` is an escaped quote.

    Args:
        line: One physical line, without its line terminator

    Returns:
        Tuple of (cells, terminated). ``terminated`` is False when the line
        ends inside an open quote.

    Examples:
        >>> tokenize_row('a,"b,c","d""e"')
        (['a', 'b,c', 'd"e'], True)
    """
    cells = []
    current = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < length and line[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            cells.append(''.join(current))
            current = []
        else:
            current.append(char)
        i += 1

    cells.append(''.join(current))
    return cells, not in_quotes


def parse_csv_text(
    text: str,
    ragged_rows: str = 'pad',
    unterminated_quotes: str = 'lenient'
) -> ParsedTable:
    """
    Parse CSV text into headers and rows.

    Args:
        text: Full file contents
        ragged_rows: 'pad' fits every row to the header width (pad short
            rows with '', truncate long ones); 'reject' moves rows of the
            wrong width to ``rejected_rows``
        unterminated_quotes: 'lenient' keeps the best-effort scan of a line
            with an open quote; 'strict' rejects such data rows and raises
            on such a header row

    Returns:
        ParsedTable

    Raises:
        EmptyInputError: If no non-blank lines remain
        MalformedRowError: If the header has an open quote under 'strict'
        ValueError: If a policy name is unknown
    """
    if ragged_rows not in RAGGED_ROW_POLICIES:
        raise ValueError(f"Unknown ragged row policy: {ragged_rows!r}")
    if unterminated_quotes not in QUOTE_POLICIES:
        raise ValueError(f"Unknown unterminated quote policy: {unterminated_quotes!r}")

    if text.startswith('\ufeff'):
        text = text[1:]

    # Keep physical line numbers for diagnostics
    lines = []
    for number, line in enumerate(text.split('\n'), 1):
        if line.endswith('\r'):
            line = line[:-1]
        if line.strip():
            lines.append((number, line))

    if not lines:
        raise EmptyInputError('CSV file is empty')

    header_line_number, header_line = lines[0]
    header_cells, terminated = tokenize_row(header_line)
    if not terminated and unterminated_quotes == 'strict':
        raise MalformedRowError(f"Unterminated quote in header row (line {header_line_number})")

    first_data = tokenize_row(lines[1][1])[0] if len(lines) > 1 else []
    headers = [
        ColumnHeader(
            index=index,
            name=name.strip(),
            sample_value=first_data[index].strip() if index < len(first_data) else ''
        )
        for index, name in enumerate(header_cells)
    ]
    width = len(headers)

    rows = []
    rejected = []
    for number, line in lines[1:]:
        cells, terminated = tokenize_row(line)

        if not terminated and unterminated_quotes == 'strict':
            rejected.append(RejectedRow(number, 'unterminated quote', cells))
            continue

        if len(cells) != width:
            if ragged_rows == 'reject':
                rejected.append(RejectedRow(number, f"expected {width} cells, found {len(cells)}", cells))
                continue
            cells = cells[:width] + [''] * (width - len(cells))

        rows.append(cells)

    if rejected:
        logger.warning("Rejected %d of %d data rows", len(rejected), len(lines) - 1)
    logger.info("Parsed %d columns and %d rows", width, len(rows))

    return ParsedTable(
        headers=headers,
        rows=rows,
        total_row_count=len(rows),
        rejected_rows=rejected
    )


class CSVLoader(DataLoader):
    """
    Load booking CSV files with encoding detection.

    Example:
        loader = CSVLoader("bookings.csv")
        table = loader.load()
        table = await loader.load_async()
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        ragged_rows: Optional[str] = None,
        unterminated_quotes: Optional[str] = None
    ):
        """
        Initialize CSV loader.

        Args:
            file_path: Path to CSV file
            ragged_rows: Ragged row policy (default: from config)
            unterminated_quotes: Unterminated quote policy (default: from config)
        """
        self.file_path = Path(file_path)
        self.encoding: Optional[str] = None

        config = get_config()
        self.ragged_rows = ragged_rows or config.ragged_rows
        self.unterminated_quotes = unterminated_quotes or config.unterminated_quotes

    def load(self) -> ParsedTable:
        """
        Read and parse the CSV file.

        Raises:
            FileReadError: If the file is missing or unreadable
            EmptyInputError: If the file has no non-blank lines
        """
        text = self.read_text()
        return parse_csv_text(
            text,
            ragged_rows=self.ragged_rows,
            unterminated_quotes=self.unterminated_quotes
        )

    async def load_async(self) -> ParsedTable:
        """Single-shot asynchronous load; resolves with the parsed table."""
        return await asyncio.to_thread(self.load)

    def read_text(self) -> str:
        try:
            raw = self.file_path.read_bytes()
        except FileNotFoundError:
            raise FileReadError(f"CSV file not found: {self.file_path}") from None
        except OSError as exc:
            raise FileReadError(f"Failed to read file {self.file_path}: {exc}") from exc

        self.encoding = self._detect_encoding(raw)
        return raw.decode(self.encoding)

    def _detect_encoding(self, raw: bytes) -> str:
        """
        Pick the first encoding that decodes the whole file.

        Returns:
            Encoding name (utf-8-sig, cp1252, latin1)
        """
        for encoding in ENCODINGS[:-1]:
            try:
                raw.decode(encoding)
                return encoding
            except UnicodeDecodeError:
                continue

        return ENCODINGS[-1]

    def get_preview(self, limit: int = 5) -> List[dict]:
        """
        Get a preview of the CSV data.

        Args:
            limit: Number of rows to preview

        Returns:
            Limited list of records keyed by header name
        """
        return self.load().records()[:limit]

    def get_info(self) -> dict:
        """
        Get metadata about the CSV file.

        Returns:
            Dict with file info (row_count, column_count, encoding, etc.)
        """
        table = self.load()

        return {
            'file_path': str(self.file_path),
            'file_size': self.file_path.stat().st_size,
            'row_count': table.total_row_count,
            'rejected_count': len(table.rejected_rows),
            'column_count': len(table.headers),
            'encoding': self.encoding,
            'headers': table.header_names
        }


async def parse_csv_file(
    file_path: Union[str, Path],
    ragged_rows: Optional[str] = None,
    unterminated_quotes: Optional[str] = None
) -> ParsedTable:
    """
    Read and parse a CSV file asynchronously.

    Raises:
        FileReadError: If the file cannot be read
        EmptyInputError: If the file holds no data
    """
    loader = CSVLoader(file_path, ragged_rows=ragged_rows, unterminated_quotes=unterminated_quotes)
    return await loader.load_async()
