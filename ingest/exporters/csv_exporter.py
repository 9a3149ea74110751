"""
CSV exporter

Exports normalized booking records to CSV.
Automatically saves to output/ folder with timestamped filenames.
"""

import csv
from typing import List, Optional, Sequence
from pathlib import Path
from datetime import datetime

from ..extraction import ExtractionBatch


class CSVExporter:
    """
    Export extracted bookings to CSV format.

    Example:
        exporter = CSVExporter()
        exporter.export_records(batch, "output/bookings.csv")
    """

    def export_records(
        self,
        batch: ExtractionBatch,
        output_path: str,
        columns: Optional[Sequence[str]] = None,
        include_errors: bool = True
    ) -> int:
        """
        Export coerced values, one row per extracted row.

        Args:
            batch: Extraction results
            output_path: Path to output CSV file
            columns: Field order (default: fields in order of first appearance)
            include_errors: Append an 'errors' column with per-row messages

        Returns:
            Number of records exported
        """
        fieldnames = list(columns) if columns else self._field_order(batch)
        if include_errors:
            fieldnames.append('errors')

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction='ignore')
            writer.writeheader()

            for result in batch.results:
                row = {k: ('' if v is None else v) for k, v in result.as_record().items()}
                if include_errors:
                    row['errors'] = '; '.join(result.errors().values())
                writer.writerow(row)

        return len(batch.results)

    @staticmethod
    def _field_order(batch: ExtractionBatch) -> List[str]:
        seen = {}
        for result in batch.results:
            for name in result.values:
                seen.setdefault(name, None)
        return list(seen)

    @staticmethod
    def generate_filename(prefix: str = 'bookings', base_dir: Optional[str] = None) -> str:
        """
        Generate a timestamped filename for export.

        Format: {base_dir}/{prefix}_YYYY-MM-DD_HHMMSS.csv
        Example: output/bookings_2024-02-15_143022.csv

        Args:
            prefix: File name prefix
            base_dir: Base directory for output (default: uses centralized config)

        Returns:
            Full path to output file
        """
        if base_dir is None:
            from core.config import get_config
            output_dir = get_config().get_output_dir()
        else:
            output_dir = Path(base_dir)
            output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime('%Y-%m-%d_%H%M%S')
        return str(output_dir / f"{prefix}_{timestamp}.csv")
