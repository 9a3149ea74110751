"""
Webhook payload loader

Reads a captured webhook body (JSON) from disk.
"""

import json
from pathlib import Path
from typing import Any, Union

from core.errors import EmptyInputError, FileReadError
from .base import DataLoader


class PayloadLoader(DataLoader):
    """
    Load a webhook payload saved as JSON.

    Example:
        payload = PayloadLoader("reservation.json").load()
    """

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)

    def load(self) -> Any:
        """
        Returns:
            Decoded JSON value

        Raises:
            FileReadError: If the file is missing, unreadable or not JSON
            EmptyInputError: If the file is blank
        """
        try:
            text = self.file_path.read_text(encoding='utf-8-sig')
        except FileNotFoundError:
            raise FileReadError(f"Payload file not found: {self.file_path}") from None
        except (OSError, UnicodeDecodeError) as exc:
            raise FileReadError(f"Failed to read file {self.file_path}: {exc}") from exc

        if not text.strip():
            raise EmptyInputError(f"Payload file is empty: {self.file_path}")

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FileReadError(f"Invalid JSON in {self.file_path}: {exc}") from exc
