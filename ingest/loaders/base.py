"""
Abstract base class for data loaders
"""

from abc import ABC, abstractmethod
from typing import Any


class DataLoader(ABC):
    """
    Abstract base class for loading booking data from a source.

    CSV loaders return a ParsedTable; payload loaders return the decoded
    JSON value.
    """

    @abstractmethod
    def load(self) -> Any:
        """
        Load data from source.

        Raises:
            FileReadError: If the source cannot be read
        """
        pass
