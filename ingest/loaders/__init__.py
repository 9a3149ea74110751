"""
Data loaders for Booking Ingest
"""

from .base import DataLoader
from .csv_loader import CSVLoader, parse_csv_text, parse_csv_file, tokenize_row
from .json_loader import PayloadLoader

__all__ = ['DataLoader', 'CSVLoader', 'PayloadLoader', 'parse_csv_text', 'parse_csv_file', 'tokenize_row']
