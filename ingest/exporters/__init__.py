"""
Exporters for Booking Ingest
"""

from .csv_exporter import CSVExporter

__all__ = ['CSVExporter']
