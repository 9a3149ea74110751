"""Booking Ingest engine: CSV parsing, field mapping and webhook extraction"""
