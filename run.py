#!/usr/bin/env python3
"""
Booking Ingest - Entry Point

Usage:
    python run.py inspect FILE     # Show columns and suggested mapping
    python run.py extract FILE     # Normalize every row and export a CSV
    python run.py webhook FILE     # Suggest and preview a payload mapping
    python run.py config           # Show configuration status
    python run.py version          # Show version
"""

import sys

from ingest.cli import main

if __name__ == '__main__':
    sys.exit(main())
