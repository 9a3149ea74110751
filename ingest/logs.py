"""
Logging setup for the command line

Library modules only create loggers; handlers are installed here, once, by
the CLI.
"""

import logging
from typing import Optional

from rich.logging import RichHandler

from core.config import get_config
from .banner import console


def setup_logging(level: Optional[str] = None) -> None:
    """Route log records through the shared rich console."""
    level = (level or get_config().log_level).upper()
    logging.basicConfig(
        level=level,
        format='%(message)s',
        datefmt='[%X]',
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=False)],
        force=True
    )
