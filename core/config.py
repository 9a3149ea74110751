"""
Booking Ingest Configuration
Centralized configuration management
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any
from dotenv import load_dotenv

from ._version import __version__


RAGGED_ROW_POLICIES = ('pad', 'reject')
QUOTE_POLICIES = ('lenient', 'strict')


class IngestConfig:
    """
    Centralized configuration for Booking Ingest.
    Loads from .env and provides typed access to all settings.
    """

    def __init__(self, env_file: Optional[Path] = None):
        if env_file is None:
            env_file = Path(__file__).parent.parent / '.env'

        if env_file.exists():
            load_dotenv(env_file)

        # Framework settings
        self.framework_name = "Booking Ingest"
        self.framework_version = __version__

        # Paths
        self.root_dir = Path(__file__).parent.parent

        # Output directory from .env or default
        output_dir_env = os.getenv('INGEST_OUTPUT_DIR', 'output')
        if Path(output_dir_env).is_absolute():
            self.output_dir = Path(output_dir_env)
        else:
            self.output_dir = self.root_dir / output_dir_env

        # CSV parse policies
        self.ragged_rows = _choice('INGEST_RAGGED_ROWS', 'pad', RAGGED_ROW_POLICIES)
        self.unterminated_quotes = _choice('INGEST_UNTERMINATED_QUOTES', 'lenient', QUOTE_POLICIES)

        # Logging and previews
        self.log_level = os.getenv('INGEST_LOG_LEVEL', 'WARNING').upper()
        self.preview_length = _positive_int('INGEST_PREVIEW_LENGTH', 50)
        self.path_max_depth = _positive_int('INGEST_PATH_MAX_DEPTH', 10)

    def get_output_dir(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    def get_config_status(self) -> Dict[str, Any]:
        return {
            'framework': {
                'name': self.framework_name,
                'version': self.framework_version
            },
            'parser': {
                'ragged_rows': self.ragged_rows,
                'unterminated_quotes': self.unterminated_quotes
            },
            'output': {
                'output_dir': str(self.output_dir),
                'log_level': self.log_level,
                'preview_length': self.preview_length,
                'path_max_depth': self.path_max_depth
            }
        }

    def __repr__(self) -> str:
        status = self.get_config_status()
        return f"IngestConfig({status['parser']})"


def _choice(name: str, default: str, allowed: tuple) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in allowed:
        raise ValueError(f"{name} must be one of {', '.join(allowed)} (got {value!r})")
    return value


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive (got {value})")
    return value


# Global config instance
_config: Optional[IngestConfig] = None


def get_config() -> IngestConfig:
    global _config
    if _config is None:
        _config = IngestConfig()
    return _config


def reload_config(env_file: Optional[Path] = None) -> IngestConfig:
    global _config
    _config = IngestConfig(env_file)
    return _config
