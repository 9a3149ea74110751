"""
Field mappers for Booking Ingest
"""

from .auto_mapper import (
    AutoMapper, MappingRule, CSV_MAPPING_RULES, WEBHOOK_MAPPING_RULES,
    normalize_name, suggest_mappings, invert_mapping, validate_column_mapping,
)
from .interactive_mapper import InteractiveMapper
from .platform_mappings import PlatformMappings

__all__ = [
    'AutoMapper', 'MappingRule', 'CSV_MAPPING_RULES', 'WEBHOOK_MAPPING_RULES',
    'normalize_name', 'suggest_mappings', 'invert_mapping', 'validate_column_mapping',
    'InteractiveMapper', 'PlatformMappings',
]
