"""
Webhook payload processing for Booking Ingest
"""

from .paths import PathExpression, KeySegment, IndexSegment, FindSegment, parse_path
from .processor import (
    extract_value,
    apply_mappings,
    validate_mappings,
    suggest_from_payload,
    suggest_webhook_mappings,
    discover_paths,
    finance_field_paths,
    resolvable_mappings,
    preview_mappings,
    extract_payload,
)

__all__ = [
    'PathExpression', 'KeySegment', 'IndexSegment', 'FindSegment', 'parse_path',
    'extract_value', 'apply_mappings', 'validate_mappings',
    'suggest_from_payload', 'suggest_webhook_mappings',
    'discover_paths', 'finance_field_paths', 'resolvable_mappings',
    'preview_mappings', 'extract_payload',
]
