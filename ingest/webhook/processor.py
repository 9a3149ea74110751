"""
Webhook field processing

Reads booking fields out of webhook payloads using path expressions, and
suggests, validates and previews payload mappings.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from core.config import get_config
from core.errors import PathSyntaxError
from core.models import ExtractionResult, FieldMapping, FieldPreview, FieldValue, ValidationReport
from core.values import MISSING, ValueKind, get_member, is_absent, kind_of
from ..extraction import field_result
from ..mappers.auto_mapper import WEBHOOK_MAPPING_RULES, suggest_mappings
from ..normalizers import coerce_value, to_text
from .paths import FindSegment, KeySegment, parse_path

logger = logging.getLogger(__name__)


FINANCE_FIELD_MARKER = 'financeField.find'

_FINANCE_FIELD_LOOKUP = re.compile(
    r'''financeField\.find\(\s*(\w+)\s*=>\s*\1\.(\w+)\s*===?\s*(["'])(.*?)\3\s*\)(?:\.(\w+))?'''
)

# Hostaway reservation events: {"object": "reservation", "data": {...}}
HOSTAWAY_RESERVATION_MAPPING = {
    'guestName': 'guestName',
    'guestEmail': 'guestEmail',
    'checkInDate': 'arrivalDate',
    'checkOutDate': 'departureDate',
    'numNights': 'nights',
    'listingName': 'listingName',
    'platform': 'channelName',
    'totalAmount': 'totalPrice',
    'cleaningFee': 'cleaningFee',
    'nightlyRate': 'financeField.find(f => f.name === "baseRate").total',
    'lodgingTax': 'financeField.find(f => f.name === "lodgingTax").total',
    'salesTax': 'financeField.find(f => f.name === "salesTax").total',
    'gst': 'financeField.find(f => f.name === "vat").total',
}

# Key spellings probed on unknown payloads, in priority order
GENERIC_KEY_CANDIDATES = [
    ('guestName', ['guest_name', 'guestName']),
    ('guestEmail', ['guest_email', 'guestEmail']),
    ('checkInDate', ['check_in', 'checkin', 'arrival_date', 'arrivalDate']),
    ('checkOutDate', ['check_out', 'checkout', 'departure_date', 'departureDate']),
]

COMMON_FINANCE_FIELD_PATHS = [
    'financeField.find(f => f.name === "baseRate").total',
    'financeField.find(f => f.name === "cleaningFee").total',
    'financeField.find(f => f.name === "lodgingTax").total',
    'financeField.find(f => f.name === "salesTax").total',
    'financeField.find(f => f.name === "vat").total',
    'financeField.find(f => f.name === "weeklyDiscount").total',
    'financeField.find(f => f.name === "totalPriceFromChannel").total',
]

Mappings = Union[FieldMapping, Mapping[str, str]]


def _locators(mappings: Mappings) -> Dict[str, str]:
    if isinstance(mappings, FieldMapping):
        return dict(mappings.locators)
    return {k: v for k, v in mappings.items() if v is not None}


def _truthy(value: Any) -> bool:
    """Presence test used for envelope detection: empty objects count."""
    if is_absent(value) or value is False:
        return False
    if isinstance(value, (str, int, float)):
        return bool(value)
    return True


def extract_value(payload: Any, path: str) -> Any:
    """
    Read the value addressed by ``path``.

    Paths containing ``financeField.find`` always search the payload's
    ``data.financeField`` array (or a top-level ``financeField``), whatever
    precedes the predicate. Other paths start inside ``data`` when they name
    it first, or when their first key only exists there.

    Returns:
        The value, None for an explicit null, or MISSING. Malformed paths are
        logged and give MISSING.
    """
    if not path or payload is None:
        return MISSING

    try:
        if FINANCE_FIELD_MARKER in path:
            return _finance_field_lookup(payload, path)

        expression = parse_path(path)
        first = expression.segments[0]
        data = get_member(payload, 'data')

        if isinstance(first, KeySegment) and _truthy(data):
            if first.name == 'data':
                return expression.resolve(data, start=1)
            if not _truthy(get_member(payload, first.name)):
                return expression.resolve(data)

        return expression.resolve(payload)

    except (ValueError, TypeError) as exc:
        logger.warning("Failed to extract value from path %r: %s", path, exc)
        return MISSING


def _finance_field_lookup(payload: Any, path: str) -> Any:
    match = _FINANCE_FIELD_LOOKUP.search(path)
    if not match:
        logger.warning("Unrecognized financeField lookup in path %r", path)
        return MISSING

    search_property, search_value, return_property = match.group(2), match.group(4), match.group(5)

    items = get_member(get_member(payload, 'data'), 'financeField')
    if kind_of(items) is not ValueKind.ARRAY:
        items = get_member(payload, 'financeField')

    element = FindSegment(search_property, search_value).apply(items)
    if is_absent(element) or not return_property:
        return element
    return get_member(element, return_property)


def apply_mappings(payload: Any, mappings: Mappings) -> Dict[str, Any]:
    """
    Extract and coerce every mapped field.

    Fields with blank locators are left out, so "not mapped" stays distinct
    from "mapped but None".
    """
    result = {}
    for target_field, path in _locators(mappings).items():
        if path and path.strip():
            result[target_field] = coerce_value(target_field, extract_value(payload, path))
    return result


def validate_mappings(payload: Any, mappings: Mappings, required_fields: Iterable[str]) -> ValidationReport:
    """
    Check that every required field is mapped and yields a value.

    Returns:
        ValidationReport: blank locators land in ``missing_fields``; mapped
        locators that produce nothing land in ``errors``
    """
    locators = _locators(mappings)
    missing_fields = []
    errors = []

    for target_field in required_fields:
        path = locators.get(target_field)
        if not path or not path.strip():
            missing_fields.append(target_field)
            continue

        value = extract_value(payload, path)
        if is_absent(value) or value == '':
            errors.append(f'Field "{target_field}" mapping "{path}" produces no value')

    return ValidationReport(missing_fields=missing_fields, errors=errors)


def suggest_from_payload(payload: Any) -> FieldMapping:
    """
    Suggest paths from the payload's shape.

    Hostaway reservation envelopes get a fixed mapping. Other payloads are
    probed for a few common guest and date keys on ``data`` (or the payload
    itself when there is no ``data`` object).
    """
    if kind_of(payload) is not ValueKind.OBJECT:
        return FieldMapping()

    data = get_member(payload, 'data')
    if _truthy(data) and get_member(payload, 'object') == 'reservation':
        return FieldMapping(dict(HOSTAWAY_RESERVATION_MAPPING))

    if kind_of(data) is ValueKind.OBJECT:
        source, prefix = data, 'data.'
    else:
        source, prefix = payload, ''

    suggestions = {}
    for target_field, keys in GENERIC_KEY_CANDIDATES:
        for key in keys:
            if _truthy(get_member(source, key)):
                suggestions[target_field] = prefix + key
                break

    return FieldMapping(suggestions)


def _addressable(key: str) -> bool:
    """True when ``key`` can be written as one path segment."""
    try:
        return parse_path(key).segments == (KeySegment(key),)
    except PathSyntaxError:
        return False


def discover_paths(payload: Any, max_depth: Optional[int] = None) -> List[str]:
    """
    List every addressable path in the payload, sorted.

    Objects and arrays are listed as well as leaves; an array is explored
    through its first element only. Keys that cannot be written as a
    single path segment are skipped.
    """
    if max_depth is None:
        max_depth = get_config().path_max_depth

    data = get_member(payload, 'data')
    if kind_of(data) is ValueKind.OBJECT:
        root, prefix = data, 'data'
    elif kind_of(payload) is ValueKind.OBJECT:
        root, prefix = payload, ''
    else:
        return []

    paths = set()

    def visit(value: Any, path: str, depth: int) -> None:
        if depth > max_depth:
            return
        kind = kind_of(value)
        if kind is ValueKind.ARRAY:
            paths.add(path)
            if value:
                visit(value[0], f"{path}[0]", depth + 1)
        elif kind is ValueKind.OBJECT:
            if path != prefix:
                paths.add(path)
            for key, child in value.items():
                if not _addressable(key):
                    continue
                visit(child, f"{path}.{key}" if path else key, depth + 1)
        else:
            paths.add(path)

    visit(root, prefix, 0)
    paths.discard('')
    return sorted(paths)


def finance_field_paths(payload: Any) -> List[str]:
    """Common Hostaway finance paths that resolve on this payload."""
    items = get_member(get_member(payload, 'data'), 'financeField')
    if kind_of(items) is not ValueKind.ARRAY:
        return []
    return [path for path in COMMON_FINANCE_FIELD_PATHS if not is_absent(extract_value(payload, path))]


def resolvable_mappings(payload: Any, mappings: Mappings) -> FieldMapping:
    """Keep only locators that produce a value on ``payload``."""
    return FieldMapping({
        target_field: path
        for target_field, path in _locators(mappings).items()
        if path and not is_absent(extract_value(payload, path))
    })


def suggest_webhook_mappings(payload: Any) -> FieldMapping:
    """
    Best-effort mapping for a sample payload.

    Shape-based suggestions come first; name matching over the payload's
    leaf paths fills the remaining fields. Only paths that produce a value
    are kept.
    """
    locators = _locators(suggest_from_payload(payload))

    leaves = [
        path for path in discover_paths(payload)
        if kind_of(extract_value(payload, path)) is ValueKind.SCALAR
    ]
    for target_field, path in suggest_mappings(leaves, WEBHOOK_MAPPING_RULES).items():
        locators.setdefault(target_field, path)

    return resolvable_mappings(payload, locators)


def preview_mappings(
    payload: Any,
    mappings: Mappings,
    max_length: Optional[int] = None
) -> Dict[str, FieldPreview]:
    """
    Coerced value and a truncated display string for each mapping.

    Returns:
        Dict of {target_field: FieldPreview}; "No value" when nothing resolves
    """
    if max_length is None:
        max_length = get_config().preview_length

    preview = {}
    for target_field, path in _locators(mappings).items():
        value = coerce_value(target_field, extract_value(payload, path))

        text = 'No value'
        if value is not None:
            text = to_text(value)
            if len(text) > max_length:
                text = f"{text[:max_length]}..."

        preview[target_field] = FieldPreview(value=value, preview=text)

    return preview


def extract_payload(
    payload: Any,
    mappings: Mappings,
    required_fields: Iterable[str] = ()
) -> ExtractionResult:
    """Full per-field extraction of one payload, with diagnostics."""
    required = set(required_fields)
    locators = _locators(mappings)
    values = {}

    for target_field, path in locators.items():
        if path and path.strip():
            raw = extract_value(payload, path)
            values[target_field] = field_result(target_field, raw, path, target_field in required)

    for target_field in sorted(required):
        if target_field not in values:
            values[target_field] = FieldValue(error=f"{target_field} is required and must be mapped")

    return ExtractionResult(row_index=0, values=values)
