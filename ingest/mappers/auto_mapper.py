"""
Auto field mapper

Suggests which source column (CSV header) or payload path feeds each booking
field, using normalized substring matching against per-field name patterns.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.models import FieldMapping


_NON_ALNUM = re.compile(r'[^a-z0-9]')


@dataclass(frozen=True)
class MappingRule:
    """Name patterns that identify the source of one target field."""
    target_field: str
    patterns: Tuple[str, ...]


def _rules(table: Sequence[Tuple[str, List[str]]]) -> List[MappingRule]:
    return [MappingRule(field, tuple(patterns)) for field, patterns in table]


# Rule order matters: earlier rules are tried first for every header
CSV_MAPPING_RULES = _rules([
    ('reservationCode', ['reservation id', 'confirmation', 'booking id', 'reference']),
    ('guestName', ['guest', 'name', 'customer']),
    ('checkInDate', ['check-in', 'checkin', 'arrival', 'start date']),
    ('checkOutDate', ['check-out', 'checkout', 'departure', 'end date']),
    ('numNights', ['nights', 'duration', 'stay']),
    ('platform', ['channel', 'platform', 'source']),
    ('listingName', ['listing', 'property', 'accommodation']),
    ('totalPrice', ['total price', 'totalprice', 'amount', 'revenue']),
    ('accommodationFee', ['accommodation', 'base rate', 'room']),
    ('cleaningFee', ['cleaning', 'totalcleaning']),
    ('lodgingTax', ['lodging', 'lodgingtx', 'tax']),
    ('airbnbSalesTax', ['airbnbsalestax', 'sales tax']),
    ('paymentFees', ['payment', 'paymentfees', 'processing']),
    ('channelFee', ['channel fee', 'commission', 'hostsidechannelfee']),
])

# Matched against dotted payload paths such as "data.guestEmail"
WEBHOOK_MAPPING_RULES = _rules([
    ('guestEmail', ['guestemail', 'email']),
    ('guestName', ['guestname', 'guest_name', 'guestfullname']),
    ('checkInDate', ['arrivaldate', 'checkin', 'check_in']),
    ('checkOutDate', ['departuredate', 'checkout', 'check_out']),
    ('numNights', ['nights']),
    ('listingName', ['listingname', 'propertyname']),
    ('platform', ['channelname', 'platform', 'source']),
    ('totalAmount', ['totalprice', 'totalamount']),
    ('cleaningFee', ['cleaningfee']),
])


def normalize_name(name: str) -> str:
    """
    Normalized form used for every name comparison.

    Examples:
        >>> normalize_name("Check-In Date")
        "checkindate"
    """
    return _NON_ALNUM.sub('', name.lower())


def suggest_mappings(source_names: Iterable[str], rules: Iterable[MappingRule]) -> Dict[str, str]:
    """
    Propose a source name for each target field.

    Source names are visited in order and, for each, the rules in order. A
    rule matches when either normalized string contains the other. The first
    source to match a rule keeps it.

    Args:
        source_names: CSV headers or payload paths
        rules: Target field rules in priority order

    Returns:
        Dict of {target_field: source_name}; unmatched fields are absent
    """
    rules = [
        (rule.target_field, [normalize_name(p) for p in rule.patterns])
        for rule in rules
    ]
    suggestions: Dict[str, str] = {}

    for source in source_names:
        normalized = normalize_name(source)
        # An empty name is contained in every pattern
        if not normalized:
            continue

        for target_field, patterns in rules:
            if target_field in suggestions:
                continue
            for pattern in patterns:
                if pattern and (pattern in normalized or normalized in pattern):
                    suggestions[target_field] = source
                    break

    return suggestions


def invert_mapping(mapping: Dict[str, str]) -> Dict[str, List[str]]:
    """Source name -> target fields it was suggested for."""
    inverse: Dict[str, List[str]] = {}
    for target_field, source in mapping.items():
        inverse.setdefault(source, []).append(target_field)
    return inverse


class AutoMapper:
    """
    Automatically detect field mappings from source names.

    Example:
        mapper = AutoMapper()
        mapping = mapper.suggest(table.header_names)
        print(f"Detected: {mapping.get('guestName')} -> guestName")
    """

    def __init__(
        self,
        rules: Sequence[MappingRule] = CSV_MAPPING_RULES,
        custom_patterns: Optional[Dict[str, List[str]]] = None
    ):
        """
        Initialize auto mapper.

        Args:
            rules: Base rule table (CSV or webhook)
            custom_patterns: Optional patterns per target field; prepended to
                the field's built-in patterns, or added as a new rule
        """
        patterns = {rule.target_field: list(rule.patterns) for rule in rules}

        if custom_patterns:
            for field, extra in custom_patterns.items():
                if field in patterns:
                    # Prepend custom patterns (higher priority)
                    patterns[field] = list(extra) + patterns[field]
                else:
                    patterns[field] = list(extra)

        self.rules = [MappingRule(field, tuple(p)) for field, p in patterns.items()]

    def suggest(self, source_names: Iterable[str]) -> FieldMapping:
        """
        Suggest a mapping for the given source names.

        Returns:
            FieldMapping with detected locators
        """
        return FieldMapping(suggest_mappings(source_names, self.rules))

    def get_mapping_confidence(self, mapping: FieldMapping, required: Sequence[str]) -> float:
        """
        Calculate confidence score for the mapping (0.0 to 1.0).

        Required fields carry 80% of the score, the remaining rule fields 20%.
        """
        optional = [rule.target_field for rule in self.rules if rule.target_field not in required]

        score = 0.0
        if required:
            mapped_required = sum(1 for field in required if mapping.is_mapped(field))
            score += (mapped_required / len(required)) * 0.8
        if optional:
            mapped_optional = sum(1 for field in optional if mapping.is_mapped(field))
            score += (mapped_optional / len(optional)) * 0.2

        return min(score, 1.0)

    def get_mapping_summary(self, mapping: FieldMapping) -> Dict[str, str]:
        """
        Returns:
            Dict of {target_field: source} for mapped fields, in rule order
        """
        mapped = mapping.get_mapped_fields()
        summary = {rule.target_field: mapped[rule.target_field]
                   for rule in self.rules if rule.target_field in mapped}
        for field, source in mapped.items():
            summary.setdefault(field, source)
        return summary


def validate_column_mapping(
    mapping: FieldMapping,
    required_fields: Iterable[str],
    headers: Optional[Iterable[str]] = None
) -> List[str]:
    """
    Check a CSV mapping before extraction.

    Args:
        mapping: Target field -> column name
        required_fields: Fields that must be mapped
        headers: Optional column names to check locators against

    Returns:
        List of error messages (empty when the mapping is usable)
    """
    errors = [f"{field} is required and must be mapped" for field in mapping.missing_fields(required_fields)]

    if headers is not None:
        known = set(headers)
        for field, column in mapping.get_mapped_fields().items():
            if column not in known:
                errors.append(f"{field} is mapped to unknown column '{column}'")

    return errors
