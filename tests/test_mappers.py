import pytest
from rich.prompt import Confirm, Prompt

from core.models import FieldMapping, IGNORE_COLUMN
from core.schema import CSV_BOOKING_FIELDS, FieldSpec, required_fields
from ingest.loaders import parse_csv_text
from ingest.mappers import (
    AutoMapper, InteractiveMapper, MappingRule, PlatformMappings,
    invert_mapping, normalize_name, suggest_mappings, validate_column_mapping,
)

AIRBNB_HEADERS = [
    "Confirmation code", "Status", "Guest name", "Start date",
    "End date", "# of nights", "Listing", "Earnings",
]


def test_normalize_name_drops_case_and_punctuation() -> None:
    assert normalize_name("Check-In Date") == "checkindate"
    assert normalize_name("# of nights") == "ofnights"
    assert normalize_name("---") == ""


def test_suggest_single_pattern() -> None:
    rules = [MappingRule("email", ("email",))]

    assert suggest_mappings(["Guest Email"], rules) == {"email": "Guest Email"}


def test_first_matching_source_wins() -> None:
    rules = [MappingRule("guestName", ("guest", "name"))]

    assert suggest_mappings(["Guest", "Guest Name"], rules) == {"guestName": "Guest"}


def test_pattern_may_contain_the_source_name() -> None:
    rules = [MappingRule("numNights", ("nights",))]

    assert suggest_mappings(["Night"], rules) == {"numNights": "Night"}


def test_punctuation_only_names_are_skipped() -> None:
    rules = [MappingRule("guestName", ("guest",))]

    assert suggest_mappings(["---", "Guest"], rules) == {"guestName": "Guest"}


def test_suggest_airbnb_export_headers() -> None:
    mapping = AutoMapper().suggest(AIRBNB_HEADERS)

    assert mapping.locators == {
        'reservationCode': 'Confirmation code',
        'guestName': 'Guest name',
        'checkInDate': 'Start date',
        'checkOutDate': 'End date',
        'numNights': '# of nights',
        'listingName': 'Listing',
    }
    assert mapping.missing_fields(required_fields(CSV_BOOKING_FIELDS)) == ['platform']


def test_suggestions_are_deterministic() -> None:
    mapper = AutoMapper()

    first = mapper.suggest(AIRBNB_HEADERS)
    second = mapper.suggest(AIRBNB_HEADERS)

    assert list(first.locators.items()) == list(second.locators.items())


def test_custom_patterns_take_priority_and_add_fields() -> None:
    mapper = AutoMapper(custom_patterns={'platform': ['status'], 'guestPhone': ['phone']})

    mapping = mapper.suggest(["Status", "Phone Number"])

    assert mapping.get('platform') == 'Status'
    assert mapping.get('guestPhone') == 'Phone Number'


def test_mapping_confidence_weights_required_fields() -> None:
    mapper = AutoMapper(rules=[
        MappingRule('a', ('a',)),
        MappingRule('b', ('b',)),
        MappingRule('c', ('c',)),
    ])

    assert mapper.get_mapping_confidence(FieldMapping({'a': 'A'}), ['a', 'b']) == pytest.approx(0.4)
    assert mapper.get_mapping_confidence(FieldMapping({'a': 'A', 'c': 'C'}), ['a', 'b']) == pytest.approx(0.6)
    assert mapper.get_mapping_confidence(FieldMapping({'a': 'A', 'b': 'B', 'c': 'C'}), ['a', 'b']) == pytest.approx(1.0)


def test_mapping_summary_follows_rule_order() -> None:
    mapper = AutoMapper()
    mapping = FieldMapping({'listingName': 'Listing', 'guestName': 'Guest', 'extra': 'X'})

    assert list(mapper.get_mapping_summary(mapping)) == ['guestName', 'listingName', 'extra']


def test_invert_mapping_groups_fields_by_source() -> None:
    inverse = invert_mapping({'platform': 'Channel', 'channelFee': 'Channel', 'guestName': 'Guest'})

    assert inverse == {'Channel': ['platform', 'channelFee'], 'Guest': ['guestName']}


def test_validate_column_mapping_reports_missing_and_unknown_columns() -> None:
    mapping = FieldMapping({'guestName': 'Guest', 'platform': IGNORE_COLUMN, 'numNights': 'Nights'})

    errors = validate_column_mapping(mapping, ['guestName', 'platform'], headers=['Guest'])

    assert errors == [
        "platform is required and must be mapped",
        "numNights is mapped to unknown column 'Nights'",
    ]


def test_validate_column_mapping_accepts_complete_mapping() -> None:
    mapping = FieldMapping({'guestName': 'Guest'})

    assert validate_column_mapping(mapping, ['guestName'], headers=['Guest', 'Nights']) == []


def test_field_mapping_treats_blank_and_ignored_as_unmapped() -> None:
    mapping = FieldMapping.from_dict({'a': 'A', 'b': '  ', 'c': IGNORE_COLUMN, 'd': None})

    assert 'd' not in mapping.locators
    assert mapping.get_mapped_fields() == {'a': 'A'}
    assert len(mapping) == 1
    assert mapping.missing_fields(['a', 'b', 'c']) == ['b', 'c']

    mapping.set('a', None)
    assert mapping.get('a') is None


def test_platform_override_wins_over_base() -> None:
    layers = PlatformMappings(FieldMapping({'cleaningFee': 'Cleaning', 'guestName': 'Guest'}))
    layers.set_override('vrbo', 'cleaningFee', 'VRBO Cleaning')

    assert layers.for_platform('vrbo').get('cleaningFee') == 'VRBO Cleaning'
    assert layers.for_platform('vrbo').get('guestName') == 'Guest'
    assert layers.for_platform('airbnbOfficial').get('cleaningFee') == 'Cleaning'
    assert layers.is_override('vrbo', 'cleaningFee')
    assert not layers.is_override('vrbo', 'guestName')


def test_blank_platform_override_falls_back_to_base() -> None:
    layers = PlatformMappings(FieldMapping({'guestName': 'Guest'}))
    layers.set_override('vrbo', 'guestName', '   ')

    assert layers.for_platform('vrbo').get('guestName') == 'Guest'
    assert not layers.is_override('vrbo', 'guestName')


def test_all_platform_edits_base_mapping() -> None:
    layers = PlatformMappings()
    layers.set_override('ALL', 'platform', 'Channel')

    assert layers.base.get('platform') == 'Channel'
    assert layers.for_platform('direct').get('platform') == 'Channel'


def test_unknown_platform_is_rejected() -> None:
    with pytest.raises(ValueError):
        PlatformMappings().set_override('expedia', 'guestName', 'Guest')


@pytest.fixture
def small_table():
    return parse_csv_text("Guest Name,Guest Email,Nights\nAna,ana@example.com,3\nBo,,2\n")


def test_resolve_choice_by_number_and_name(small_table) -> None:
    mapper = InteractiveMapper(small_table)

    assert mapper.resolve_choice('2') == ('Guest Email', None)
    assert mapper.resolve_choice('Nights') == ('Nights', None)
    assert mapper.resolve_choice('email') == ('Guest Email', None)
    assert mapper.resolve_choice('-') == (IGNORE_COLUMN, None)


def test_resolve_choice_explains_rejected_answers(small_table) -> None:
    mapper = InteractiveMapper(small_table)

    column, message = mapper.resolve_choice('9')
    assert column is None
    assert '1' in message and '3' in message

    column, message = mapper.resolve_choice('guest')
    assert column is None
    assert message.startswith('Did you mean')

    column, message = mapper.resolve_choice('phone')
    assert column is None
    assert message.startswith("Not found: 'phone'")


def test_interactive_map_accepts_complete_auto_mapping(small_table, monkeypatch) -> None:
    fields = [FieldSpec('guestName', 'Guest Name', required=True)]
    auto = FieldMapping({'guestName': 'Guest Name'})
    monkeypatch.setattr(Confirm, 'ask', lambda *args, **kwargs: True)

    assert InteractiveMapper(small_table, fields).map(auto) is auto


def test_interactive_map_prompts_each_field(small_table, monkeypatch) -> None:
    fields = [
        FieldSpec('guestName', 'Guest Name', required=True),
        FieldSpec('guestEmail', 'Guest Email'),
        FieldSpec('numNights', 'Nights', kind='integer'),
    ]
    answers = iter(['guest', '1', '-', ''])
    monkeypatch.setattr(Prompt, 'ask', lambda *args, **kwargs: next(answers))

    mapping = InteractiveMapper(small_table, fields).map()

    assert mapping.get('guestName') == 'Guest Name'
    assert mapping.get('guestEmail') == IGNORE_COLUMN
    assert mapping.get('numNights') is None
    assert mapping.is_complete(['guestName'])
