import logging

import pytest

from core.models import FieldMapping
from core.values import MISSING
from ingest.webhook import (
    apply_mappings, discover_paths, extract_payload, extract_value, finance_field_paths,
    preview_mappings, resolvable_mappings, suggest_from_payload, suggest_webhook_mappings,
    validate_mappings,
)
from ingest.webhook.processor import HOSTAWAY_RESERVATION_MAPPING

BASE_RATE = 'financeField.find(f => f.name === "baseRate").total'


def test_extract_finance_field_total() -> None:
    payload = {'data': {'financeField': [{'name': 'baseRate', 'total': 150}]}}

    assert extract_value(payload, 'data.' + BASE_RATE) == 150
    assert extract_value(payload, BASE_RATE) == 150


def test_extract_finance_field_without_match_is_missing() -> None:
    payload = {'data': {'financeField': [{'name': 'vat', 'total': 3}]}}

    assert extract_value(payload, BASE_RATE) is MISSING


def test_finance_field_lookup_uses_fixed_location() -> None:
    payload = {'data': {'financeField': [{'name': 'vat', 'total': 3}]}}

    assert extract_value(payload, 'whatever.financeField.find(f => f.name === "vat").total') == 3


def test_finance_field_lookup_falls_back_to_top_level_array() -> None:
    payload = {'financeField': [{'name': 'vat', 'total': 3}]}

    assert extract_value(payload, 'financeField.find(f => f.name === "vat").total') == 3
    assert extract_value(payload, 'financeField.find(f => f.name === "vat")') == {'name': 'vat', 'total': 3}


def test_extract_array_index() -> None:
    assert extract_value({'a': {'b': [10, 20, 30]}}, 'a.b[1]') == 20
    assert extract_value({'a': {'b': [10, 20, 30]}}, 'a.b[3]') is MISSING
    assert extract_value({'a': {'b': 'text'}}, 'a.b[0]') is MISSING


def test_extract_through_null_is_missing() -> None:
    assert extract_value({'a': None}, 'a.b') is MISSING


def test_explicit_null_is_none() -> None:
    assert extract_value({'a': None}, 'a') is None


@pytest.mark.parametrize("payload,path", [
    (None, 'a'),
    ({'a': 1}, ''),
    ({'a': 1}, None),
])
def test_extract_without_payload_or_path_is_missing(payload, path) -> None:
    assert extract_value(payload, path) is MISSING


def test_malformed_path_logs_warning_and_is_missing(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger='ingest.webhook.processor'):
        assert extract_value({'a': {'b': 1}}, 'a.b[') is MISSING

    assert 'a.b[' in caplog.text


def test_paths_start_inside_data_envelope(hostaway_payload) -> None:
    assert extract_value(hostaway_payload, 'guestName') == 'Jane Doe'
    assert extract_value(hostaway_payload, 'data.guestName') == 'Jane Doe'
    assert extract_value(hostaway_payload, 'object') == 'reservation'
    assert extract_value(hostaway_payload, 'listingCustomFields[0].value') == 'Unit 4B'


def test_paths_without_envelope_start_at_payload() -> None:
    payload = {'guestEmail': 'a@b.c', 'data': {}}

    assert extract_value(payload, 'guestEmail') == 'a@b.c'


def test_apply_mappings_coerces_values(hostaway_payload) -> None:
    result = apply_mappings(hostaway_payload, {
        'guestName': 'guestName',
        'nightlyRate': BASE_RATE,
        'numNights': 'nights',
        'checkInDate': 'arrivalDate',
        'totalAmount': 'totalPrice',
        'notes': '',
        'channelFee': 'data.channelFee',
    })

    assert result == {
        'guestName': 'Jane Doe',
        'nightlyRate': 450.0,
        'numNights': 3,
        'checkInDate': '2024-07-01',
        'totalAmount': 612.45,
        'channelFee': None,
    }


def test_apply_hostaway_suggestions(hostaway_payload) -> None:
    result = apply_mappings(hostaway_payload, suggest_from_payload(hostaway_payload))

    assert result == {
        'guestName': 'Jane Doe',
        'guestEmail': None,
        'checkInDate': '2024-07-01',
        'checkOutDate': '2024-07-04',
        'numNights': 3,
        'listingName': 'Lakeview Loft',
        'platform': 'airbnbOfficial',
        'totalAmount': 612.45,
        'cleaningFee': 85.0,
        'nightlyRate': 450.0,
        'lodgingTax': None,
        'salesTax': None,
        'gst': 77.45,
    }


def test_validate_mappings_splits_missing_and_unresolved(hostaway_payload) -> None:
    report = validate_mappings(
        hostaway_payload,
        {'guestName': '', 'platform': 'data.nope', 'checkInDate': 'arrivalDate'},
        ['guestName', 'platform', 'checkInDate', 'listingName'],
    )

    assert report.missing_fields == ['guestName', 'listingName']
    assert report.errors == ['Field "platform" mapping "data.nope" produces no value']
    assert not report.is_valid


def test_validate_mappings_flags_empty_string_and_null(hostaway_payload) -> None:
    hostaway_payload['data']['listingName'] = ''

    report = validate_mappings(
        hostaway_payload,
        FieldMapping({'listingName': 'listingName', 'guestEmail': 'guestEmail'}),
        ['listingName', 'guestEmail'],
    )

    assert report.missing_fields == []
    assert len(report.errors) == 2


def test_validate_mappings_accepts_resolving_mapping(hostaway_payload) -> None:
    report = validate_mappings(hostaway_payload, {'guestName': 'guestName', 'nightlyRate': BASE_RATE},
                               ['guestName', 'nightlyRate'])

    assert report.is_valid


def test_suggest_from_hostaway_payload(hostaway_payload) -> None:
    mapping = suggest_from_payload(hostaway_payload)

    assert mapping.locators == HOSTAWAY_RESERVATION_MAPPING
    assert mapping.get('nightlyRate') == BASE_RATE
    assert mapping.get('platform') == 'channelName'


def test_suggest_from_generic_payload_with_data() -> None:
    payload = {'data': {
        'guest_name': 'A',
        'guestName': 'B',
        'arrivalDate': '2024-01-01',
        'checkout': '2024-01-03',
        'guest_email': '',
    }}

    assert suggest_from_payload(payload).locators == {
        'guestName': 'data.guest_name',
        'checkInDate': 'data.arrivalDate',
        'checkOutDate': 'data.checkout',
    }


def test_suggest_from_generic_payload_without_data() -> None:
    payload = {'guestEmail': 'a@b.c', 'check_in': '2024-01-01'}

    mapping = suggest_from_payload(payload)

    assert mapping.locators == {'guestEmail': 'guestEmail', 'checkInDate': 'check_in'}
    assert apply_mappings(payload, mapping) == {'guestEmail': 'a@b.c', 'checkInDate': '2024-01-01'}


@pytest.mark.parametrize("payload", [None, [], 'text', 3])
def test_suggest_from_non_object_payload_is_empty(payload) -> None:
    assert len(suggest_from_payload(payload)) == 0


def test_discover_paths_lists_containers_and_leaves() -> None:
    payload = {'data': {
        'guest': {'name': 'A'},
        'financeField': [{'name': 'x', 'total': 1}],
        'nights': 2,
    }}

    paths = discover_paths(payload)

    assert paths == [
        'data.financeField',
        'data.financeField[0]',
        'data.financeField[0].name',
        'data.financeField[0].total',
        'data.guest',
        'data.guest.name',
        'data.nights',
    ]
    assert all(extract_value(payload, path) is not MISSING for path in paths)


def test_discover_paths_without_envelope() -> None:
    assert discover_paths({'a': {'b': 1}, 'c': []}) == ['a', 'a.b', 'c']


def test_discover_paths_respects_max_depth() -> None:
    assert discover_paths({'a': {'b': {'c': 1}}}, max_depth=1) == ['a']


def test_discover_paths_skips_unaddressable_keys() -> None:
    payload = {
        'a.b': 1, 'x[0]': 2, 'a]b': 3, 'find(f)': 4, '': 5, ' pad': 6,
        'ok': {'c]d': 7, 'two words': 8},
    }

    paths = discover_paths(payload)

    assert paths == ['ok', 'ok.two words']
    assert all(extract_value(payload, path) is not MISSING for path in paths)


def test_discovered_hostaway_paths_all_resolve(hostaway_payload) -> None:
    paths = discover_paths(hostaway_payload)

    assert 'data.listingCustomFields[0].value' in paths
    assert all(extract_value(hostaway_payload, path) is not MISSING for path in paths)


def test_finance_field_paths(hostaway_payload) -> None:
    assert finance_field_paths(hostaway_payload) == [
        BASE_RATE,
        'financeField.find(f => f.name === "cleaningFee").total',
        'financeField.find(f => f.name === "vat").total',
    ]
    assert finance_field_paths({'data': {}}) == []


def test_resolvable_mappings_drops_dead_paths(hostaway_payload) -> None:
    mapping = resolvable_mappings(hostaway_payload, {
        'guestName': 'guestName',
        'guestEmail': 'guestEmail',
        'lodgingTax': 'financeField.find(f => f.name === "lodgingTax").total',
        'platform': '',
    })

    assert mapping.locators == {'guestName': 'guestName'}


def test_suggest_webhook_mappings_for_hostaway(hostaway_payload) -> None:
    mapping = suggest_webhook_mappings(hostaway_payload)

    assert set(mapping.locators) == {
        'guestName', 'checkInDate', 'checkOutDate', 'numNights', 'listingName',
        'platform', 'totalAmount', 'cleaningFee', 'nightlyRate', 'gst',
    }


def test_suggest_webhook_mappings_matches_nested_names() -> None:
    payload = {'data': {'reservation': {
        'guestEmail': 'x@y.z',
        'nights': 3,
        'totalPrice': '420.00',
        'channelName': 'vrbo',
    }}}

    mapping = suggest_webhook_mappings(payload)

    assert mapping.locators == {
        'platform': 'data.reservation.channelName',
        'guestEmail': 'data.reservation.guestEmail',
        'numNights': 'data.reservation.nights',
        'totalAmount': 'data.reservation.totalPrice',
    }
    assert apply_mappings(payload, mapping)['totalAmount'] == 420.0


def test_preview_truncates_and_reports_no_value(hostaway_payload) -> None:
    hostaway_payload['data']['guestName'] = 'X' * 60

    previews = preview_mappings(
        hostaway_payload,
        {'guestName': 'guestName', 'nightlyRate': BASE_RATE, 'salesTax': 'nope'},
        max_length=10,
    )

    assert previews['guestName'].preview == 'X' * 10 + '...'
    assert previews['guestName'].value == 'X' * 60
    assert previews['nightlyRate'].value == 450.0
    assert previews['nightlyRate'].preview == '450'
    assert previews['salesTax'].value is None
    assert previews['salesTax'].preview == 'No value'


def test_extract_payload_reports_field_errors(hostaway_payload) -> None:
    result = extract_payload(
        hostaway_payload,
        {'guestName': 'guestName', 'numNights': 'nights'},
        required_fields=['guestName', 'platform'],
    )

    assert result.row_index == 0
    assert result.as_record() == {'guestName': 'Jane Doe', 'numNights': 3, 'platform': None}
    assert result.errors() == {'platform': 'platform is required and must be mapped'}


def test_extract_payload_unreadable_value() -> None:
    result = extract_payload({'data': {'nights': 'many'}}, {'numNights': 'data.nights'})

    assert result.values['numNights'].raw_value == 'many'
    assert result.errors() == {
        'numNights': "Could not read 'many' from 'data.nights' as a whole number",
    }
