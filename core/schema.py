"""
Booking schema

The fixed set of target fields a booking record is normalized into, with the
semantic kind that drives value coercion.
"""

from dataclasses import dataclass
from typing import Iterable, List, Literal


FieldKind = Literal['string', 'money', 'integer', 'date']


@dataclass(frozen=True)
class FieldSpec:
    """One slot of the normalized booking schema."""
    name: str
    label: str
    required: bool = False
    kind: FieldKind = 'string'
    category: str = 'booking'


# Money amounts. Membership decides float coercion, so keep it in sync with
# every financial field either field set below declares.
FINANCIAL_FIELDS = frozenset({
    'nightlyRate', 'accommodationFee', 'cleaningFee',
    'lodgingTax', 'salesTax', 'airbnbSalesTax', 'nonAirbnbSalesTax',
    'gst', 'qst',
    'channelFee', 'paymentFees', 'stripeFee',
    'totalAmount', 'totalPrice', 'totalPayout',
    'mgmtFee', 'netEarnings',
    'extraGuestFees', 'otherGuestFees', 'bedLinenFee',
})

INTEGER_FIELDS = frozenset({'numNights'})

DATE_FIELDS = frozenset({'checkInDate', 'checkOutDate'})


# Fields offered when mapping a CSV export
CSV_BOOKING_FIELDS = [
    FieldSpec('reservationCode', 'Reservation Code', required=True),
    FieldSpec('guestName', 'Guest Name', required=True, category='guest'),
    FieldSpec('checkInDate', 'Check-in Date', required=True, kind='date', category='dates'),
    FieldSpec('checkOutDate', 'Check-out Date', kind='date', category='dates'),
    FieldSpec('numNights', 'Number of Nights', required=True, kind='integer', category='dates'),
    FieldSpec('platform', 'Channel/Platform', required=True),
    FieldSpec('listingName', 'Listing Name', required=True, category='property'),
    FieldSpec('totalPrice', 'Total Price', kind='money', category='financial'),
    FieldSpec('accommodationFee', 'Accommodation Fee', kind='money', category='financial'),
    FieldSpec('cleaningFee', 'Cleaning Fee', kind='money', category='financial'),
    FieldSpec('airbnbSalesTax', 'Airbnb Sales Tax', kind='money', category='financial'),
    FieldSpec('lodgingTax', 'Lodging Tax', kind='money', category='financial'),
    FieldSpec('nonAirbnbSalesTax', 'Non-Airbnb Sales Tax', kind='money', category='financial'),
    FieldSpec('otherGuestFees', 'Other Guest Fees', kind='money', category='financial'),
    FieldSpec('channelFee', 'Channel Fee', kind='money', category='financial'),
    FieldSpec('paymentFees', 'Payment Fees', kind='money', category='financial'),
    FieldSpec('totalPayout', 'Total Payout', kind='money', category='financial'),
    FieldSpec('netEarnings', 'Net Earnings', kind='money', category='financial'),
]

# Fields offered when mapping a webhook payload
WEBHOOK_BOOKING_FIELDS = [
    FieldSpec('guestName', 'Guest Name', required=True, category='guest'),
    FieldSpec('guestEmail', 'Guest Email', category='guest'),
    FieldSpec('checkInDate', 'Check-in Date', required=True, kind='date', category='dates'),
    FieldSpec('checkOutDate', 'Check-out Date', required=True, kind='date', category='dates'),
    FieldSpec('numNights', 'Number of Nights', required=True, kind='integer', category='dates'),
    FieldSpec('listingName', 'Property/Listing Name', required=True, category='property'),
    FieldSpec('platform', 'Booking Platform', required=True),
    FieldSpec('totalAmount', 'Total Amount', required=True, kind='money', category='financial'),
    FieldSpec('nightlyRate', 'Nightly Rate', kind='money', category='financial'),
    FieldSpec('cleaningFee', 'Cleaning Fee', kind='money', category='financial'),
    FieldSpec('lodgingTax', 'Lodging Tax', kind='money', category='financial'),
    FieldSpec('salesTax', 'Sales Tax', kind='money', category='financial'),
    FieldSpec('gst', 'GST', kind='money', category='financial'),
    FieldSpec('qst', 'QST', kind='money', category='financial'),
    FieldSpec('channelFee', 'Channel Fee', kind='money', category='financial'),
    FieldSpec('stripeFee', 'Stripe Fee', kind='money', category='financial'),
    FieldSpec('totalPayout', 'Total Payout', kind='money', category='financial'),
    FieldSpec('mgmtFee', 'Management Fee', kind='money', category='financial'),
    FieldSpec('netEarnings', 'Net Earnings', kind='money', category='financial'),
    FieldSpec('extraGuestFees', 'Extra Guest Fees', kind='money', category='financial'),
    FieldSpec('bedLinenFee', 'Bed Linen Fee', kind='money', category='financial'),
]

# Platform keys a mapping can be scoped to; ALL is the base mapping
PLATFORMS = ['ALL', 'airbnbOfficial', 'vrbo', 'direct', 'hostaway']


def required_fields(fields: Iterable[FieldSpec]) -> List[str]:
    return [spec.name for spec in fields if spec.required]


def field_kind(name: str) -> FieldKind:
    """Semantic kind of a target field name; unknown names are text."""
    if name in FINANCIAL_FIELDS:
        return 'money'
    if name in INTEGER_FIELDS:
        return 'integer'
    if name in DATE_FIELDS:
        return 'date'
    return 'string'
