import copy

import pytest


HOSTAWAY_RESERVATION = {
    "object": "reservation",
    "event": "reservation.created",
    "accountId": 1234,
    "data": {
        "id": 987654,
        "guestName": "Jane Doe",
        "guestEmail": None,
        "arrivalDate": "2024-07-01",
        "departureDate": "2024-07-04",
        "nights": 3,
        "listingName": "Lakeview Loft",
        "channelName": "airbnbOfficial",
        "totalPrice": "612.45",
        "cleaningFee": 85,
        "listingCustomFields": [{"customFieldId": 11, "value": "Unit 4B"}],
        "financeField": [
            {"name": "baseRate", "alias": "Base rate", "total": 450},
            {"name": "cleaningFee", "alias": "Cleaning fee", "total": 85},
            {"name": "vat", "alias": "VAT", "total": 77.45},
        ],
    },
}


@pytest.fixture
def hostaway_payload() -> dict:
    return copy.deepcopy(HOSTAWAY_RESERVATION)


@pytest.fixture
def airbnb_csv() -> str:
    return (
        "Confirmation code,Guest name,Start date,# of nights,Channel,Listing,Total price\n"
        "HM1,Ana Lee,2024-03-01,3,airbnb,Loft,$300.00\n"
        "HM2,\"Smith, John\",2024-03-05,2,airbnb,Cabin,\"1,250.00\"\n"
    )
