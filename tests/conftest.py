"""Shared request bodies and settings for the test suite."""

import copy

import pytest

from t2p_gateway.config import Settings

FUTURE_DEPARTURE = "2099-12-30T09:15:00"
PAST_DEPARTURE = "2020-01-01T00:00:00Z"

PLAN_SEARCH_BODY = {
    "header": {
        "adults": 2,
        "children": 1,
        "infants": 0,
        "currency": "npr",
        "nationality": "np",
    },
    "flights": {
        "departureTime": FUTURE_DEPARTURE,
        "origin": "ktm",
        "originCountry": "np",
        "destination": "syd",
        "destinationCountry": "au",
        "airlineCode": "qf",
        "flightNumber": "qf68",
    },
}

PASSENGER = {
    "IsInfant": "false",
    "FirstName": "Sita",
    "LastName": "Sharma",
    "Gender": 2,
    "DOB": "1990-04-12",
    "Age": "35",
    "IdentityType": 1,
    "IdentityNo": "PA1234567",
    "IsQualified": True,
    "Nationality": "NP",
    "CountryOfResidence": "NP",
    "SelectedPlanCode": "TPTD",
    "SelectedSSRFeeCode": "TPTD01",
    "CurrencyCode": "NPR",
    "PassengerPremiumAmount": 1500.5,
    "EmailAddress": "sita@example.com",
    "PhoneNumber": "9800000000",
    "Address": "Lazimpat, Kathmandu",
}

CONFIRM_BODY = {
    "Header": {
        "PNR": "ABC123",
        "PurchaseDate": "2025-12-29T09:00:00",
        "SSRFeeCode": "TPTD01",
        "Currency": "NPR",
        "TotalPremium": 1500.5,
        "CountryCode": "NP",
        "TotalAdults": 1,
        "TotalChild": 0,
        "TotalInfants": 0,
    },
    "ContactDetails": {
        "ContactPerson": "Sita Sharma",
        "Address1": "Lazimpat",
        "MobilePhoneNum": "9800000000",
        "PostCode": "44600",
        "City": "Kathmandu",
        "State": "Bagmati",
        "Country": "NP",
        "EmailAddress": "sita@example.com",
    },
    "Flights": {
        "DepartCountryCode": "NP",
        "DepartStationCode": "KTM",
        "ArrivalCountryCode": "AU",
        "ArrivalStationCode": "SYD",
        "DepartAirlineCode": "QF",
        "DepartDateTime": "2025-12-30T09:15:00",
        "DepartFlightNo": "QF68",
    },
    "Passengers": [PASSENGER],
}


@pytest.fixture
def plan_search_body():
    """A plan-search body that passes every rule (deep copy, safe to mutate)."""
    return copy.deepcopy(PLAN_SEARCH_BODY)


@pytest.fixture
def confirm_body():
    """A confirmation body that passes every rule (deep copy, safe to mutate)."""
    return copy.deepcopy(CONFIRM_BODY)


@pytest.fixture
def passenger():
    return copy.deepcopy(PASSENGER)


@pytest.fixture
def settings():
    return Settings(
        app_env="test",
        port=3000,
        username="agent",
        password="secret",
        pseudocode="KTM1",
        base_url="https://t2p.test/api/Zeus",
    )
