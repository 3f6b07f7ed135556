"""Validator for purchase-confirmation requests.

A confirmation finalizes an insurance purchase on a booking. The body has four
sections: the booking Header, the ContactDetails of the purchaser, the Flights
pair (the return leg is optional) and the list of Passengers, each of which may
carry a list of ExtraInfo riders.

Validation runs in two phases:

1. A structural gate. The body must be an object, Header, ContactDetails and
   Flights must be objects, and Passengers must be a non-empty array. The first
   failure here is the only error reported.
2. Field rules. Every rule is evaluated and every failure accumulated, section
   by section and passenger by passenger, in declaration order.

Only when phase 2 records nothing is the normalized request produced. It is an
allow-list projection: fields not named below are dropped, while a handful of
optional fields (Address2, ReturnFlightNo, IsQualified, ExtraInfo, ...) are
copied through without checks, and only when the caller sent them.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Tuple

from t2p_gateway.types import ConfirmRequest, Gender
from t2p_gateway.validation import (
    ValidationResult,
    check_code,
    check_count,
    check_date_string,
    check_email,
    check_required_string,
    is_number,
)

logger = logging.getLogger(__name__)

INFANT_FLAGS = ("true", "false")
GENDER_CODES = tuple(g.value for g in Gender)

# Projection allow-lists, in upstream field order
HEADER_FIELDS = (
    "PNR", "PurchaseDate", "SSRFeeCode", "Currency", "TotalPremium",
    "CountryCode", "TotalAdults", "TotalChild", "TotalInfants",
)
CONTACT_FIELDS = (
    "ContactPerson", "Address1", "Address2", "Address3", "MobilePhoneNum", "HomePhoneNum",
    "OtherPhoneNum", "PostCode", "City", "State", "Country", "EmailAddress",
)
CONTACT_OPTIONAL = ("Address2", "Address3", "HomePhoneNum", "OtherPhoneNum")
RETURN_LEG_FIELDS = ("ReturnAirlineCode", "ReturnDateTime", "ReturnFlightNo")
FLIGHT_FIELDS = (
    "DepartCountryCode", "DepartStationCode", "ArrivalCountryCode", "ArrivalStationCode",
    "DepartAirlineCode", "DepartDateTime", "DepartFlightNo",
) + RETURN_LEG_FIELDS
PASSENGER_FIELDS = (
    "IsInfant", "FirstName", "LastName", "Gender", "DOB", "Age", "IdentityType", "IdentityNo",
    "IsQualified", "Nationality", "CountryOfResidence", "SelectedPlanCode", "SelectedSSRFeeCode",
    "CurrencyCode", "PassengerPremiumAmount", "EmailAddress", "PhoneNumber", "Address", "ExtraInfo",
)
PASSENGER_OPTIONAL = ("IsQualified", "ExtraInfo")


def validate_confirm_request(body: Any) -> ValidationResult[ConfirmRequest]:
    """Validate a purchase-confirmation request body.

    Args:
        body: The decoded JSON body

    Returns:
        ValidationResult holding either the errors or the normalized request

    Examples:
        >>> result = validate_confirm_request({"Header": {}, "ContactDetails": {}, "Flights": {}, "Passengers": []})
        >>> result.get_error_messages()
        ['Passengers: At least one passenger is required']
    """
    result: ValidationResult[ConfirmRequest] = ValidationResult()

    if not isinstance(body, Mapping):
        result.add_error("body", "Request body is required")
        return result

    for section in ("Header", "ContactDetails", "Flights"):
        if not isinstance(body.get(section), Mapping):
            result.add_error(section, f"{section} object is required")
            return result

    passengers = body.get("Passengers")
    if not isinstance(passengers, list):
        result.add_error("Passengers", "Passengers must be an array")
        return result
    if len(passengers) == 0:
        result.add_error("Passengers", "At least one passenger is required")
        return result

    header = body["Header"]
    contact = body["ContactDetails"]
    flights = body["Flights"]

    _validate_header(result, header)
    _validate_contact_details(result, contact)
    _validate_flights(result, flights)
    for index, passenger in enumerate(passengers):
        _validate_passenger(result, f"Passengers[{index}]", passenger)

    if not result.is_valid:
        logger.debug("Confirm request rejected with %d error(s)", len(result.errors))
        return result

    result.set_data({
        "Header": _project(header, HEADER_FIELDS),
        "ContactDetails": _project(contact, CONTACT_FIELDS, CONTACT_OPTIONAL),
        "Flights": _project(flights, FLIGHT_FIELDS, RETURN_LEG_FIELDS),
        "Passengers": [_project(p, PASSENGER_FIELDS, PASSENGER_OPTIONAL) for p in passengers],
    })
    return result


def _project(section: Mapping, fields: Tuple[str, ...], optional: Tuple[str, ...] = ()) -> Dict[str, Any]:
    """Copy ``fields`` in order; an optional field is copied only when the caller sent it."""
    return {key: section[key] for key in fields if key not in optional or key in section}


def _validate_header(result: ValidationResult, header: Mapping) -> None:
    check_required_string(result, "Header.PNR", header.get("PNR"), "PNR is required")
    check_date_string(
        result, "Header.PurchaseDate", header.get("PurchaseDate"),
        "Purchase date is required", "Purchase date must be a valid ISO 8601 date string",
    )
    check_required_string(result, "Header.SSRFeeCode", header.get("SSRFeeCode"), "SSR fee code is required")
    check_code(
        result, "Header.Currency", header.get("Currency"), 3,
        "Currency is required", "Currency must be a 3-letter code (e.g., NPR, USD)",
    )
    check_count(
        result, "Header.TotalPremium", header.get("TotalPremium"), 0,
        "Total premium must be a number", "Total premium cannot be negative",
    )
    check_code(
        result, "Header.CountryCode", header.get("CountryCode"), 2,
        "Country code is required", "Country code must be a 2-letter code (e.g., NP, US)",
    )
    check_count(
        result, "Header.TotalAdults", header.get("TotalAdults"), 1,
        "Total adults must be a number", "At least 1 adult is required",
    )
    check_count(
        result, "Header.TotalChild", header.get("TotalChild"), 0,
        "Total child must be a number", "Total child cannot be negative",
    )
    check_count(
        result, "Header.TotalInfants", header.get("TotalInfants"), 0,
        "Total infants must be a number", "Total infants cannot be negative",
    )


def _validate_contact_details(result: ValidationResult, contact: Mapping) -> None:
    # Address2, Address3, HomePhoneNum and OtherPhoneNum are optional and unchecked
    required = (
        ("ContactPerson", "Contact person is required"),
        ("Address1", "Address1 is required"),
        ("MobilePhoneNum", "Mobile phone number is required"),
        ("PostCode", "Post code is required"),
        ("City", "City is required"),
        ("State", "State is required"),
    )
    for key, message in required:
        check_required_string(result, f"ContactDetails.{key}", contact.get(key), message)

    check_code(
        result, "ContactDetails.Country", contact.get("Country"), 2,
        "Country is required", "Country must be a 2-letter code (e.g., NP, US)",
    )
    check_email(result, "ContactDetails.EmailAddress", contact.get("EmailAddress"), "Email address is required")


def _validate_flights(result: ValidationResult, flights: Mapping) -> None:
    check_code(
        result, "Flights.DepartCountryCode", flights.get("DepartCountryCode"), 2,
        "Departure country code is required",
        "Departure country code must be a 2-letter code (e.g., NP)",
    )
    check_code(
        result, "Flights.DepartStationCode", flights.get("DepartStationCode"), 3,
        "Departure station code is required",
        "Departure station code must be a 3-letter airport code (e.g., KTM)",
    )
    check_code(
        result, "Flights.ArrivalCountryCode", flights.get("ArrivalCountryCode"), 2,
        "Arrival country code is required",
        "Arrival country code must be a 2-letter code (e.g., AU)",
    )
    check_code(
        result, "Flights.ArrivalStationCode", flights.get("ArrivalStationCode"), 3,
        "Arrival station code is required",
        "Arrival station code must be a 3-letter airport code (e.g., SYD)",
    )
    check_code(
        result, "Flights.DepartAirlineCode", flights.get("DepartAirlineCode"), 2,
        "Departure airline code is required",
        "Departure airline code must be a 2-letter code (e.g., QF)",
    )
    # No future-date requirement here, unlike plan search
    check_date_string(
        result, "Flights.DepartDateTime", flights.get("DepartDateTime"),
        "Departure date time is required",
        "Departure date time must be a valid ISO 8601 date string",
    )
    check_required_string(
        result, "Flights.DepartFlightNo", flights.get("DepartFlightNo"),
        "Departure flight number is required",
    )

    # Return leg: each field is checked only when supplied
    if flights.get("ReturnAirlineCode") is not None:
        check_code(
            result, "Flights.ReturnAirlineCode", flights["ReturnAirlineCode"], 2,
            "Return airline code must be a valid string if provided",
            "Return airline code must be a 2-letter code (e.g., QF)",
        )
    if flights.get("ReturnDateTime") is not None:
        check_date_string(
            result, "Flights.ReturnDateTime", flights["ReturnDateTime"],
            "Return date time must be a valid string if provided",
            "Return date time must be a valid ISO 8601 date string",
        )
    if flights.get("ReturnFlightNo") is not None:
        check_required_string(
            result, "Flights.ReturnFlightNo", flights["ReturnFlightNo"],
            "Return flight number must be a valid string if provided",
        )


def _validate_passenger(result: ValidationResult, prefix: str, passenger: Any) -> None:
    # A non-object entry has none of the fields, so every rule reports against it
    if not isinstance(passenger, Mapping):
        passenger = {}

    is_infant = passenger.get("IsInfant")
    if check_required_string(result, f"{prefix}.IsInfant", is_infant, "IsInfant is required"):
        if is_infant not in INFANT_FLAGS:
            result.add_error(f"{prefix}.IsInfant", "IsInfant must be 'true' or 'false'")

    check_required_string(result, f"{prefix}.FirstName", passenger.get("FirstName"), "First name is required")
    check_required_string(result, f"{prefix}.LastName", passenger.get("LastName"), "Last name is required")

    gender = passenger.get("Gender")
    if not is_number(gender):
        result.add_error(f"{prefix}.Gender", "Gender must be a number")
    elif gender not in GENDER_CODES:
        result.add_error(f"{prefix}.Gender", "Gender must be 1 (Male) or 2 (Female)")

    check_date_string(
        result, f"{prefix}.DOB", passenger.get("DOB"),
        "Date of birth is required", "Date of birth must be a valid date string (YYYY-MM-DD)",
    )
    # Age travels as a string upstream and is not coerced
    check_required_string(result, f"{prefix}.Age", passenger.get("Age"), "Age is required")

    if not is_number(passenger.get("IdentityType")):
        result.add_error(f"{prefix}.IdentityType", "Identity type must be a number")
    check_required_string(result, f"{prefix}.IdentityNo", passenger.get("IdentityNo"), "Identity number is required")

    check_code(
        result, f"{prefix}.Nationality", passenger.get("Nationality"), 2,
        "Nationality is required", "Nationality must be a 2-letter country code (e.g., NP)",
    )
    check_code(
        result, f"{prefix}.CountryOfResidence", passenger.get("CountryOfResidence"), 2,
        "Country of residence is required",
        "Country of residence must be a 2-letter country code (e.g., NP)",
    )
    check_required_string(
        result, f"{prefix}.SelectedPlanCode", passenger.get("SelectedPlanCode"),
        "Selected plan code is required",
    )
    check_required_string(
        result, f"{prefix}.SelectedSSRFeeCode", passenger.get("SelectedSSRFeeCode"),
        "Selected SSR fee code is required",
    )
    check_code(
        result, f"{prefix}.CurrencyCode", passenger.get("CurrencyCode"), 3,
        "Currency code is required", "Currency code must be a 3-letter code (e.g., NPR)",
    )
    check_count(
        result, f"{prefix}.PassengerPremiumAmount", passenger.get("PassengerPremiumAmount"), 0,
        "Passenger premium amount must be a number", "Passenger premium amount cannot be negative",
    )
    check_email(result, f"{prefix}.EmailAddress", passenger.get("EmailAddress"), "Email address is required")
    check_required_string(result, f"{prefix}.PhoneNumber", passenger.get("PhoneNumber"), "Phone number is required")
    check_required_string(result, f"{prefix}.Address", passenger.get("Address"), "Address is required")

    extra_info = passenger.get("ExtraInfo")
    if extra_info is None:
        return
    if not isinstance(extra_info, list):
        result.add_error(f"{prefix}.ExtraInfo", "ExtraInfo must be an array if provided")
        return
    for extra_index, extra in enumerate(extra_info):
        _validate_extra_info(result, f"{prefix}.ExtraInfo[{extra_index}]", extra)


def _validate_extra_info(result: ValidationResult, prefix: str, extra: Any) -> None:
    if not isinstance(extra, Mapping):
        extra = {}
    if not is_number(extra.get("ItemID")):
        result.add_error(f"{prefix}.ItemID", "ItemID must be a number")
    check_required_string(result, f"{prefix}.ItemKeyName", extra.get("ItemKeyName"), "ItemKeyName is required")
    check_required_string(result, f"{prefix}.ItemDesc", extra.get("ItemDesc"), "ItemDesc is required")


__all__ = [
    "validate_confirm_request",
]
