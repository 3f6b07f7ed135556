"""Validator for plan-search (insurance quote) requests.

A plan search describes one trip: a header with passenger counts, currency and
nationality, and a single outbound flight leg. The body arrives as untyped JSON;
every rule below is checked at runtime before the request is narrowed to a
PlanSearchRequest.

Codes are not upper-cased here. The validator only checks and projects; the
client normalizes case when it builds the upstream payload.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from t2p_gateway.types import PlanSearchRequest
from t2p_gateway.validation import (
    ValidationResult,
    check_code,
    check_count,
    check_date_string,
    check_required_string,
    is_future_date,
)

logger = logging.getLogger(__name__)


def validate_plan_search_request(body: Any, now: Optional[datetime] = None) -> ValidationResult[PlanSearchRequest]:
    """Validate a plan-search request body.

    Missing top-level sections abort immediately with a single error. Once
    both ``header`` and ``flights`` are present every field rule is evaluated
    and all failures are accumulated.

    Args:
        body: The decoded JSON body
        now: Reference time for the departure-time check (defaults to now)

    Returns:
        ValidationResult holding either the errors or the normalized request

    Examples:
        >>> result = validate_plan_search_request({"header": {}, "flights": {}})
        >>> result.is_valid
        False
        >>> result.get_error_messages()[0]
        'header.adults: Adults must be a number'
    """
    result: ValidationResult[PlanSearchRequest] = ValidationResult()

    if not isinstance(body, Mapping):
        result.add_error("body", "Request body is required")
        return result

    header = body.get("header")
    if not isinstance(header, Mapping):
        result.add_error("header", "Header object is required")
        return result

    flights = body.get("flights")
    if not isinstance(flights, Mapping):
        result.add_error("flights", "Flights object is required")
        return result

    # Header
    check_count(
        result, "header.adults", header.get("adults"), 1,
        "Adults must be a number", "At least 1 adult is required",
    )
    check_count(
        result, "header.children", header.get("children"), 0,
        "Children must be a number", "Children count cannot be negative",
    )
    check_count(
        result, "header.infants", header.get("infants"), 0,
        "Infants must be a number", "Infants count cannot be negative",
    )
    check_code(
        result, "header.currency", header.get("currency"), 3,
        "Currency is required", "Currency must be a 3-letter code (e.g., NPR, USD)",
    )
    check_code(
        result, "header.nationality", header.get("nationality"), 2,
        "Nationality is required", "Nationality must be a 2-letter country code (e.g., NP, US)",
    )

    # Flights
    departure_time = flights.get("departureTime")
    if check_date_string(
        result, "flights.departureTime", departure_time,
        "Departure time is required", "Departure time must be a valid ISO 8601 date string",
    ):
        if not is_future_date(departure_time, now=now):
            result.add_error("flights.departureTime", "Departure time must be in the future")

    check_code(
        result, "flights.origin", flights.get("origin"), 3,
        "Origin is required", "Origin must be a 3-letter airport code (e.g., KTM)",
    )
    check_code(
        result, "flights.originCountry", flights.get("originCountry"), 2,
        "Origin country is required", "Origin country must be a 2-letter country code (e.g., NP)",
    )
    check_code(
        result, "flights.destination", flights.get("destination"), 3,
        "Destination is required", "Destination must be a 3-letter airport code (e.g., SYD)",
    )
    check_code(
        result, "flights.destinationCountry", flights.get("destinationCountry"), 2,
        "Destination country is required",
        "Destination country must be a 2-letter country code (e.g., AU)",
    )
    check_code(
        result, "flights.airlineCode", flights.get("airlineCode"), 2,
        "Airline code is required", "Airline code must be a 2-letter code (e.g., QF)",
    )
    check_required_string(result, "flights.flightNumber", flights.get("flightNumber"), "Flight number is required")

    if not result.is_valid:
        logger.debug("Plan search request rejected with %d error(s)", len(result.errors))
        return result

    result.set_data({
        "header": {
            "adults": header["adults"],
            "children": header["children"],
            "infants": header["infants"],
            "currency": header["currency"],
            "nationality": header["nationality"],
        },
        "flights": {
            "departureTime": flights["departureTime"],
            "origin": flights["origin"],
            "originCountry": flights["originCountry"],
            "destination": flights["destination"],
            "destinationCountry": flights["destinationCountry"],
            "airlineCode": flights["airlineCode"],
            "flightNumber": flights["flightNumber"],
        },
    })
    return result


__all__ = [
    "validate_plan_search_request",
]
