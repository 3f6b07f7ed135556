"""Core type definitions for the T2P gateway.

This module defines the shapes that flow through the gateway:
- Gender: Passenger gender codes accepted by the insurer
- UpstreamEndpoint: Tune2Protect endpoints the gateway calls
- PlanSearchRequest: Normalized plan-search payload
- ConfirmRequest: Normalized purchase-confirmation payload

Inbound bodies are untyped JSON and are never trusted to match these shapes.
The TypedDicts below describe only what a validator hands back once every
rule has passed. NotRequired keys appear only when the caller supplied them.
"""

from enum import Enum
from typing import List, Optional

from typing_extensions import NotRequired, TypedDict


class Gender(int, Enum):
    """Passenger gender codes."""
    MALE = 1
    FEMALE = 2


class UpstreamEndpoint(str, Enum):
    """Tune2Protect Zeus API endpoints, relative to the configured base URL."""
    CHECK_CREDIT_BALANCE = "CheckCreditBalance"
    GET_AVAILABLE_PLANS = "GetAvailablePlansOTAWithRiders"
    CONFIRM_PURCHASE = "ConfirmPurchase"


# --- Plan search -------------------------------------------------------------

class PlanSearchHeader(TypedDict):
    adults: int
    children: int
    infants: int
    currency: str
    nationality: str


class PlanSearchFlight(TypedDict):
    departureTime: str
    origin: str
    originCountry: str
    destination: str
    destinationCountry: str
    airlineCode: str
    flightNumber: str


class PlanSearchRequest(TypedDict):
    header: PlanSearchHeader
    flights: PlanSearchFlight


# --- Purchase confirmation ---------------------------------------------------

class ConfirmHeader(TypedDict):
    PNR: str
    PurchaseDate: str
    SSRFeeCode: str
    Currency: str
    TotalPremium: float
    CountryCode: str
    TotalAdults: int
    TotalChild: int
    TotalInfants: int


class ContactDetails(TypedDict):
    ContactPerson: str
    Address1: str
    Address2: NotRequired[Optional[str]]
    Address3: NotRequired[Optional[str]]
    MobilePhoneNum: str
    HomePhoneNum: NotRequired[Optional[str]]
    OtherPhoneNum: NotRequired[Optional[str]]
    PostCode: str
    City: str
    State: str
    Country: str
    EmailAddress: str


class ConfirmFlights(TypedDict):
    DepartCountryCode: str
    DepartStationCode: str
    ArrivalCountryCode: str
    ArrivalStationCode: str
    DepartAirlineCode: str
    DepartDateTime: str
    DepartFlightNo: str
    ReturnAirlineCode: NotRequired[Optional[str]]
    ReturnDateTime: NotRequired[Optional[str]]
    ReturnFlightNo: NotRequired[Optional[str]]


class ExtraInfo(TypedDict):
    """Optional rider attached to a passenger."""
    ItemID: int
    ItemKeyName: str
    ItemDesc: str


class Passenger(TypedDict):
    IsInfant: str
    FirstName: str
    LastName: str
    Gender: int
    DOB: str
    Age: str
    IdentityType: int
    IdentityNo: str
    IsQualified: NotRequired[Optional[bool]]
    Nationality: str
    CountryOfResidence: str
    SelectedPlanCode: str
    SelectedSSRFeeCode: str
    CurrencyCode: str
    PassengerPremiumAmount: float
    EmailAddress: str
    PhoneNumber: str
    Address: str
    ExtraInfo: NotRequired[Optional[List[ExtraInfo]]]


class ConfirmRequest(TypedDict):
    Header: ConfirmHeader
    ContactDetails: ContactDetails
    Flights: ConfirmFlights
    Passengers: List[Passenger]


__all__ = [
    "Gender",
    "UpstreamEndpoint",
    "PlanSearchHeader",
    "PlanSearchFlight",
    "PlanSearchRequest",
    "ConfirmHeader",
    "ContactDetails",
    "ConfirmFlights",
    "ExtraInfo",
    "Passenger",
    "ConfirmRequest",
]
