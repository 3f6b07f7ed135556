"""Tune2Protect (Zeus API) HTTP client.

Purpose:
- Reshapes validated gateway requests into the payloads the Zeus API expects
- Injects credentials and the fixed channel/culture constants
- Relays the upstream JSON response without interpreting it

Important:
- One POST per call. No retries and no timeout beyond the httpx default.
- Any transport failure or non-2xx status is raised as UpstreamError.
  Application-level error codes inside a 200 response are not inspected.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from t2p_gateway.config import Settings
from t2p_gateway.errors import UpstreamError
from t2p_gateway.types import ConfirmRequest, PlanSearchRequest, UpstreamEndpoint

logger = logging.getLogger(__name__)

CHANNEL = "OTA"
CULTURE_CODE = "en-US"


def _authentication(settings: Settings) -> Dict[str, str]:
    return {"Username": settings.username, "Password": settings.password}


def build_credit_balance_payload(settings: Settings, currency_code: str, country_code: str) -> Dict[str, Any]:
    return {
        **_authentication(settings),
        "CurrencyCode": currency_code,
        "CountryCode": country_code,
    }


def build_plan_search_payload(settings: Settings, request: PlanSearchRequest) -> Dict[str, Any]:
    """Map a normalized plan search onto the GetAvailablePlans payload.

    Every code is upper-cased; the departure time is passed through as given.
    """
    header = request["header"]
    flights = request["flights"]
    return {
        "Authentication": _authentication(settings),
        "Header": {
            "Channel": CHANNEL,
            "CultureCode": CULTURE_CODE,
            "Currency": header["currency"].upper(),
            "CountryCode": header["nationality"].upper(),
            "TotalAdults": header["adults"],
            "TotalChild": header["children"],
            "TotalInfants": header["infants"],
        },
        "Flights": {
            "DepartCountryCode": flights["originCountry"].upper(),
            "DepartStationCode": flights["origin"].upper(),
            "ArrivalCountryCode": flights["destinationCountry"].upper(),
            "ArrivalStationCode": flights["destination"].upper(),
            "DepartAirlineCode": flights["airlineCode"].upper(),
            "DepartDateTime": flights["departureTime"],
            "DepartFlightNo": flights["flightNumber"].upper(),
        },
    }


def build_confirm_payload(settings: Settings, request: ConfirmRequest) -> Dict[str, Any]:
    """Sections pass through unchanged; the header gains channel and culture."""
    return {
        "Authentication": _authentication(settings),
        "Header": {
            "Channel": CHANNEL,
            "CultureCode": CULTURE_CODE,
            **request["Header"],
        },
        "ContactDetails": request["ContactDetails"],
        "Flights": request["Flights"],
        "Passengers": request["Passengers"],
    }


class T2PClient:
    """Async client for the Zeus API.

    Attributes:
        settings: Credentials and base URL
        transport: Optional httpx transport (tests pass an httpx.MockTransport)
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.settings = settings
        self.transport = transport

    async def check_credit_balance(self, currency_code: str, country_code: str) -> Any:
        payload = build_credit_balance_payload(self.settings, currency_code, country_code)
        return await self._post(UpstreamEndpoint.CHECK_CREDIT_BALANCE, payload, "check credit balance")

    async def get_available_plans(self, request: PlanSearchRequest) -> Any:
        payload = build_plan_search_payload(self.settings, request)
        return await self._post(UpstreamEndpoint.GET_AVAILABLE_PLANS, payload, "fetch insurance plans")

    async def confirm_purchase(self, request: ConfirmRequest) -> Any:
        payload = build_confirm_payload(self.settings, request)
        return await self._post(UpstreamEndpoint.CONFIRM_PURCHASE, payload, "confirm purchase")

    async def _post(self, endpoint: UpstreamEndpoint, payload: Dict[str, Any], operation: str) -> Any:
        url = f"{self.settings.base_url}/{endpoint.value}"
        logger.debug("POST %s", url)
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(url, json=payload, headers={"Content-Type": "application/json"})
        except httpx.HTTPError as exc:
            raise UpstreamError(operation, reason=str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise UpstreamError(operation, status_code=response.status_code, reason=response.reason_phrase)

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(operation, status_code=response.status_code, reason="invalid JSON body") from exc


__all__ = [
    "CHANNEL",
    "CULTURE_CODE",
    "build_credit_balance_payload",
    "build_plan_search_payload",
    "build_confirm_payload",
    "T2PClient",
]
