"""InsuranceGateway orchestrator for the T2P gateway.

This module provides the InsuranceGateway class that coordinates the request
validators and the Tune2Protect client. It is the seam between the HTTP layer
and the rest of the package: each operation takes an untyped body and returns a
GatewayResponse that the HTTP layer only has to serialize.

For each operation:
- An invalid body produces HTTP 400 with the itemized error list.
- A valid body is forwarded upstream once; the upstream JSON is relayed as 200.
- Any failure while talking to the upstream produces HTTP 500 with a fixed
  message. The cause is logged, never returned.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from t2p_gateway.client import T2PClient
from t2p_gateway.confirmation import validate_confirm_request
from t2p_gateway.errors import ErrorResponse
from t2p_gateway.plan_search import validate_plan_search_request
from t2p_gateway.validation import ValidationResult

logger = logging.getLogger(__name__)

# Credit balance is always checked for the agency's home account
CREDIT_CURRENCY_CODE = "NPR"
CREDIT_COUNTRY_CODE = "NP"

VALIDATION_FAILED = "Validation failed"
INTERNAL_ERROR = "Internal server error"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred while processing your request"


@dataclass(frozen=True)
class GatewayResponse:
    """HTTP status code and JSON body produced by a gateway operation."""
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class InsuranceGateway:
    """Orchestrator for the three insurance operations.

    Attributes:
        client: Tune2Protect client used for every upstream call
    """

    def __init__(self, client: T2PClient):
        self.client = client

    async def check_credit_balance(self) -> GatewayResponse:
        """Fetch the agency's credit balance (no request body)."""
        try:
            data = await self.client.check_credit_balance(CREDIT_CURRENCY_CODE, CREDIT_COUNTRY_CODE)
        except Exception:
            logger.exception("Error fetching credit balance")
            return self._internal_error()
        return GatewayResponse(status_code=200, body=data)

    async def search_plans(self, body: Any) -> GatewayResponse:
        """Validate a plan-search body and fetch matching plans."""
        return await self._validate_and_forward(
            "insurance plans",
            body,
            validate_plan_search_request,
            self.client.get_available_plans,
        )

    async def confirm_purchase(self, body: Any) -> GatewayResponse:
        """Validate a confirmation body and confirm the purchase upstream."""
        return await self._validate_and_forward(
            "purchase confirmation",
            body,
            validate_confirm_request,
            self.client.confirm_purchase,
        )

    async def _validate_and_forward(
        self,
        operation: str,
        body: Any,
        validate: Callable[[Any], ValidationResult],
        forward: Callable[[Any], Awaitable[Any]],
    ) -> GatewayResponse:
        result = validate(body)
        if not result.is_valid:
            logger.info("Rejected %s request with %d validation error(s)", operation, len(result.errors))
            return GatewayResponse(
                status_code=400,
                body=ErrorResponse(error=VALIDATION_FAILED, details=result.get_error_messages()).to_dict(),
            )

        try:
            data = await forward(result.get_data())
        except Exception:
            logger.exception("Error processing %s request", operation)
            return self._internal_error()
        return GatewayResponse(status_code=200, body=data)

    @staticmethod
    def _internal_error() -> GatewayResponse:
        return GatewayResponse(
            status_code=500,
            body=ErrorResponse(error=INTERNAL_ERROR, message=UNEXPECTED_ERROR_MESSAGE).to_dict(),
        )


__all__ = [
    "GatewayResponse",
    "InsuranceGateway",
]
