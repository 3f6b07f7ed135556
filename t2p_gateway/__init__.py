"""T2P Gateway: request validation in front of the Tune2Protect insurance API.

The gateway provides:
- A validation engine that accumulates every field error in a request
  instead of stopping at the first one
- Validators for plan-search and purchase-confirmation requests that return
  either an itemized error list or an allow-listed, normalized request
- A thin async client that reshapes accepted requests for the upstream API
  and relays its responses verbatim
- A FastAPI application exposing the three operations

Basic usage:
    >>> from t2p_gateway.plan_search import validate_plan_search_request
    >>> result = validate_plan_search_request({"header": {"adults": 0}, "flights": {}})
    >>> result.is_valid
    False
    >>> result.get_error_messages()[0]
    'header.adults: At least 1 adult is required'
"""

__version__ = "0.1.0"
__author__ = "T2P Gateway Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from t2p_gateway.confirmation import validate_confirm_request
from t2p_gateway.plan_search import validate_plan_search_request
from t2p_gateway.validation import ValidationResult

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "ValidationResult",
    "validate_confirm_request",
    "validate_plan_search_request",
]
