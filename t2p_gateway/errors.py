"""Structured error types for the T2P gateway.

Two error families live here:

- FieldError: a single, user-correctable validation failure. Validators never
  raise these; they accumulate them on a ValidationResult.
- Exceptions (InvalidResultStateError, UpstreamError, ConfigurationError):
  unexpected conditions or caller bugs, raised and handled at the edges.

ErrorResponse is the JSON envelope the gateway returns for both families.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FieldError:
    """Per-field validation error.

    Attributes:
        field: Field path using dot notation for nesting and bracket indices
            for array elements (e.g., "Passengers[2].ExtraInfo[0].ItemID")
        message: Human-readable error description

    Examples:
        >>> err = FieldError(field="header.adults", message="At least 1 adult is required")
        >>> str(err)
        'header.adults: At least 1 adult is required'
    """
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class ErrorResponse:
    """JSON error envelope returned to gateway callers.

    Validation failures carry ``details`` (one "field: message" string per
    error); upstream and internal failures carry a fixed ``message``.

    Examples:
        >>> ErrorResponse(error="Validation failed", details=["body: Request body is required"]).to_dict()
        {'error': 'Validation failed', 'details': ['body: Request body is required']}
    """
    error: str
    message: Optional[str] = None
    details: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {"error": self.error}
        if self.message is not None:
            result["message"] = self.message
        if self.details is not None:
            result["details"] = list(self.details)
        return result


class InvalidResultStateError(Exception):
    """Raised when normalized data is read from an invalid ValidationResult.

    This signals a caller bug: the verdict must be checked before the data
    is used.
    """


class UpstreamError(Exception):
    """Raised when a call to the Tune2Protect API does not succeed.

    Covers both transport failures and non-2xx HTTP statuses. Application-level
    error codes inside a successful response are not inspected.

    Attributes:
        operation: Name of the upstream operation (e.g., "confirm purchase")
        status_code: HTTP status returned upstream, or None on transport failure
        reason: HTTP reason phrase or transport error text
    """

    def __init__(self, operation: str, status_code: Optional[int] = None, reason: str = ""):
        self.operation = operation
        self.status_code = status_code
        self.reason = reason
        if status_code is not None:
            message = f"Failed to {operation}: {status_code} {reason}".rstrip()
        else:
            message = f"Failed to {operation}: {reason}".rstrip(": ")
        super().__init__(message)


class ConfigurationError(Exception):
    """Raised when the process environment cannot produce valid settings.

    Attributes:
        issues: One "KEY: problem" string per violation found
    """

    def __init__(self, message: str, issues: Optional[List[str]] = None):
        self.issues = list(issues or [])
        if self.issues:
            message = message + "\n" + "\n".join(f"  - {issue}" for issue in self.issues)
        super().__init__(message)


__all__ = [
    "FieldError",
    "ErrorResponse",
    "InvalidResultStateError",
    "UpstreamError",
    "ConfigurationError",
]
