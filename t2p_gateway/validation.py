"""Validation primitives for the T2P gateway.

This module provides the building blocks shared by the request validators:

- Primitive predicates: pure checks over a single, possibly wrong-typed value.
  They never raise; anything they cannot make sense of is simply False.
- ValidationResult: the accumulator a validator fills with FieldErrors and,
  only when nothing went wrong, a normalized copy of the request.
- Rule helpers: the recurring "required string, then shape" patterns, each
  recording at most one error per field so that a field never reports more
  than its first failing rule.

Validators accumulate every field error instead of failing fast, so a caller
gets the complete list of problems in one round trip.
"""

import math
from datetime import datetime, timezone
from numbers import Real
from typing import Any, Generic, List, Optional, TypeVar

from dateutil import parser as date_parser
from dateutil import tz

from t2p_gateway.errors import FieldError, InvalidResultStateError

T = TypeVar("T")


# --- Primitive predicates ----------------------------------------------------

def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_number(value: Any) -> bool:
    """True for real numbers other than NaN. Booleans are not numbers."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return not math.isnan(value)


def is_not_empty(value: Any) -> bool:
    """True when value is present; strings must also be non-blank."""
    if isinstance(value, str):
        return len(value.strip()) > 0
    return value is not None


def has_length(value: Any, length: int) -> bool:
    if not value or not hasattr(value, "__len__"):
        return False
    return len(value) == length


def min_value(value: Any, minimum: float) -> bool:
    try:
        return value >= minimum
    except TypeError:
        return False


# Parsing twice against these tells which parts the string itself supplied
_FIRST_DEFAULT = datetime(2000, 1, 1, 0, 0)
_SECOND_DEFAULT = datetime(2001, 1, 1, 1, 1)


def _parse_date(value: Any) -> Optional[datetime]:
    """Parse a date string that names at least a year.

    Values without a time of day or an offset are taken as UTC midnight.
    """
    if not isinstance(value, str):
        return None
    try:
        first = date_parser.parse(value, default=_FIRST_DEFAULT)
        second = date_parser.parse(value, default=_SECOND_DEFAULT)
    except (ValueError, OverflowError):
        return None
    if first.year != second.year:
        return None
    if first.tzinfo is None and (first.hour, first.minute) != (second.hour, second.minute):
        first = first.replace(tzinfo=timezone.utc)
    return first


def is_date_string(value: Any) -> bool:
    """True when value parses as a calendar date or date-time."""
    return _parse_date(value) is not None


def is_future_date(value: Any, now: Optional[datetime] = None) -> bool:
    """True when value parses and lies strictly after ``now``.

    Timestamps without an offset are read in the local timezone; dates
    without a time are UTC midnight.
    ``now`` defaults to the current time.
    """
    parsed = _parse_date(value)
    if parsed is None:
        return False
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz.tzlocal())
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz.tzlocal())
    return parsed > now


# --- Result accumulator ------------------------------------------------------

class ValidationResult(Generic[T]):
    """Outcome of validating one request body.

    Holds the ordered list of field errors and, for a valid request, the
    normalized data. The data slot is only populated by a validator once it
    has finished without recording an error.

    Examples:
        >>> result = ValidationResult()
        >>> result.add_error("header.adults", "At least 1 adult is required")
        >>> result.is_valid
        False
        >>> result.get_error_messages()
        ['header.adults: At least 1 adult is required']
    """

    def __init__(self) -> None:
        self._errors: List[FieldError] = []
        self._data: Optional[T] = None

    def add_error(self, field: str, message: str) -> None:
        self._errors.append(FieldError(field=field, message=message))

    def set_data(self, data: T) -> None:
        self._data = data

    @property
    def is_valid(self) -> bool:
        return not self._errors

    @property
    def errors(self) -> List[FieldError]:
        return list(self._errors)

    def get_error_messages(self) -> List[str]:
        """Errors formatted as "field: message", in the order recorded."""
        return [str(error) for error in self._errors]

    def get_data(self) -> T:
        """Return the normalized data.

        Raises:
            InvalidResultStateError: If any error has been recorded
        """
        if not self.is_valid:
            raise InvalidResultStateError("Cannot get data from invalid validation result")
        return self._data  # type: ignore[return-value]

    @property
    def data(self) -> T:
        return self.get_data()

    def __repr__(self) -> str:
        return f"ValidationResult(is_valid={self.is_valid}, errors={len(self._errors)})"


# --- Rule helpers ------------------------------------------------------------

def check_required_string(result: ValidationResult, field: str, value: Any, message: str) -> bool:
    """Record ``message`` unless value is a non-blank string.

    Returns:
        True when the value passed, so callers can chain shape checks
    """
    if not is_string(value) or not is_not_empty(value):
        result.add_error(field, message)
        return False
    return True


def check_code(
    result: ValidationResult,
    field: str,
    value: Any,
    length: int,
    required_message: str,
    length_message: str,
) -> None:
    """Fixed-length code such as a currency, country or airport code."""
    if check_required_string(result, field, value, required_message):
        if not has_length(value, length):
            result.add_error(field, length_message)


def check_count(
    result: ValidationResult,
    field: str,
    value: Any,
    minimum: float,
    type_message: str,
    minimum_message: str,
) -> None:
    """Number with a lower bound (passenger counts, premiums)."""
    if not is_number(value):
        result.add_error(field, type_message)
    elif not min_value(value, minimum):
        result.add_error(field, minimum_message)


def check_date_string(
    result: ValidationResult,
    field: str,
    value: Any,
    required_message: str,
    format_message: str,
) -> bool:
    if not check_required_string(result, field, value, required_message):
        return False
    if not is_date_string(value):
        result.add_error(field, format_message)
        return False
    return True


def check_email(result: ValidationResult, field: str, value: Any, required_message: str) -> None:
    if check_required_string(result, field, value, required_message):
        if "@" not in value:
            result.add_error(field, "Email address must be valid")


__all__ = [
    "is_string",
    "is_number",
    "is_not_empty",
    "has_length",
    "min_value",
    "is_date_string",
    "is_future_date",
    "ValidationResult",
    "check_required_string",
    "check_code",
    "check_count",
    "check_date_string",
    "check_email",
]
