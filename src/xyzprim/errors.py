"""Error types and boundary validators.

Every public operation validates its arguments on entry and raises one of
the errors below. Each error records the operation and the offending
parameter so callers can report them without parsing the message.
"""

from __future__ import annotations

import math
from typing import Any


class GeometryError(Exception):
    """Base class for all xyzprim errors."""

    def __init__(self, operation: str, parameter: str, message: str):
        self.operation = operation
        self.parameter = parameter
        super().__init__(f"{operation}: '{parameter}' {message}")


class NullInputError(GeometryError, TypeError):
    """A required argument was ``None``."""


class InvalidValueError(GeometryError, ValueError):
    """A scalar or vector argument is outside its domain."""


class InvalidAxisError(InvalidValueError):
    """A rotation axis is zero-length, non-finite or unknown."""


def require_present(value: Any, operation: str, parameter: str) -> Any:
    """Return *value*, raising NullInputError if it is None."""
    if value is None:
        raise NullInputError(operation, parameter, "must not be None")
    return value


def require_finite(value: Any, operation: str, parameter: str) -> float:
    """Coerce *value* to float and check it is neither NaN nor infinite."""
    require_present(value, operation, parameter)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidValueError(operation, parameter, f"must be a real number, got {value!r}") from e
    if not math.isfinite(number):
        raise InvalidValueError(operation, parameter, f"must be finite, got {number}")
    return number


def require_positive(value: Any, operation: str, parameter: str) -> float:
    """Finite and strictly greater than zero."""
    number = require_finite(value, operation, parameter)
    if number <= 0.0:
        raise InvalidValueError(operation, parameter, f"must be > 0, got {number}")
    return number


def require_epsilon(value: Any, operation: str, parameter: str = "epsilon") -> float:
    """Tolerances must be >= 0; NaN is rejected by the same comparison."""
    require_present(value, operation, parameter)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidValueError(operation, parameter, f"must be a real number, got {value!r}") from e
    if not number >= 0.0:
        raise InvalidValueError(operation, parameter, f"must be >= 0, got {number}")
    return number
