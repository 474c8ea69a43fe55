"""Error types raised by the measurement core.

Every failure in the core is reported as an exception derived from
MeasurementError. Each class also inherits from the matching builtin
(ValueError, LookupError, TypeError) so callers that only know the builtins
can still handle them.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Structured classification attached to every MeasurementError."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL = "INTERNAL"

    def __str__(self) -> str:
        return self.value


class MeasurementError(Exception):
    """Base class for all measurement errors.

    Attributes:
        message: Human-readable description.
        code: Structured error classification.
        context: Optional debugging details (keys, types, indexes).
    """

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})

    def __str__(self) -> str:
        return self.message


class ValidationError(MeasurementError, ValueError):
    """A Measurement or Subtype is not properly formed."""

    code = ErrorCode.INVALID_REQUEST


class KeyNotFoundError(MeasurementError, LookupError):
    """A typed getter was asked for a key the Subtype does not hold."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, key: str) -> None:
        super().__init__(f"key {key!r} not found", {"key": key})
        self.key = key


class WrongTypeError(MeasurementError, TypeError):
    """A typed getter found a Reading of a different kind."""

    code = ErrorCode.INVALID_REQUEST

    def __init__(self, key: str, expected: str, actual: str) -> None:
        super().__init__(
            f"key {key!r} is not {expected} (holds {actual})",
            {"key": key, "expected": expected, "actual": actual},
        )
        self.key = key
        self.expected = expected
        self.actual = actual


class IncompatibleTypesError(MeasurementError, ValueError):
    """Two Measurements of different types were compared or merged."""

    code = ErrorCode.INVALID_REQUEST


class DecodeError(MeasurementError, ValueError):
    """A serialized document does not describe a valid model value."""

    code = ErrorCode.INVALID_REQUEST


class ConfigError(MeasurementError, ValueError):
    """A redaction policy document is malformed."""

    code = ErrorCode.INVALID_REQUEST
