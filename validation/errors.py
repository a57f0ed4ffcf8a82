"""
errors.py — Validation Error Taxonomy
======================================
Two faces of the same error:

  • Exceptions (`EmptyInput`, `NotANumber`, …) are raised by the small
    parsing helpers, because that keeps each parser a straight line.
  • `ValidationError` is the immutable value the public `validate()`
    hands back inside a `Result`.  Errors are data once they leave this
    package; nothing above the validator ever sees a raised InputError.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ValidationErrorKind(Enum):
    EMPTY_INPUT          = "EmptyInput"
    NOT_A_NUMBER         = "NotANumber"
    LENGTH_MISMATCH      = "LengthMismatch"
    OUT_OF_BOUNDS        = "OutOfBounds"
    MALFORMED_STRUCTURE  = "MalformedStructure"
    CONSTRAINT_VIOLATION = "ConstraintViolation"


@dataclass(frozen=True)
class ValidationError:
    kind:    ValidationErrorKind
    field:   str
    message: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "field": self.field, "message": self.message}


@dataclass(frozen=True)
class Result:
    """Either a value OR an error, never both."""

    value: Optional[object] = None
    error: Optional[ValidationError] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> "Result":
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: ValidationError) -> "Result":
        return Result(value=None, error=error)


# ---------------------------------------------------------------------------
# Raised inside the validation package only
# ---------------------------------------------------------------------------
class InputError(ValueError):
    kind: ValidationErrorKind = ValidationErrorKind.MALFORMED_STRUCTURE

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field   = field
        self.message = message

    def to_error(self) -> ValidationError:
        return ValidationError(kind=self.kind, field=self.field, message=self.message)


class EmptyInput(InputError):
    kind = ValidationErrorKind.EMPTY_INPUT


class NotANumber(InputError):
    kind = ValidationErrorKind.NOT_A_NUMBER


class LengthMismatch(InputError):
    kind = ValidationErrorKind.LENGTH_MISMATCH


class OutOfBounds(InputError):
    kind = ValidationErrorKind.OUT_OF_BOUNDS


class MalformedStructure(InputError):
    kind = ValidationErrorKind.MALFORMED_STRUCTURE


class ConstraintViolation(InputError):
    kind = ValidationErrorKind.CONSTRAINT_VIOLATION
