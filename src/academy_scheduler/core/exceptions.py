from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class FieldError:
    """A single field-scoped validation message."""

    field: Optional[str]
    message: str


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str = "", *, field: Optional[str] = None, errors: Sequence[FieldError] = ()):
        errors = list(errors) or [FieldError(field=field, message=message)]
        super().__init__(message or errors[0].message)
        self.errors = errors

    @property
    def field(self) -> Optional[str]:
        return self.errors[0].field


class InvalidFormatError(ValidationError, ValueError):
    """Raised when a value does not have the exact literal shape expected."""


class NotFoundError(DomainError):
    """Raised when a referenced series, instance or student does not exist."""


class ConflictError(DomainError):
    """Raised by storage when an insert hits a unique constraint.

    Services treat this as "already satisfied", never as a failure.
    """


class StorageError(DomainError):
    """Transient persistence failure; safe for the caller to retry."""

    retryable = True


@dataclass(frozen=True)
class UnitFailure:
    unit_id: int
    message: str


class PartialBatchError(DomainError):
    """Some units of a batch failed while their siblings succeeded."""

    def __init__(self, message: str, failures: Sequence[UnitFailure]):
        super().__init__(message)
        self.failures = list(failures)
