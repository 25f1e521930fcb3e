"""Single-field rules shared by the series and one-off class validators.

Each rule returns the normalized value or raises ValidationError with a
user-facing message; the validators attach the field name.
"""

from __future__ import annotations

import re
from datetime import date
from enum import Enum
from typing import Callable, Optional, Type, TypeVar

from ..core.exceptions import FieldError, InvalidFormatError, ValidationError
from .datetime_utils import is_time_of_day, parse_calendar_date

E = TypeVar("E", bound=Enum)
T = TypeVar("T")

_INT_RE = re.compile(r"[+-]?[0-9]+")


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_length(value: object, field_name: str, min_len: int, max_len: int) -> str:
    text = require_non_empty(value, field_name)
    if len(text) < min_len:
        raise ValidationError(f"{field_name} must have at least {min_len} characters")
    if len(text) > max_len:
        raise ValidationError(f"{field_name} must have at most {max_len} characters")
    return text


def require_int_range(value: object, field_name: str, min_value: int, max_value: int) -> int:
    # Numeric strings are accepted since form and query values arrive as text.
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, str):
        value = value.strip()
        if not _INT_RE.fullmatch(value):
            raise ValidationError(f"{field_name} must be an integer")
        value = int(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer")
    if value < min_value or value > max_value:
        raise ValidationError(f"{field_name} must be between {min_value} and {max_value}")
    return value


def require_time_of_day(value: object, field_name: str) -> str:
    if not is_time_of_day(value):
        raise ValidationError(f"{field_name} must be a time in HH:MM format")
    return value


def require_choice(value: object, field_name: str, enum_cls: Type[E]) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def require_bool(value: object, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false")
    return value


def require_calendar_date(value: object, field_name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return parse_calendar_date(value)
    except InvalidFormatError:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format")


class ValidationResult:
    """Collects the first violation per field while a validator runs.

    Attributes:
        value: Normalized output, set by the validator once all rules ran.
        errors: Field-scoped violations in validation order.
    """

    def __init__(self) -> None:
        self.value = None
        self.errors: list[FieldError] = []

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def has_error(self, field: str) -> bool:
        return any(e.field == field for e in self.errors)

    def add_error(self, field: Optional[str], message: str) -> "ValidationResult":
        if field is None or not self.has_error(field):
            self.errors.append(FieldError(field=field, message=message))
        return self

    def check(self, field: str, rule: Callable[..., T], value: object, *args) -> Optional[T]:
        """Run one rule for a field; record its message instead of raising."""
        try:
            return rule(value, field, *args)
        except ValidationError as e:
            self.add_error(field, str(e))
            return None

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise ValidationError(errors=self.errors)
