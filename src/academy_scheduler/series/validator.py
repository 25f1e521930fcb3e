"""Validation of series definitions, full and partial.

Rules run in a fixed order and only the first violation of each field is
reported. Cross-field rules (end after start, active_until on or after
active_from) run after both sides passed their own format checks.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..common.datetime_utils import compare_time_of_day
from ..common.validators import (
    ValidationResult,
    require_bool,
    require_calendar_date,
    require_choice,
    require_int_range,
    require_length,
    require_time_of_day,
)
from ..core.constants import (
    CAPACITY_MAX,
    CAPACITY_MIN,
    INSTRUCTOR_MAX_LENGTH,
    INSTRUCTOR_MIN_LENGTH,
    SATURDAY,
    SUNDAY,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from ..core.enums import Category, ClassType, Ordering
from .model import SeriesDraft

END_TIME_MESSAGE = "end_time must be after start_time"
ACTIVE_UNTIL_MESSAGE = "active_until must be on or after active_from"

# (field, rule, extra args) in validation order
_FIELD_RULES = (
    ("title", require_length, (TITLE_MIN_LENGTH, TITLE_MAX_LENGTH)),
    ("instructor", require_length, (INSTRUCTOR_MIN_LENGTH, INSTRUCTOR_MAX_LENGTH)),
    ("weekday", require_int_range, (SUNDAY, SATURDAY)),
    ("start_time", require_time_of_day, ()),
    ("end_time", require_time_of_day, ()),
    ("capacity", require_int_range, (CAPACITY_MIN, CAPACITY_MAX)),
    ("category", require_choice, (Category,)),
    ("class_type", require_choice, (ClassType,)),
    ("active", require_bool, ()),
    ("active_from", require_calendar_date, ()),
)

SERIES_FIELDS = tuple(name for name, _, _ in _FIELD_RULES) + ("active_until",)


def _check_time_pair(result: ValidationResult, values: Mapping[str, Any]) -> None:
    start, end = values.get("start_time"), values.get("end_time")
    if start is not None and end is not None and compare_time_of_day(end, start) != Ordering.AFTER:
        result.add_error("end_time", END_TIME_MESSAGE)


def _check_date_pair(result: ValidationResult, values: Mapping[str, Any]) -> None:
    active_from, active_until = values.get("active_from"), values.get("active_until")
    if active_from is not None and active_until is not None and active_until < active_from:
        result.add_error("active_until", ACTIVE_UNTIL_MESSAGE)


def _run_rules(result: ValidationResult, raw: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field, rule, args in _FIELD_RULES:
        if not partial or field in raw:
            values[field] = result.check(field, rule, raw.get(field), *args)
        if field == "end_time":
            _check_time_pair(result, values)

    if not partial or "active_until" in raw:
        values["active_until"] = None
        if raw.get("active_until") is not None:
            values["active_until"] = result.check("active_until", require_calendar_date, raw["active_until"])
    _check_date_pair(result, values)
    return values


def validate_series(raw: Mapping[str, Any]) -> ValidationResult:
    """Validate a complete series definition.

    On success result.value is a SeriesDraft; otherwise result.errors lists
    one FieldError per offending field.
    """
    raw = dict(raw)
    raw.setdefault("active", True)

    result = ValidationResult()
    values = _run_rules(result, raw, partial=False)
    if result.is_valid:
        result.value = SeriesDraft(**values)
    return result


def validate_series_update(raw: Mapping[str, Any]) -> ValidationResult:
    """Validate a partial update: only fields present in raw are checked.

    result.value is a dict of normalized changes. An explicit
    active_until=None clears the end date.
    """
    result = ValidationResult()
    changes = _run_rules(result, raw, partial=True)
    if result.is_valid:
        result.value = changes
    return result
