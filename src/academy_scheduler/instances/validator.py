from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import compare_time_of_day, today_local
from ..common.validators import (
    ValidationResult,
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
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from ..core.enums import Category, ClassType, Ordering
from ..series.validator import END_TIME_MESSAGE
from .model import InstanceDraft


def validate_one_off_class(raw: Mapping[str, Any], *, today: Optional[date] = None) -> ValidationResult:
    """Validate a non-recurring class; result.value is an InstanceDraft without series."""
    today = today or today_local()
    result = ValidationResult()

    title = result.check("title", require_length, raw.get("title"), TITLE_MIN_LENGTH, TITLE_MAX_LENGTH)
    class_date = result.check("class_date", require_calendar_date, raw.get("class_date"))
    if class_date is not None and class_date < today:
        result.add_error("class_date", "class_date cannot be in the past")

    start_time = result.check("start_time", require_time_of_day, raw.get("start_time"))
    end_time = result.check("end_time", require_time_of_day, raw.get("end_time"))
    if start_time and end_time and compare_time_of_day(end_time, start_time) != Ordering.AFTER:
        result.add_error("end_time", END_TIME_MESSAGE)

    instructor = result.check(
        "instructor", require_length, raw.get("instructor"), INSTRUCTOR_MIN_LENGTH, INSTRUCTOR_MAX_LENGTH
    )
    capacity = result.check("capacity", require_int_range, raw.get("capacity"), CAPACITY_MIN, CAPACITY_MAX)
    category = result.check("category", require_choice, raw.get("category"), Category)
    class_type = result.check("class_type", require_choice, raw.get("class_type"), ClassType)

    if result.is_valid:
        result.value = InstanceDraft(
            series_id=None,
            class_date=class_date,
            title=title,
            start_time=start_time,
            end_time=end_time,
            instructor=instructor,
            capacity=capacity,
            category=category,
            class_type=class_type,
        )
    return result
