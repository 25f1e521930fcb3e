from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from .datetime_utils import format_calendar_date


def to_json(value: Any) -> Any:
    """Convert domain values into JSON-ready data.

    Calendar dates become YYYY-MM-DD (Flask's default provider would emit an
    HTTP date with a time and timezone); datetimes become ISO 8601.
    """
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return format_calendar_date(value)
    if isinstance(value, Exception):
        return str(value)
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json(v) for v in value]
    return value
