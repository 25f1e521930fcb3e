from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from ..core.constants import DAYS_PER_WEEK
from ..core.enums import Ordering
from ..core.exceptions import InvalidFormatError

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_RE = re.compile(r"[0-9]{2}:[0-9]{2}")


def parse_calendar_date(value: str) -> date:
    """Parse a strict YYYY-MM-DD literal into a date.

    Full timestamps are rejected on purpose: reading "2024-01-09T23:00:00-03:00"
    as a local date would shift it by a day.
    """
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise InvalidFormatError(f"Invalid calendar date: {value!r} (expected YYYY-MM-DD)")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidFormatError(f"Invalid calendar date: {value!r}")


def format_calendar_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def _order(a, b) -> Ordering:
    if a < b:
        return Ordering.BEFORE
    if a > b:
        return Ordering.AFTER
    return Ordering.EQUAL


def compare_dates(a: date, b: date) -> Ordering:
    return _order(a, b)


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=int(days))


def weekday_of(value: date) -> int:
    """Weekday with Sunday=0 ... Saturday=6."""
    return value.isoweekday() % DAYS_PER_WEEK


def is_time_of_day(value: object) -> bool:
    if not isinstance(value, str) or not _TIME_RE.fullmatch(value):
        return False
    hours, minutes = int(value[:2]), int(value[3:])
    return hours < 24 and minutes < 60


def compare_time_of_day(a: str, b: str) -> Ordering:
    # Fixed-width zero-padded HH:MM sorts lexically.
    return _order(a, b)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()
