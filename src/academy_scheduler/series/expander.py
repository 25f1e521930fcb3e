from __future__ import annotations

from datetime import date
from typing import List

from ..common.datetime_utils import add_days, weekday_of
from ..core.constants import DAYS_PER_WEEK
from .model import Series


def expand(series: Series, window_start: date, window_end: date) -> List[date]:
    """Dates on which the series should have an instance inside the window.

    The window is clamped to the series' own [active_from, active_until]
    range. Inactive series and empty windows yield no dates. Output is
    ascending and depends only on the arguments.
    """
    if not series.active:
        return []

    start = max(window_start, series.active_from)
    end = window_end if series.active_until is None else min(window_end, series.active_until)
    if start > end:
        return []

    offset = (series.weekday - weekday_of(start)) % DAYS_PER_WEEK
    cursor = add_days(start, offset)

    dates: List[date] = []
    while cursor <= end:
        dates.append(cursor)
        cursor = add_days(cursor, DAYS_PER_WEEK)
    return dates
