from __future__ import annotations

from datetime import date
from typing import Iterable, List

from ..series.expander import expand
from ..series.model import Series


def reconcile(series: Series, window_start: date, window_end: date, existing_dates: Iterable[date]) -> List[date]:
    """Dates that still need an instance, ascending.

    existing_dates counts every materialized instance regardless of status:
    a cancelled or completed date is never recreated. Capacity and other
    runtime state play no part here.
    """
    existing = set(existing_dates)
    return [d for d in expand(series, window_start, window_end) if d not in existing]
