from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import today_local
from ..common.logging import get_logger
from ..core.exceptions import NotFoundError, ValidationError
from ..instances.cascade import cascade_cancel
from ..instances.repository import ClassInstanceRepository
from .model import RetireResult, Series
from .repository import SeriesRepository
from .validator import validate_series, validate_series_update

log = get_logger(__name__)


class SeriesService:
    """Authoring and lifecycle of class series.

    Creating or editing a series never touches instances: materialization is
    left to the next generation pass, and instances that already exist keep
    the schedule they were generated with.
    """

    def __init__(self, series: SeriesRepository, instances: ClassInstanceRepository):
        self._series = series
        self._instances = instances

    def get(self, series_id: int) -> Series:
        series = self._series.get_by_id(int(series_id))
        if not series:
            raise NotFoundError(f"Series {series_id} not found")
        return series

    def create(self, raw: Mapping[str, Any]) -> Series:
        result = validate_series(raw)
        result.raise_if_invalid()

        series_id = self._series.create(result.value)
        log.info("series.created", series_id=series_id, weekday=result.value.weekday)
        return self.get(series_id)

    def update(self, series_id: int, raw: Mapping[str, Any]) -> Series:
        result = validate_series_update(raw)
        result.raise_if_invalid()
        if not result.value:
            raise ValidationError("No fields to update")

        self.get(series_id)
        self._series.update(series_id=int(series_id), changes=result.value)
        log.info("series.updated", series_id=series_id, fields=sorted(result.value))
        return self.get(series_id)

    def retire(self, series_id: int, *, cancel_future: bool = False, today: Optional[date] = None) -> RetireResult:
        """Deactivate a series as of today, optionally cancelling its upcoming classes.

        The deactivation is written first and is never undone: if the cascade
        fails afterwards the result carries cascade_error and the remaining
        instances stay scheduled.
        """
        today = today or today_local()
        series = self.get(series_id)

        # active_until may not precede active_from, even for a series that has not started yet.
        active_until = max(today, series.active_from)
        self._series.update(series_id=series.series_id, changes={"active": False, "active_until": active_until})
        log.info("series.retired", series_id=series.series_id, active_until=str(active_until))

        if not cancel_future:
            return RetireResult(series_id=series.series_id, deactivated=True, cancelled_count=0)

        outcome = cascade_cancel(self._instances, series_id=series.series_id, from_date=today)
        return RetireResult(
            series_id=series.series_id,
            deactivated=True,
            cancelled_count=outcome.cancelled_count,
            cascade_error=outcome.error,
        )
