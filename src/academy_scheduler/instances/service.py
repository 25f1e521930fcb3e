from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import add_days
from ..common.logging import get_logger
from ..core.enums import CancelScope, InstanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..series.repository import SeriesRepository
from .cascade import cascade_cancel
from .model import CancelResult, ClassInstance
from .repository import ClassInstanceRepository
from .validator import validate_one_off_class

log = get_logger(__name__)


class ClassInstanceService:
    def __init__(self, instances: ClassInstanceRepository, series: SeriesRepository):
        self._instances = instances
        self._series = series

    def get(self, instance_id: int) -> ClassInstance:
        instance = self._instances.get_by_id(int(instance_id))
        if not instance:
            raise NotFoundError(f"Class {instance_id} not found")
        return instance

    def create_one_off(self, raw: Mapping[str, Any], *, today: Optional[date] = None) -> ClassInstance:
        result = validate_one_off_class(raw, today=today)
        result.raise_if_invalid()

        instance_id = self._instances.create(result.value)
        log.info("class.one_off_created", instance_id=instance_id, class_date=str(result.value.class_date))
        return self.get(instance_id)

    def cancel(self, instance_id: int, *, scope: CancelScope = CancelScope.SINGLE) -> CancelResult:
        """Cancel one class, or this class and every later one of its series.

        The "future" scope first ends the series the day before this class
        so no later generation pass can bring those dates back, then
        cancels the instances. A failure while cancelling is reported in
        the result; the series change stays.
        """
        instance = self.get(instance_id)

        if scope == CancelScope.FUTURE and instance.series_id is not None:
            truncated = self._truncate_series(series_id=instance.series_id, before=instance.class_date)
            outcome = cascade_cancel(self._instances, series_id=instance.series_id, from_date=instance.class_date)
            return CancelResult(
                instance_id=instance.instance_id,
                scope=CancelScope.FUTURE,
                cancelled_count=outcome.cancelled_count,
                series_truncated=truncated,
                cascade_error=outcome.error,
            )

        if instance.status == InstanceStatus.COMPLETED:
            raise ValidationError("A completed class cannot be cancelled", field="status")
        if instance.status == InstanceStatus.CANCELLED:
            return CancelResult(instance_id=instance.instance_id, scope=CancelScope.SINGLE, cancelled_count=0)

        cancelled = self._instances.cancel_if_open(instance_id=instance.instance_id)
        log.info("class.cancelled", instance_id=instance.instance_id, changed=cancelled)
        return CancelResult(
            instance_id=instance.instance_id,
            scope=CancelScope.SINGLE,
            cancelled_count=1 if cancelled else 0,
        )

    def _truncate_series(self, *, series_id: int, before: date) -> bool:
        series = self._series.get_by_id(series_id)
        if not series:
            return False

        last_day = add_days(before, -1)
        if series.active_until is not None and series.active_until <= last_day:
            return False

        if last_day < series.active_from:
            # Nothing of the series is left; active_until stays >= active_from.
            changes = {"active": False, "active_until": series.active_from}
        else:
            changes = {"active_until": last_day}
        self._series.update(series_id=series_id, changes=changes)
        log.info("series.truncated", series_id=series_id, **{k: str(v) for k, v in changes.items()})
        return True
