from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.logging import get_logger
from ..core.exceptions import PartialBatchError, StorageError, UnitFailure
from .repository import ClassInstanceRepository

log = get_logger(__name__)


@dataclass(frozen=True)
class CascadeOutcome:
    cancelled_count: int
    error: Optional[Exception] = None


def cascade_cancel(instances: ClassInstanceRepository, *, series_id: int, from_date: date) -> CascadeOutcome:
    """Cancel a series' instances dated on/after from_date, one update each.

    Completed and cancelled instances are left alone, including ones that
    became final after the listing. A failing instance does not stop its
    siblings; failures come back as a PartialBatchError.
    """
    try:
        targets = instances.list_cancellable(series_id=series_id, from_date=from_date)
    except StorageError as e:
        log.warning("cascade.list_failed", series_id=series_id, from_date=str(from_date), error=str(e))
        return CascadeOutcome(cancelled_count=0, error=e)

    cancelled = 0
    failures: list[UnitFailure] = []
    for instance in targets:
        try:
            if instances.cancel_if_open(instance_id=instance.instance_id):
                cancelled += 1
        except StorageError as e:
            failures.append(UnitFailure(unit_id=instance.instance_id, message=str(e)))

    error = None
    if failures:
        error = PartialBatchError(
            f"{len(failures)} of {len(targets)} instances of series {series_id} could not be cancelled",
            failures,
        )
        log.warning(
            "cascade.partial_failure",
            series_id=series_id,
            failed_instance_ids=[f.unit_id for f in failures],
        )

    log.info("cascade.completed", series_id=series_id, from_date=str(from_date), cancelled=cancelled)
    return CascadeOutcome(cancelled_count=cancelled, error=error)
