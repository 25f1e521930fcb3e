from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..core.enums import CancelScope, Category, ClassType, InstanceStatus
from ..series.model import Series


@dataclass(frozen=True)
class InstanceDraft:
    """An instance about to be inserted.

    Schedule fields are a snapshot: later series edits do not flow back into
    instances that already exist.
    """

    series_id: Optional[int]
    class_date: date
    title: str
    start_time: str
    end_time: str
    instructor: str
    capacity: int
    category: Category
    class_type: ClassType
    status: InstanceStatus = InstanceStatus.SCHEDULED

    @classmethod
    def from_series(cls, series: Series, class_date: date) -> "InstanceDraft":
        return cls(
            series_id=series.series_id,
            class_date=class_date,
            title=series.title,
            start_time=series.start_time,
            end_time=series.end_time,
            instructor=series.instructor,
            capacity=series.capacity,
            category=series.category,
            class_type=series.class_type,
        )


@dataclass(frozen=True)
class ClassInstance:
    """One dated occurrence of a series, or a one-off class when series_id is None."""

    instance_id: int
    series_id: Optional[int]
    class_date: date
    title: str
    start_time: str
    end_time: str
    instructor: str
    capacity: int
    category: Category
    class_type: ClassType
    status: InstanceStatus


@dataclass(frozen=True)
class SeriesFailure:
    """Why one series could not be fully generated.

    failed_date is the first date whose create failed, or None when the
    series never got that far (existing-dates read failed, deadline hit).
    """

    series_id: int
    message: str
    failed_date: Optional[date] = None
    retryable: bool = True


@dataclass(frozen=True)
class GenerationResult:
    window_start: date
    window_end: date
    created_count: int
    existing_count: int
    series_processed: int
    created: Tuple[Tuple[int, date], ...] = ()
    errors: Tuple[SeriesFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class CancelResult:
    instance_id: int
    scope: CancelScope
    cancelled_count: int
    series_truncated: bool = False
    cascade_error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.cascade_error is None
