from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Category, ClassType


@dataclass(frozen=True)
class SeriesDraft:
    """A validated series definition that has not been persisted yet."""

    title: str
    weekday: int
    start_time: str
    end_time: str
    category: Category
    class_type: ClassType
    instructor: str
    capacity: int
    active_from: date
    active_until: Optional[date] = None
    active: bool = True


@dataclass(frozen=True)
class Series:
    """Weekly recurrence definition for a class.

    weekday uses Sunday=0 ... Saturday=6; times are zero-padded HH:MM.
    """

    series_id: int
    title: str
    weekday: int
    start_time: str
    end_time: str
    category: Category
    class_type: ClassType
    instructor: str
    capacity: int
    active: bool
    active_from: date
    active_until: Optional[date] = None

    def intersects(self, start: date, end: date) -> bool:
        if self.active_from > end:
            return False
        return self.active_until is None or self.active_until >= start


@dataclass(frozen=True)
class RetireResult:
    series_id: int
    deactivated: bool
    cancelled_count: int
    cascade_error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.deactivated and self.cascade_error is None
