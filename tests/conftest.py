from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from academy_scheduler.attendance.model import AttendanceRecord
from academy_scheduler.container import wire
from academy_scheduler.core.enums import (
    AttendanceStatus,
    Category,
    ClassType,
    FINAL_INSTANCE_STATUSES,
    InstanceStatus,
)
from academy_scheduler.core.exceptions import ConflictError, StorageError
from academy_scheduler.instances.model import ClassInstance, InstanceDraft
from academy_scheduler.series.model import Series, SeriesDraft


class InMemorySeries:
    def __init__(self):
        self._by_id: dict[int, Series] = {}
        self._id = 0
        self.fail_update = False

    def get_by_id(self, series_id: int) -> Optional[Series]:
        return self._by_id.get(series_id)

    def create(self, draft: SeriesDraft) -> int:
        self._id += 1
        self._by_id[self._id] = Series(series_id=self._id, **vars(draft))
        return self._id

    def add(self, series: Series) -> Series:
        self._by_id[series.series_id] = series
        self._id = max(self._id, series.series_id)
        return series

    def update(self, *, series_id: int, changes) -> None:
        if self.fail_update:
            raise StorageError(f"update series {series_id}: connection lost")
        self._by_id[series_id] = replace(self._by_id[series_id], **dict(changes))

    def list_active_in_window(self, *, start: date, end: date):
        return sorted(
            (s for s in self._by_id.values() if s.active and s.intersects(start, end)),
            key=lambda s: s.series_id,
        )


class InMemoryInstances:
    """Instance store with a (series_id, class_date) unique index."""

    def __init__(self):
        self._by_id: dict[int, ClassInstance] = {}
        self._unique: dict[tuple[int, date], int] = {}
        self._id = 0
        self._lock = threading.Lock()
        self.create_calls = 0
        self.fail_create_for_series: set[int] = set()
        self.fail_update_for: set[int] = set()
        self.fail_list_cancellable = False

    def get_by_id(self, instance_id: int) -> Optional[ClassInstance]:
        return self._by_id.get(instance_id)

    def all(self) -> list[ClassInstance]:
        return sorted(self._by_id.values(), key=lambda i: (i.series_id or 0, i.class_date))

    def list_dates_for_series(self, *, series_id: int, start: date, end: date) -> set[date]:
        return {i.class_date for i in self._by_id.values() if i.series_id == series_id and start <= i.class_date <= end}

    def list_cancellable(self, *, series_id: int, from_date: date):
        if self.fail_list_cancellable:
            raise StorageError(f"series {series_id} cancellable instances: timeout")
        return sorted(
            (
                i
                for i in self._by_id.values()
                if i.series_id == series_id and i.class_date >= from_date and i.status not in FINAL_INSTANCE_STATUSES
            ),
            key=lambda i: i.class_date,
        )

    def create(self, draft: InstanceDraft) -> int:
        with self._lock:
            self.create_calls += 1
            if draft.series_id in self.fail_create_for_series:
                raise StorageError(f"series {draft.series_id} on {draft.class_date}: connection reset")
            key = (draft.series_id, draft.class_date)
            if draft.series_id is not None and key in self._unique:
                raise ConflictError(f"Duplicate entry for {key}")
            self._id += 1
            self._by_id[self._id] = ClassInstance(instance_id=self._id, **vars(draft))
            if draft.series_id is not None:
                self._unique[key] = self._id
            return self._id

    def set_status(self, *, instance_id: int, status: InstanceStatus) -> None:
        self._by_id[instance_id] = replace(self._by_id[instance_id], status=status)

    def cancel_if_open(self, *, instance_id: int) -> bool:
        if instance_id in self.fail_update_for:
            raise StorageError(f"instance {instance_id}: lock wait timeout")
        with self._lock:
            instance = self._by_id.get(instance_id)
            if instance is None or instance.status in FINAL_INSTANCE_STATUSES:
                return False
            self._by_id[instance_id] = replace(instance, status=InstanceStatus.CANCELLED)
            return True


class InMemoryAttendance:
    """Attendance store with an (instance_id, student_id) unique index."""

    def __init__(self):
        self._by_pair: dict[tuple[int, int], AttendanceRecord] = {}
        self._id = 0
        self.create_calls = 0
        self.update_calls = 0
        # Simulates another request inserting the same pair between our read and our insert.
        self.concurrent_insert_before_create: Optional[AttendanceStatus] = None

    def get_for_pair(self, *, instance_id: int, student_id: int) -> Optional[AttendanceRecord]:
        return self._by_pair.get((instance_id, student_id))

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_pair.values())

    def _insert(self, instance_id, student_id, status, check_in_at) -> int:
        self._id += 1
        self._by_pair[(instance_id, student_id)] = AttendanceRecord(
            attendance_id=self._id,
            instance_id=instance_id,
            student_id=student_id,
            status=status,
            check_in_at=check_in_at,
        )
        return self._id

    def create(self, *, instance_id, student_id, status, check_in_at) -> int:
        self.create_calls += 1
        if self.concurrent_insert_before_create is not None:
            winner = self.concurrent_insert_before_create
            self.concurrent_insert_before_create = None
            self._insert(instance_id, student_id, winner, None)
        if (instance_id, student_id) in self._by_pair:
            raise ConflictError(f"Duplicate entry for {(instance_id, student_id)}")
        return self._insert(instance_id, student_id, status, check_in_at)

    def update(self, *, attendance_id, status, check_in_at) -> bool:
        self.update_calls += 1
        for key, rec in self._by_pair.items():
            if rec.attendance_id == attendance_id:
                self._by_pair[key] = replace(rec, status=status, check_in_at=check_in_at)
                return True
        return False


class InMemoryStudents:
    def __init__(self, ids=()):
        self.ids = set(ids)

    def exists(self, student_id: int) -> bool:
        return student_id in self.ids


def build_series(**overrides) -> Series:
    values = dict(
        series_id=1,
        title="Kids Jiu-Jitsu",
        weekday=2,
        start_time="10:00",
        end_time="11:00",
        category=Category.CHILD,
        class_type=ClassType.GROUP,
        instructor="Carla Mendes",
        capacity=20,
        active=True,
        active_from=date(2024, 1, 1),
        active_until=None,
    )
    values.update(overrides)
    return Series(**values)


@pytest.fixture
def make_series():
    return build_series


@pytest.fixture
def series_repo():
    return InMemorySeries()


@pytest.fixture
def instances_repo():
    return InMemoryInstances()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def students_repo():
    return InMemoryStudents({100, 101})


@pytest.fixture
def container(series_repo, instances_repo, attendance_repo, students_repo):
    return wire(
        series_repo=series_repo,
        instances_repo=instances_repo,
        attendance_repo=attendance_repo,
        students_repo=students_repo,
        generation_max_workers=2,
        generation_timeout=5.0,
    )


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 9, 10, 2, 0)
