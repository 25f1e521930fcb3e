from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_GENERATION_MAX_WORKERS,
    DEFAULT_GENERATION_TIMEOUT_SECONDS,
    DEFAULT_GENERATION_WINDOW_DAYS,
)
from .database.connection import DatabaseConnection, DBConfig
from .instances.generator import InstanceGenerator
from .instances.mysql_instance_repository import MySQLClassInstanceRepository
from .instances.repository import ClassInstanceRepository
from .instances.service import ClassInstanceService
from .series.mysql_series_repository import MySQLSeriesRepository
from .series.repository import SeriesRepository
from .series.service import SeriesService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository


@dataclass(frozen=True)
class Container:
    series_repo: SeriesRepository
    instances_repo: ClassInstanceRepository
    attendance_repo: AttendanceRepository
    students_repo: StudentRepository

    series_service: SeriesService
    instance_service: ClassInstanceService
    attendance_service: AttendanceService
    instance_generator: InstanceGenerator

    generation_window_days: int = DEFAULT_GENERATION_WINDOW_DAYS


def wire(
    *,
    series_repo: SeriesRepository,
    instances_repo: ClassInstanceRepository,
    attendance_repo: AttendanceRepository,
    students_repo: StudentRepository,
    generation_window_days: int = DEFAULT_GENERATION_WINDOW_DAYS,
    generation_max_workers: int = DEFAULT_GENERATION_MAX_WORKERS,
    generation_timeout: Optional[float] = DEFAULT_GENERATION_TIMEOUT_SECONDS,
) -> Container:
    """Build services on top of any repositories honoring the storage contract."""
    return Container(
        series_repo=series_repo,
        instances_repo=instances_repo,
        attendance_repo=attendance_repo,
        students_repo=students_repo,
        series_service=SeriesService(series_repo, instances_repo),
        instance_service=ClassInstanceService(instances_repo, series_repo),
        attendance_service=AttendanceService(attendance_repo, instances_repo, students_repo),
        instance_generator=InstanceGenerator(
            series_repo,
            instances_repo,
            max_workers=generation_max_workers,
            default_timeout=generation_timeout,
        ),
        generation_window_days=int(generation_window_days),
    )


def build_container(*, db_config: dict, settings: object = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return wire(
        series_repo=MySQLSeriesRepository(conn),
        instances_repo=MySQLClassInstanceRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        generation_window_days=getattr(settings, "GENERATION_WINDOW_DAYS", DEFAULT_GENERATION_WINDOW_DAYS),
        generation_max_workers=getattr(settings, "GENERATION_MAX_WORKERS", DEFAULT_GENERATION_MAX_WORKERS),
        generation_timeout=getattr(settings, "GENERATION_TIMEOUT_SECONDS", DEFAULT_GENERATION_TIMEOUT_SECONDS),
    )
