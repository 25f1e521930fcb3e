from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.logging import get_logger
from ..common.validators import require_choice
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError, StorageError, ValidationError
from ..instances.repository import ClassInstanceRepository
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

log = get_logger(__name__)


def _parse_status(value: AttendanceStatus | str) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return require_choice(value, "status", AttendanceStatus)
    except ValidationError as e:
        raise ValidationError(str(e), field="status")


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        instances: ClassInstanceRepository,
        students: StudentRepository,
    ):
        self._attendance = attendance
        self._instances = instances
        self._students = students

    def record(
        self,
        *,
        instance_id: int,
        student_id: int,
        status: AttendanceStatus | str,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Create or update the single record for (instance, student).

        check_in_at is recomputed from the requested status alone: now when
        it is PRESENT (so re-sending PRESENT refreshes it), None otherwise.
        """
        status = _parse_status(status)
        now = now or now_local()

        if not self._instances.get_by_id(int(instance_id)):
            raise NotFoundError(f"Class {instance_id} not found")
        if not self._students.exists(int(student_id)):
            raise NotFoundError(f"Student {student_id} not found")

        check_in_at = now if status == AttendanceStatus.PRESENT else None

        existing = self._attendance.get_for_pair(instance_id=int(instance_id), student_id=int(student_id))
        if existing is None:
            try:
                attendance_id = self._attendance.create(
                    instance_id=int(instance_id),
                    student_id=int(student_id),
                    status=status,
                    check_in_at=check_in_at,
                )
                log.info("attendance.created", attendance_id=attendance_id, status=status.value)
                return AttendanceRecord(
                    attendance_id=attendance_id,
                    instance_id=int(instance_id),
                    student_id=int(student_id),
                    status=status,
                    check_in_at=check_in_at,
                )
            except ConflictError:
                # Lost the insert race: the winner's row is now visible, update it instead.
                existing = self._attendance.get_for_pair(instance_id=int(instance_id), student_id=int(student_id))
                if existing is None:
                    raise StorageError(f"Attendance for class {instance_id}, student {student_id} vanished after conflict")

        if not self._attendance.update(attendance_id=existing.attendance_id, status=status, check_in_at=check_in_at):
            raise StorageError(f"Attendance {existing.attendance_id} could not be updated")
        log.info("attendance.updated", attendance_id=existing.attendance_id, status=status.value)
        return AttendanceRecord(
            attendance_id=existing.attendance_id,
            instance_id=existing.instance_id,
            student_id=existing.student_id,
            status=status,
            check_in_at=check_in_at,
        )
