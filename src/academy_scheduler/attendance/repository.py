from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_pair(self, *, instance_id: int, student_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        instance_id: int,
        student_id: int,
        status: AttendanceStatus,
        check_in_at: Optional[datetime],
    ) -> int:
        """Insert a record. Raises ConflictError if the pair already has one."""

        raise NotImplementedError

    def update(self, *, attendance_id: int, status: AttendanceStatus, check_in_at: Optional[datetime]) -> bool:
        raise NotImplementedError
