from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Presence state of one student in one class instance.

    check_in_at is set only while status is PRESENT.
    """

    attendance_id: int
    instance_id: int
    student_id: int
    status: AttendanceStatus
    check_in_at: Optional[datetime] = None
