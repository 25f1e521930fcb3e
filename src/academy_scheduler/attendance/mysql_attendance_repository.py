from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_pair(self, *, instance_id: int, student_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, context=f"attendance {instance_id}/{student_id}") as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, instance_id, student_id, status, check_in_at
                FROM attendance_records
                WHERE instance_id=%s AND student_id=%s
                """,
                (int(instance_id), int(student_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceRecord(
                attendance_id=int(r["attendance_id"]),
                instance_id=int(r["instance_id"]),
                student_id=int(r["student_id"]),
                status=AttendanceStatus(r["status"]),
                check_in_at=r.get("check_in_at"),
            )

    def create(
        self,
        *,
        instance_id: int,
        student_id: int,
        status: AttendanceStatus,
        check_in_at: Optional[datetime],
    ) -> int:
        with db_cursor(self._conn_factory, context=f"attendance {instance_id}/{student_id}") as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(instance_id, student_id, status, check_in_at)
                VALUES(%s,%s,%s,%s)
                """,
                (int(instance_id), int(student_id), status.value, check_in_at),
            )
            return int(cur.lastrowid)

    def update(self, *, attendance_id: int, status: AttendanceStatus, check_in_at: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory, context=f"attendance {attendance_id}") as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, check_in_at=%s
                WHERE attendance_id=%s
                """,
                (status.value, check_in_at, int(attendance_id)),
            )
            return cur.rowcount > 0
