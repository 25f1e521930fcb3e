from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory, context=f"student {student_id}") as (_, cur):
            cur.execute("SELECT 1 AS found FROM students WHERE student_id=%s", (int(student_id),))
            return fetchone(cur) is not None
