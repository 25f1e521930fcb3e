from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Category, ClassType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, time_of_day
from .model import Series, SeriesDraft
from .repository import SeriesRepository
from .validator import SERIES_FIELDS

_COLUMNS = (
    "series_id, title, weekday, start_time, end_time, category, class_type, "
    "instructor, capacity, active, active_from, active_until"
)


def _to_series(r: dict) -> Series:
    return Series(
        series_id=int(r["series_id"]),
        title=r["title"],
        weekday=int(r["weekday"]),
        start_time=time_of_day(r["start_time"]),
        end_time=time_of_day(r["end_time"]),
        category=Category(r["category"]),
        class_type=ClassType(r["class_type"]),
        instructor=r["instructor"],
        capacity=int(r["capacity"]),
        active=bool(r["active"]),
        active_from=r["active_from"],
        active_until=r.get("active_until"),
    )


def _db_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


class MySQLSeriesRepository(SeriesRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, series_id: int) -> Optional[Series]:
        with db_cursor(self._conn_factory, context=f"series {series_id}") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM class_series WHERE series_id=%s", (int(series_id),))
            r = fetchone(cur)
            return _to_series(r) if r else None

    def create(self, draft: SeriesDraft) -> int:
        with db_cursor(self._conn_factory, context="create series") as (_, cur):
            cur.execute(
                """
                INSERT INTO class_series(
                    title, weekday, start_time, end_time, category, class_type,
                    instructor, capacity, active, active_from, active_until
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.title,
                    int(draft.weekday),
                    draft.start_time,
                    draft.end_time,
                    draft.category.value,
                    draft.class_type.value,
                    draft.instructor,
                    int(draft.capacity),
                    int(draft.active),
                    draft.active_from,
                    draft.active_until,
                ),
            )
            return int(cur.lastrowid)

    def update(self, *, series_id: int, changes: Mapping[str, Any]) -> None:
        # Column names come from the validator's field list, never from input.
        columns = [name for name in SERIES_FIELDS if name in changes]
        if not columns:
            return

        assignments = ", ".join(f"{name}=%s" for name in columns)
        params = [_db_value(changes[name]) for name in columns]
        params.append(int(series_id))

        with db_cursor(self._conn_factory, context=f"update series {series_id}") as (_, cur):
            cur.execute(f"UPDATE class_series SET {assignments} WHERE series_id=%s", tuple(params))

    def list_active_in_window(self, *, start: date, end: date) -> Sequence[Series]:
        with db_cursor(self._conn_factory, context="list active series") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM class_series
                WHERE active=1
                  AND active_from <= %s
                  AND (active_until IS NULL OR active_until >= %s)
                ORDER BY series_id ASC
                """,
                (end, start),
            )
            return [_to_series(r) for r in fetchall(cur)]
