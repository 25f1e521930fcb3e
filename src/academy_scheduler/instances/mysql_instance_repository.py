from __future__ import annotations

from datetime import date
from typing import Optional, Sequence, Set

from ..core.enums import Category, ClassType, FINAL_INSTANCE_STATUSES, InstanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, time_of_day
from .model import ClassInstance, InstanceDraft
from .repository import ClassInstanceRepository

_COLUMNS = (
    "instance_id, series_id, class_date, title, start_time, end_time, "
    "instructor, capacity, category, class_type, status"
)


def _to_instance(r: dict) -> ClassInstance:
    return ClassInstance(
        instance_id=int(r["instance_id"]),
        series_id=int(r["series_id"]) if r.get("series_id") is not None else None,
        class_date=r["class_date"],
        title=r["title"],
        start_time=time_of_day(r["start_time"]),
        end_time=time_of_day(r["end_time"]),
        instructor=r["instructor"],
        capacity=int(r["capacity"]),
        category=Category(r["category"]),
        class_type=ClassType(r["class_type"]),
        status=InstanceStatus(r["status"]),
    )


class MySQLClassInstanceRepository(ClassInstanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, instance_id: int) -> Optional[ClassInstance]:
        with db_cursor(self._conn_factory, context=f"instance {instance_id}") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM class_instances WHERE instance_id=%s", (int(instance_id),))
            r = fetchone(cur)
            return _to_instance(r) if r else None

    def list_dates_for_series(self, *, series_id: int, start: date, end: date) -> Set[date]:
        with db_cursor(self._conn_factory, context=f"series {series_id} existing dates") as (_, cur):
            cur.execute(
                """
                SELECT class_date
                FROM class_instances
                WHERE series_id=%s AND class_date BETWEEN %s AND %s
                """,
                (int(series_id), start, end),
            )
            return {r["class_date"] for r in fetchall(cur)}

    def list_cancellable(self, *, series_id: int, from_date: date) -> Sequence[ClassInstance]:
        final = tuple(s.value for s in FINAL_INSTANCE_STATUSES)
        with db_cursor(self._conn_factory, context=f"series {series_id} cancellable instances") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM class_instances
                WHERE series_id=%s AND class_date >= %s AND status NOT IN (%s, %s)
                ORDER BY class_date ASC
                """,
                (int(series_id), from_date, *final),
            )
            return [_to_instance(r) for r in fetchall(cur)]

    def create(self, draft: InstanceDraft) -> int:
        context = f"series {draft.series_id} on {draft.class_date}"
        with db_cursor(self._conn_factory, context=context) as (_, cur):
            # Plain INSERT: a duplicate (series_id, class_date) must surface as a conflict.
            cur.execute(
                """
                INSERT INTO class_instances(
                    series_id, class_date, title, start_time, end_time,
                    instructor, capacity, category, class_type, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.series_id,
                    draft.class_date,
                    draft.title,
                    draft.start_time,
                    draft.end_time,
                    draft.instructor,
                    int(draft.capacity),
                    draft.category.value,
                    draft.class_type.value,
                    draft.status.value,
                ),
            )
            return int(cur.lastrowid)

    def cancel_if_open(self, *, instance_id: int) -> bool:
        final = tuple(s.value for s in FINAL_INSTANCE_STATUSES)
        with db_cursor(self._conn_factory, context=f"instance {instance_id}") as (_, cur):
            cur.execute(
                "UPDATE class_instances SET status=%s WHERE instance_id=%s AND status NOT IN (%s, %s)",
                (InstanceStatus.CANCELLED.value, int(instance_id), *final),
            )
            return cur.rowcount > 0
