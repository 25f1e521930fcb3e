from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError, NotFoundError, StorageError
from .connection import DatabaseConnection


def translate_error(exc: mysql.connector.Error, *, context: str = "") -> Exception:
    """Map a connector error onto the domain error contract.

    Duplicate keys are conflicts, dangling foreign keys are not-found, and
    everything else is a retryable storage failure.
    """
    prefix = f"{context}: " if context else ""
    if exc.errno == errorcode.ER_DUP_ENTRY:
        return ConflictError(f"{prefix}{exc.msg}")
    if exc.errno in (errorcode.ER_NO_REFERENCED_ROW, errorcode.ER_NO_REFERENCED_ROW_2):
        return NotFoundError(f"{prefix}{exc.msg}")
    return StorageError(f"{prefix}{exc.msg or exc}")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, context: str = ""):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise translate_error(e, context=context) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise translate_error(e, context=context) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def time_of_day(value: Any) -> Optional[str]:
    """MySQL TIME column -> zero-padded HH:MM."""
    t = normalize_mysql_time(value)
    return t.strftime("%H:%M") if t is not None else None
