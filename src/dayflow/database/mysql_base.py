from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StorageError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One transaction: commit on success, rollback on error.

    Connector errors surface as ``StorageError`` so callers never see driver exceptions.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise StorageError() from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        raise StorageError() from exc
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


def fetch_count(cur) -> int:
    row = cur.fetchone()
    if not row:
        return 0
    if isinstance(row, dict):
        return int(row["total"])
    return int(row[0])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Coerce a TIME column into ``datetime.time``.

    Depending on the connector build, TIME arrives as ``time``, ``timedelta``
    (seconds since midnight) or an 'HH:MM[:SS]' string.
    """

    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        minutes, seconds = divmod(int(value.total_seconds()) % 86400, 60)
        hours, minutes = divmod(minutes, 60)
        return time(hours, minutes, seconds)

    if isinstance(value, str):
        hh, sep, rest = value.strip().partition(":")
        if not sep:
            raise ValueError(f"Invalid time string: {value!r}")
        mm, _, ss = rest.partition(":")
        return time(int(hh), int(mm), int(float(ss)) if ss else 0)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
