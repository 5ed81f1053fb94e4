from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date, check_in_time, check_out_time,
    check_in_location, check_out_location, status, work_hours
"""


def _to_record(r: dict) -> AttendanceRecord:
    work_hours = r.get("work_hours")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=normalize_mysql_time(r.get("check_in_time")),
        check_out_time=normalize_mysql_time(r.get("check_out_time")),
        check_in_location=r.get("check_in_location"),
        check_out_location=r.get("check_out_location"),
        work_hours=Decimal(str(work_hours)) if work_hours is not None else None,
    )


def _range_clauses(user_id: int, start_date: Optional[date], end_date: Optional[date]):
    clauses = ["user_id=%s"]
    params: list[object] = [int(user_id)]
    if start_date is not None:
        clauses.append("work_date >= %s")
        params.append(start_date)
    if end_date is not None:
        clauses.append("work_date <= %s")
        params.append(end_date)
    return " AND ".join(clauses), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def record_check_in(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: time,
        status: AttendanceStatus,
        location: Optional[str] = None,
    ) -> bool:
        # Check-ins of one employee serialize on the employee row lock, so the shared lock taken
        # by INSERT IGNORE on an existing row is never held by two racing transactions at once.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM employees WHERE user_id=%s FOR UPDATE", (int(user_id),))
            fetchall(cur)

            cur.execute(
                """
                INSERT IGNORE INTO attendance_records(user_id, work_date, status)
                VALUES(%s,%s,%s)
                """,
                (int(user_id), work_date, status.value),
            )
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_in_location=%s, status=%s
                WHERE user_id=%s AND work_date=%s AND check_in_time IS NULL
                """,
                (check_in_time, location, status.value, int(user_id), work_date),
            )
            return cur.rowcount > 0

    def record_check_out(
        self,
        *,
        user_id: int,
        work_date: date,
        check_out_time: time,
        work_hours: Decimal,
        location: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_location=%s, work_hours=%s
                WHERE user_id=%s AND work_date=%s
                  AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (check_out_time, location, work_hours, int(user_id), work_date),
            )
            return cur.rowcount > 0

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        ascending: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[AttendanceRecord]:
        where, params = _range_clauses(user_id, start_date, end_date)
        order = "ASC" if ascending else "DESC"
        sql = f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE {where}
            ORDER BY work_date {order}
        """
        if limit is not None:
            sql += " LIMIT %s OFFSET %s"
            params += [int(limit), int(offset)]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def count_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        where, params = _range_clauses(user_id, start_date, end_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance_records WHERE {where}", tuple(params))
            return fetch_count(cur)
