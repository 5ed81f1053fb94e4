from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.enums import LeaveStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count
from .repository import DashboardRepository
from .service import PRESENT_STATUSES

_PRESENT_VALUES = tuple(s.value for s in PRESENT_STATUSES)
_PRESENT_IN = ", ".join(["%s"] * len(_PRESENT_VALUES))


class MySQLDashboardRepository(DashboardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _count(self, sql: str, params: tuple = ()) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return fetch_count(cur)

    def count_active_employees(self) -> int:
        return self._count(
            "SELECT COUNT(*) AS total FROM employees WHERE role=%s AND is_active=1",
            (Role.EMPLOYEE.value,),
        )

    def count_present_on(self, work_date: date) -> int:
        return self._count(
            f"""
            SELECT COUNT(DISTINCT user_id) AS total
            FROM attendance_records
            WHERE work_date=%s AND status IN ({_PRESENT_IN})
            """,
            (work_date, *_PRESENT_VALUES),
        )

    def count_pending_leaves(self, *, user_id: Optional[int] = None) -> int:
        if user_id is None:
            return self._count(
                "SELECT COUNT(*) AS total FROM leave_requests WHERE status=%s",
                (LeaveStatus.PENDING.value,),
            )
        return self._count(
            "SELECT COUNT(*) AS total FROM leave_requests WHERE status=%s AND user_id=%s",
            (LeaveStatus.PENDING.value, int(user_id)),
        )

    def count_departments(self) -> int:
        return self._count(
            "SELECT COUNT(DISTINCT department) AS total FROM employees WHERE department IS NOT NULL AND department <> ''"
        )

    def count_days_present(self, user_id: int, *, start_date: date, end_date: date) -> int:
        return self._count(
            f"""
            SELECT COUNT(*) AS total
            FROM attendance_records
            WHERE user_id=%s AND work_date BETWEEN %s AND %s AND status IN ({_PRESENT_IN})
            """,
            (int(user_id), start_date, end_date, *_PRESENT_VALUES),
        )
