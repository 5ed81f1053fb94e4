from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from ..employees.model import full_name
from .model import LeaveRequest, LeaveRequestRow
from .repository import LeaveRepository

_OVERLAP_SQL = """
    SELECT COUNT(*) AS total
    FROM leave_requests
    WHERE user_id=%s AND status=%s AND start_date <= %s AND end_date >= %s
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        admin_comment=r.get("admin_comment"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
    )


def _filters(user_id: Optional[int], status: Optional[LeaveStatus]):
    clauses = ["1=1"]
    params: list[object] = []

    if user_id is not None:
        clauses.append("r.user_id=%s")
        params.append(int(user_id))
    if status is not None:
        clauses.append("r.status=%s")
        params.append(status.value)

    return " AND ".join(clauses), params


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT request_id, user_id, leave_type, start_date, end_date, reason,
                       status, created_at, admin_comment, reviewed_by, reviewed_at
                FROM leave_requests
                WHERE request_id=%s
                """,
                (int(request_id),),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def has_pending_overlap(self, *, user_id: int, start_date: date, end_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_OVERLAP_SQL, (int(user_id), LeaveStatus.PENDING.value, end_date, start_date))
            return fetch_count(cur) > 0

    def create_pending(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Serialize concurrent submissions of the same employee on its row lock.
            cur.execute("SELECT user_id FROM employees WHERE user_id=%s FOR UPDATE", (int(user_id),))
            fetchall(cur)

            cur.execute(_OVERLAP_SQL, (int(user_id), LeaveStatus.PENDING.value, end_date, start_date))
            if fetch_count(cur) > 0:
                return None

            cur.execute(
                """
                INSERT INTO leave_requests(user_id, leave_type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), leave_type.value, start_date, end_date, reason, LeaveStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def list_requests(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Sequence[LeaveRequestRow]:
        where, params = _filters(user_id, status)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.request_id, r.user_id, r.leave_type, r.start_date, r.end_date, r.reason,
                       r.status, r.created_at, r.admin_comment, r.reviewed_by, r.reviewed_at,
                       e.first_name, e.last_name
                FROM leave_requests r
                LEFT JOIN employees e ON e.user_id = r.user_id
                WHERE {where}
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [
                LeaveRequestRow(request=_to_request(r), employee_name=full_name(r.get("first_name"), r.get("last_name")))
                for r in fetchall(cur)
            ]

    def count_requests(self, *, user_id: Optional[int] = None, status: Optional[LeaveStatus] = None) -> int:
        where, params = _filters(user_id, status)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM leave_requests r WHERE {where}", tuple(params))
            return fetch_count(cur)

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        admin_comment: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, admin_comment=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(reviewed_by),
                    reviewed_at,
                    admin_comment,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
