from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from .model import EDITABLE_PROFILE_FIELDS, Employee
from .repository import EmployeeRepository

_COLUMNS = """
    user_id, employee_code, email, password_hash, role, first_name, last_name,
    phone, address, department, position, is_active
"""

_LISTED_ROLES = (Role.EMPLOYEE.value, Role.HR.value)


def _to_employee(row: dict) -> Employee:
    return Employee(
        user_id=int(row["user_id"]),
        employee_code=row["employee_code"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
        is_active=bool(row.get("is_active", True)),
        phone=row.get("phone"),
        address=row.get("address"),
        department=row.get("department"),
        position=row.get("position"),
    )


def _list_filters(search: Optional[str]):
    clauses = ["role IN (%s, %s)"]
    params: list[object] = list(_LISTED_ROLES)

    if search:
        pattern = f"%{search.lower()}%"
        clauses.append(
            "(LOWER(first_name) LIKE %s OR LOWER(last_name) LIKE %s"
            " OR LOWER(email) LIKE %s OR LOWER(employee_code) LIKE %s)"
        )
        params.extend([pattern] * 4)

    return " AND ".join(clauses), params


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_employees(self, *, search: Optional[str] = None, limit: int = 10, offset: int = 0) -> Sequence[Employee]:
        where, params = _list_filters(search)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE {where}
                ORDER BY first_name ASC, user_id ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def count_employees(self, *, search: Optional[str] = None) -> int:
        where, params = _list_filters(search)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM employees WHERE {where}", tuple(params))
            return fetch_count(cur)

    def update_profile(self, user_id: int, changes: Mapping[str, Optional[str]]) -> bool:
        # Column names come from a fixed allow-list, values are always bound.
        columns = [name for name in EDITABLE_PROFILE_FIELDS if name in changes]
        if not columns:
            return False

        assignments = ", ".join(f"{name}=%s" for name in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE user_id=%s",
                tuple([changes[name] for name in columns] + [int(user_id)]),
            )
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0
