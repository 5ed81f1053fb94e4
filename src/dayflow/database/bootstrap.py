from __future__ import annotations

import re
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted literals."""
    start = 0
    quote: str | None = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def _exec_sql_file(target: DBConfig, path: str | Path) -> None:
    sql = _strip_line_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(target: DBConfig) -> None:
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(target: DBConfig, *, schema_path: str | Path) -> None:
    ensure_database_exists(target)
    _exec_sql_file(target, schema_path)


def apply_seed_sql(target: DBConfig, *, seed_path: str | Path) -> None:
    _exec_sql_file(target, seed_path)


DEMO_USERS = (
    # employee_code, email, password, role, first_name, last_name, department, position
    ("DF-0001", "admin@dayflow.local", "admin123", "admin", "Ada", "Admin", "Management", "Administrator"),
    ("DF-0002", "hr@dayflow.local", "hr123456", "hr", "Harriet", "Reyes", "People", "HR Manager"),
    ("DF-0003", "employee@dayflow.local", "employee123", "employee", "Evan", "Park", "Engineering", "Developer"),
)


def ensure_demo_users(target: DBConfig, *, today: date | None = None) -> None:
    """Upsert demo accounts and give the demo employee weekend placeholders.

    Weekend rows are seed data only; the live attendance engine never creates them.
    """

    today = today or date.today()
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        for code, email, password, role, first_name, last_name, department, position in DEMO_USERS:
            cur.execute(
                """
                INSERT INTO employees(
                    employee_code, email, password_hash, role, first_name, last_name, department, position, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,1)
                ON DUPLICATE KEY UPDATE
                    password_hash=VALUES(password_hash), role=VALUES(role),
                    first_name=VALUES(first_name), last_name=VALUES(last_name),
                    department=VALUES(department), position=VALUES(position), is_active=1
                """,
                (code, email, generate_password_hash(password), role, first_name, last_name, department, position),
            )

        cur.execute("SELECT user_id FROM employees WHERE email=%s", ("employee@dayflow.local",))
        row = cur.fetchone()
        if row:
            for offset in range(1, 15):
                day = today - timedelta(days=offset)
                if day.weekday() >= 5:
                    cur.execute(
                        """
                        INSERT IGNORE INTO attendance_records(user_id, work_date, status)
                        VALUES(%s,%s,'weekend')
                        """,
                        (int(row["user_id"]), day),
                    )

        conn.commit()
    finally:
        conn.close()


def list_tables(target: DBConfig) -> list[str]:
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
