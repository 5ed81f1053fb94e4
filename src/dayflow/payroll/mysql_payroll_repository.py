from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from .model import PayrollRecord, PayrollTotals, SalaryComponents
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, user_id, pay_month, pay_year, basic_salary,
    house_rent_allowance, medical_allowance, conveyance_allowance, special_allowance,
    provident_fund, professional_tax, income_tax,
    allowances, deductions, gross_salary, net_salary, status
"""


def _dec(value) -> Decimal:
    return Decimal(str(value if value is not None else "0.00"))


def _to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        user_id=int(r["user_id"]),
        month=int(r["pay_month"]),
        year=int(r["pay_year"]),
        components=SalaryComponents(
            basic_salary=_dec(r["basic_salary"]),
            house_rent_allowance=_dec(r.get("house_rent_allowance")),
            medical_allowance=_dec(r.get("medical_allowance")),
            conveyance_allowance=_dec(r.get("conveyance_allowance")),
            special_allowance=_dec(r.get("special_allowance")),
            provident_fund=_dec(r.get("provident_fund")),
            professional_tax=_dec(r.get("professional_tax")),
            income_tax=_dec(r.get("income_tax")),
        ),
        totals=PayrollTotals(
            allowances=_dec(r.get("allowances")),
            deductions=_dec(r.get("deductions")),
            gross_salary=_dec(r["gross_salary"]),
            net_salary=_dec(r["net_salary"]),
        ),
        status=PayrollStatus(r["status"]),
    )


def _filters(user_id: Optional[int], month: Optional[int], year: Optional[int]):
    clauses = ["1=1"]
    params: list[object] = []

    if user_id is not None:
        clauses.append("user_id=%s")
        params.append(int(user_id))
    if month is not None:
        clauses.append("pay_month=%s")
        params.append(int(month))
    if year is not None:
        clauses.append("pay_year=%s")
        params.append(int(year))

    return " AND ".join(clauses), params


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(
        self,
        *,
        user_id: int,
        month: int,
        year: int,
        components: SalaryComponents,
        totals: PayrollTotals,
    ) -> Optional[int]:
        c = components
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO payroll_records(
                        user_id, pay_month, pay_year, basic_salary,
                        house_rent_allowance, medical_allowance, conveyance_allowance, special_allowance,
                        provident_fund, professional_tax, income_tax,
                        allowances, deductions, gross_salary, net_salary, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        int(month),
                        int(year),
                        c.basic_salary,
                        c.house_rent_allowance,
                        c.medical_allowance,
                        c.conveyance_allowance,
                        c.special_allowance,
                        c.provident_fund,
                        c.professional_tax,
                        c.income_tax,
                        totals.allowances,
                        totals.deductions,
                        totals.gross_salary,
                        totals.net_salary,
                        PayrollStatus.PENDING.value,
                    ),
                )
            except mysql.connector.IntegrityError as exc:
                # 1062 = duplicate key on (user_id, pay_month, pay_year)
                if exc.errno == 1062:
                    return None
                raise
            return int(cur.lastrowid)

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        limit: int = 12,
        offset: int = 0,
    ) -> Sequence[PayrollRecord]:
        where, params = _filters(user_id, month, year)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE {where}
                ORDER BY pay_year DESC, pay_month DESC, payroll_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_records(
        self,
        *,
        user_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> int:
        where, params = _filters(user_id, month, year)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM payroll_records WHERE {where}", tuple(params))
            return fetch_count(cur)

    def update_status(self, *, payroll_id: int, status: PayrollStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payroll_records SET status=%s WHERE payroll_id=%s",
                (status.value, int(payroll_id)),
            )
            return cur.rowcount > 0
