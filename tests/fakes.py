"""In-memory repositories for service and API tests.

Conditional writes run under a lock so they behave like the guarded SQL statements.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from dayflow.attendance.model import AttendanceRecord
from dayflow.core.enums import AttendanceStatus, LeaveStatus, LeaveType, PayrollStatus, Role
from dayflow.dashboard.service import PRESENT_STATUSES
from dayflow.employees.model import Employee
from dayflow.leaves.model import LeaveRequest, LeaveRequestRow
from dayflow.payroll.model import PayrollRecord, PayrollTotals, SalaryComponents

ADMIN_ID = 1
HR_ID = 2
EMPLOYEE_ID = 3
OTHER_EMPLOYEE_ID = 4
INACTIVE_ID = 5


def make_employee(
    user_id: int,
    role: Role = Role.EMPLOYEE,
    first_name="Evan",
    last_name="Park",
    *,
    password_hash="x",
    is_active=True,
    department=None,
) -> Employee:
    return Employee(
        user_id=user_id,
        employee_code=f"DF-{user_id:04d}",
        email=f"user{user_id}@dayflow.local",
        password_hash=password_hash,
        role=role,
        first_name=first_name,
        last_name=last_name,
        is_active=is_active,
        department=department,
    )


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self._lock = threading.Lock()
        self._by_id = {e.user_id: e for e in employees}

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        return self._by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self._by_id.values() if e.email == email), None)

    def all(self) -> list[Employee]:
        return list(self._by_id.values())

    def _listed(self, search):
        needle = (search or "").lower()
        return [
            e
            for e in self._by_id.values()
            if e.role in (Role.EMPLOYEE, Role.HR)
            and (
                not needle
                or any(needle in (v or "").lower() for v in (e.first_name, e.last_name, e.email, e.employee_code))
            )
        ]

    def list_employees(self, *, search=None, limit=10, offset=0):
        items = sorted(self._listed(search), key=lambda e: (e.first_name or "", e.user_id))
        return items[offset:offset + limit]

    def count_employees(self, *, search=None) -> int:
        return len(self._listed(search))

    def update_profile(self, user_id, changes) -> bool:
        with self._lock:
            current = self._by_id.get(int(user_id))
            if not current or not changes:
                return False
            self._by_id[current.user_id] = replace(current, **changes)
            return True

    def set_active(self, user_id, *, is_active) -> bool:
        with self._lock:
            current = self._by_id.get(int(user_id))
            if not current:
                return False
            self._by_id[current.user_id] = replace(current, is_active=is_active)
            return True


class InMemoryAttendance:
    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0

    def add(self, record: AttendanceRecord) -> None:
        self._rows[(record.user_id, record.work_date)] = record

    def all(self) -> list[AttendanceRecord]:
        return list(self._rows.values())

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._rows.get((user_id, work_date))

    def record_check_in(self, *, user_id, work_date, check_in_time, status, location=None) -> bool:
        with self._lock:
            existing = self._rows.get((user_id, work_date))
            if existing and existing.check_in_time is not None:
                return False
            if existing:
                record = replace(existing, check_in_time=check_in_time, check_in_location=location, status=status)
            else:
                self._id += 1
                record = AttendanceRecord(
                    attendance_id=self._id,
                    user_id=user_id,
                    work_date=work_date,
                    status=status,
                    check_in_time=check_in_time,
                    check_in_location=location,
                )
            self._rows[(user_id, work_date)] = record
            return True

    def record_check_out(self, *, user_id, work_date, check_out_time, work_hours, location=None) -> bool:
        with self._lock:
            existing = self._rows.get((user_id, work_date))
            if not existing or existing.check_in_time is None or existing.check_out_time is not None:
                return False
            self._rows[(user_id, work_date)] = replace(
                existing,
                check_out_time=check_out_time,
                check_out_location=location,
                work_hours=work_hours,
            )
            return True

    def _filter(self, user_id, start_date, end_date):
        return [
            r
            for r in self._rows.values()
            if r.user_id == user_id
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]

    def list_for_user(self, user_id, *, start_date=None, end_date=None, ascending=False, limit=None, offset=0):
        items = sorted(self._filter(user_id, start_date, end_date), key=lambda r: r.work_date, reverse=not ascending)
        if limit is None:
            return items[offset:]
        return items[offset:offset + limit]

    def count_for_user(self, user_id, *, start_date=None, end_date=None) -> int:
        return len(self._filter(user_id, start_date, end_date))


class InMemoryLeaves:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._lock = threading.Lock()
        self._rows: dict[int, LeaveRequest] = {}
        self._id = 0
        self._clock = datetime(2026, 1, 1, 8, 0, 0)

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        return self._rows.get(int(request_id))

    def _overlaps(self, user_id, start_date, end_date) -> bool:
        return any(
            r.user_id == user_id and r.status == LeaveStatus.PENDING and r.start_date <= end_date and r.end_date >= start_date
            for r in self._rows.values()
        )

    def has_pending_overlap(self, *, user_id, start_date, end_date) -> bool:
        return self._overlaps(user_id, start_date, end_date)

    def create_pending(self, *, user_id, leave_type, start_date, end_date, reason) -> Optional[int]:
        with self._lock:
            if self._overlaps(user_id, start_date, end_date):
                return None
            self._id += 1
            self._clock += timedelta(minutes=1)
            self._rows[self._id] = LeaveRequest(
                request_id=self._id,
                user_id=user_id,
                leave_type=LeaveType(leave_type),
                start_date=start_date,
                end_date=end_date,
                reason=reason,
                status=LeaveStatus.PENDING,
                created_at=self._clock,
            )
            return self._id

    def _filter(self, user_id, status):
        return [
            r
            for r in self._rows.values()
            if (user_id is None or r.user_id == user_id) and (status is None or r.status == status)
        ]

    def list_requests(self, *, user_id=None, status=None, limit=10, offset=0):
        items = sorted(self._filter(user_id, status), key=lambda r: (r.created_at, r.request_id), reverse=True)
        rows = []
        for r in items[offset:offset + limit]:
            employee = self._employees.get_by_id(r.user_id)
            rows.append(LeaveRequestRow(request=r, employee_name=employee.display_name if employee else "Unknown"))
        return rows

    def count_requests(self, *, user_id=None, status=None) -> int:
        return len(self._filter(user_id, status))

    def decide(self, *, request_id, status, reviewed_by, reviewed_at, admin_comment=None) -> bool:
        with self._lock:
            req = self._rows.get(int(request_id))
            if not req or req.status != LeaveStatus.PENDING:
                return False
            self._rows[req.request_id] = replace(
                req,
                status=status,
                reviewed_by=reviewed_by,
                reviewed_at=reviewed_at,
                admin_comment=admin_comment,
            )
            return True


class InMemoryPayroll:
    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, PayrollRecord] = {}
        self._id = 0

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        return self._rows.get(int(payroll_id))

    def create(self, *, user_id, month, year, components: SalaryComponents, totals: PayrollTotals) -> Optional[int]:
        with self._lock:
            if any((r.user_id, r.month, r.year) == (user_id, month, year) for r in self._rows.values()):
                return None
            self._id += 1
            self._rows[self._id] = PayrollRecord(
                payroll_id=self._id,
                user_id=user_id,
                month=month,
                year=year,
                components=components,
                totals=totals,
                status=PayrollStatus.PENDING,
            )
            return self._id

    def _filter(self, user_id, month, year):
        return [
            r
            for r in self._rows.values()
            if (user_id is None or r.user_id == user_id)
            and (month is None or r.month == month)
            and (year is None or r.year == year)
        ]

    def list_records(self, *, user_id=None, month=None, year=None, limit=12, offset=0):
        items = sorted(self._filter(user_id, month, year), key=lambda r: (r.year, r.month, r.payroll_id), reverse=True)
        return items[offset:offset + limit]

    def count_records(self, *, user_id=None, month=None, year=None) -> int:
        return len(self._filter(user_id, month, year))

    def update_status(self, *, payroll_id, status) -> bool:
        with self._lock:
            rec = self._rows.get(int(payroll_id))
            if not rec:
                return False
            self._rows[rec.payroll_id] = replace(rec, status=status)
            return True


class InMemoryDashboard:
    """Counts computed over the other in-memory repositories."""

    def __init__(self, employees: InMemoryEmployees, attendance: InMemoryAttendance, leaves: InMemoryLeaves):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves

    def count_active_employees(self) -> int:
        return sum(1 for e in self._employees.all() if e.role == Role.EMPLOYEE and e.is_active)

    def count_present_on(self, work_date: date) -> int:
        return len(
            {r.user_id for r in self._attendance.all() if r.work_date == work_date and r.status in PRESENT_STATUSES}
        )

    def count_pending_leaves(self, *, user_id=None) -> int:
        return self._leaves.count_requests(user_id=user_id, status=LeaveStatus.PENDING)

    def count_departments(self) -> int:
        return len({e.department for e in self._employees.all() if e.department})

    def count_days_present(self, user_id, *, start_date, end_date) -> int:
        return sum(
            1
            for r in self._attendance.list_for_user(user_id, start_date=start_date, end_date=end_date)
            if r.status in PRESENT_STATUSES
        )


def weekend_placeholder(user_id: int, work_date: date, attendance_id: int = 900) -> AttendanceRecord:
    return AttendanceRecord(attendance_id=attendance_id, user_id=user_id, work_date=work_date, status=AttendanceStatus.WEEKEND)


def closed_day(user_id: int, work_date: date, attendance_id: int, start=time(9, 0), end=time(17, 0)) -> AttendanceRecord:
    hours = Decimal(end.hour - start.hour) + Decimal(end.minute - start.minute) / Decimal(60)
    return AttendanceRecord(
        attendance_id=attendance_id,
        user_id=user_id,
        work_date=work_date,
        status=AttendanceStatus.PRESENT,
        check_in_time=start,
        check_out_time=end,
        work_hours=hours.quantize(Decimal("0.01")),
    )
