from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import day_name, format_hhmm, hours_between, now_local, week_bounds
from ..common.pagination import PageRequest
from ..common.validators import optional_text
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    InvalidDateRangeError,
    NotCheckedInError,
)
from ..employees.service import EmployeeService
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Daily check-in/check-out rules.

    One record per employee per day: the first check-in creates it, check-out completes it.
    Both writes are conditional in storage, so a racing duplicate observes the conflict
    instead of overwriting the first call.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeService,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def check_in(self, employee_id: int, *, location: str | None = None, now: datetime | None = None) -> dict:
        self._employees.require_active(employee_id)
        location = optional_text(location, "Location")
        now = now or now_local()
        today = now.date()

        existing = self._attendance.get_for_user_and_date(employee_id, today)
        if existing and existing.is_checked_in:
            raise AlreadyCheckedInError()

        decision = self._factory.for_checkin(now=now).decide_checkin(now=now)
        applied = self._attendance.record_check_in(
            user_id=employee_id,
            work_date=today,
            check_in_time=now.time().replace(microsecond=0),
            status=decision.status,
            location=location,
        )
        if not applied:
            logger.warning("Concurrent check-in rejected for user_id=%s date=%s", employee_id, today)
            raise AlreadyCheckedInError()

        logger.info("user_id=%s checked in at %s (%s)", employee_id, now.strftime("%H:%M"), decision.status.value)
        return self._to_view(self._attendance.get_for_user_and_date(employee_id, today))

    def check_out(self, employee_id: int, *, location: str | None = None, now: datetime | None = None) -> dict:
        self._employees.require_active(employee_id)
        location = optional_text(location, "Location")
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_user_and_date(employee_id, today)
        if not record or not record.is_checked_in:
            raise NotCheckedInError()
        if record.is_checked_out:
            raise AlreadyCheckedOutError()

        check_out_time = now.time().replace(microsecond=0)
        work_hours = hours_between(today, record.check_in_time, check_out_time)
        applied = self._attendance.record_check_out(
            user_id=employee_id,
            work_date=today,
            check_out_time=check_out_time,
            work_hours=work_hours,
            location=location,
        )
        if not applied:
            logger.warning("Concurrent check-out rejected for user_id=%s date=%s", employee_id, today)
            raise AlreadyCheckedOutError()

        logger.info("user_id=%s checked out at %s (%s h)", employee_id, now.strftime("%H:%M"), work_hours)
        return self._to_view(self._attendance.get_for_user_and_date(employee_id, today))

    def get_today(self, employee_id: int, *, now: datetime | None = None) -> Optional[dict]:
        """Today's record, or None when nothing was recorded yet."""
        today = (now or now_local()).date()
        record = self._attendance.get_for_user_and_date(employee_id, today)
        return self._to_view(record) if record else None

    def get_history(
        self,
        employee_id: int,
        *,
        page: int | None = 1,
        limit: int | None = DEFAULT_HISTORY_LIMIT,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict:
        if start_date and end_date and end_date < start_date:
            raise InvalidDateRangeError()

        paging = PageRequest.of(page, limit, default_limit=DEFAULT_HISTORY_LIMIT)
        rows = self._attendance.list_for_user(
            employee_id,
            start_date=start_date,
            end_date=end_date,
            limit=paging.limit,
            offset=paging.offset,
        )
        total = self._attendance.count_for_user(employee_id, start_date=start_date, end_date=end_date)
        return {
            "records": [self._to_view(r) for r in rows],
            "total": total,
            "page": paging.page,
            "limit": paging.limit,
        }

    def get_weekly(self, employee_id: int, *, now: datetime | None = None) -> list[dict]:
        monday, sunday = week_bounds((now or now_local()).date())
        rows = self._attendance.list_for_user(employee_id, start_date=monday, end_date=sunday, ascending=True)
        return [self._to_view(r) for r in rows]

    @staticmethod
    def _to_view(r: AttendanceRecord) -> dict:
        return {
            "id": r.attendance_id,
            "employee_id": r.user_id,
            "date": r.work_date.strftime("%Y-%m-%d"),
            "day": day_name(r.work_date),
            "check_in": format_hhmm(r.check_in_time),
            "check_out": format_hhmm(r.check_out_time),
            "check_in_location": r.check_in_location,
            "check_out_location": r.check_out_location,
            "status": r.status.value,
            "work_hours": float(r.work_hours) if r.work_hours is not None else None,
        }
