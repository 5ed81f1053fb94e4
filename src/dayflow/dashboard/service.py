from __future__ import annotations

from datetime import datetime

from ..common.datetime_utils import month_bounds, now_local
from ..core.enums import AttendanceStatus
from .repository import DashboardRepository

PRESENT_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY})


class DashboardService:
    """Summary counts for the landing page."""

    def __init__(self, dashboard: DashboardRepository):
        self._dashboard = dashboard

    def admin_stats(self, *, now: datetime | None = None) -> dict:
        today = (now or now_local()).date()
        return {
            "total_employees": self._dashboard.count_active_employees(),
            "present_today": self._dashboard.count_present_on(today),
            "pending_leaves": self._dashboard.count_pending_leaves(),
            "total_departments": self._dashboard.count_departments(),
        }

    def employee_stats(self, employee_id: int, *, now: datetime | None = None) -> dict:
        first, last = month_bounds((now or now_local()).date())
        return {
            "days_present_this_month": self._dashboard.count_days_present(
                int(employee_id), start_date=first, end_date=last
            ),
            "pending_requests": self._dashboard.count_pending_leaves(user_id=int(employee_id)),
        }
