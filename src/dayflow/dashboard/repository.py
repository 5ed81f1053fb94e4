from __future__ import annotations

from datetime import date
from typing import Optional, Protocol


class DashboardRepository(Protocol):
    """Aggregate counts for the dashboard. Read-only."""

    def count_active_employees(self) -> int:
        raise NotImplementedError

    def count_present_on(self, work_date: date) -> int:
        """Distinct employees whose record for ``work_date`` is present, late or half-day."""

        raise NotImplementedError

    def count_pending_leaves(self, *, user_id: Optional[int] = None) -> int:
        raise NotImplementedError

    def count_departments(self) -> int:
        raise NotImplementedError

    def count_days_present(self, user_id: int, *, start_date: date, end_date: date) -> int:
        raise NotImplementedError
