from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def record_check_in(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: time,
        status: AttendanceStatus,
        location: Optional[str] = None,
    ) -> bool:
        """Create the day's record or fill its check-in, only if no check-in exists yet.

        Returns False when a check-in was already recorded (nothing is written).
        """

        raise NotImplementedError

    def record_check_out(
        self,
        *,
        user_id: int,
        work_date: date,
        check_out_time: time,
        work_hours: Decimal,
        location: Optional[str] = None,
    ) -> bool:
        """Set check-out only if the record is checked in and not yet checked out."""

        raise NotImplementedError

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
        raise NotImplementedError

    def count_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        raise NotImplementedError
