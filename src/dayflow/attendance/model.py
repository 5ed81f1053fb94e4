from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per (employee, calendar date).

    ``work_hours`` is set only once both check-in and check-out exist.
    """

    attendance_id: int
    user_id: int
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    check_in_location: Optional[str] = None
    check_out_location: Optional[str] = None
    work_hours: Optional[Decimal] = None

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_time is not None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None
