from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from ..core.constants import LATE_CUTOFF
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the check-in strategy from the wall clock.

    The cutoff is compared at minute precision: 09:30:59 is still on time.
    """

    cutoff: time = LATE_CUTOFF

    def for_checkin(self, *, now: datetime) -> AttendanceStrategy:
        if (now.hour, now.minute) > (self.cutoff.hour, self.cutoff.minute):
            return LateStrategy()
        return PresentStrategy()
