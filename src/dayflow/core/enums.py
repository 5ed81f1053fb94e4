from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"

    @property
    def is_privileged(self) -> bool:
        return self in {Role.ADMIN, Role.HR}


class AttendanceStatus(str, Enum):
    """Attendance status values stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    LATE = "late"
    WEEKEND = "weekend"
    HOLIDAY = "holiday"


class LeaveType(str, Enum):
    PAID = "paid"
    SICK = "sick"
    UNPAID = "unpaid"


class LeaveStatus(str, Enum):
    """Leave approval workflow. PENDING is the only non-terminal state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self != LeaveStatus.PENDING


class PayrollStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
