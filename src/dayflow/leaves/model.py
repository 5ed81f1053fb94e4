from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: one leave application.

    Review fields (admin_comment, reviewed_by, reviewed_at) are written once, together
    with the pending -> approved/rejected transition.
    """

    request_id: int
    user_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    created_at: datetime
    admin_comment: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveRequestRow:
    """Read-model: a leave request joined with the requester's display name."""

    request: LeaveRequest
    employee_name: str
