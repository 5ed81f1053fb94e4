from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest, LeaveRequestRow


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def has_pending_overlap(self, *, user_id: int, start_date: date, end_date: date) -> bool:
        raise NotImplementedError

    def create_pending(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> Optional[int]:
        """Insert a PENDING request unless one of the user's pending requests overlaps.

        The overlap check and the insert are atomic per user. Returns None on overlap.
        """

        raise NotImplementedError

    def list_requests(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Sequence[LeaveRequestRow]:
        """Newest first, joined with the requester's name."""

        raise NotImplementedError

    def count_requests(self, *, user_id: Optional[int] = None, status: Optional[LeaveStatus] = None) -> int:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        admin_comment: Optional[str] = None,
    ) -> bool:
        """Apply the decision only while the request is still PENDING."""

        raise NotImplementedError
