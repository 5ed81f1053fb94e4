from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.pagination import PageRequest
from ..common.validators import optional_text, require_enum, require_max_length, require_non_empty
from ..core.constants import DEFAULT_LEAVE_PAGE_SIZE, MAX_REASON_LENGTH
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import (
    AlreadyProcessedError,
    InvalidDateRangeError,
    NotFoundError,
    OverlappingRequestError,
    ValidationError,
)
from ..employees.service import EmployeeService
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

DECISIONS = frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED})


class LeaveService:
    """Leave requests: creation with overlap rejection and the single review decision.

    State machine: PENDING -> APPROVED | REJECTED, both terminal.
    """

    def __init__(self, leaves: LeaveRepository, employees: EmployeeService):
        self._leaves = leaves
        self._employees = employees

    def create_request(
        self,
        employee_id: int,
        *,
        leave_type: LeaveType | str,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> dict:
        self._employees.require_active(employee_id)
        leave_type = require_enum(LeaveType, leave_type, "Leave type")

        if end_date < start_date:
            raise InvalidDateRangeError()

        reason = require_max_length(require_non_empty(reason, "Reason"), "Reason", MAX_REASON_LENGTH)

        if self._leaves.has_pending_overlap(user_id=employee_id, start_date=start_date, end_date=end_date):
            raise OverlappingRequestError()

        request_id = self._leaves.create_pending(
            user_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        if request_id is None:
            logger.warning("Concurrent overlapping leave request rejected for user_id=%s", employee_id)
            raise OverlappingRequestError()

        logger.info(
            "Leave request %s created by user_id=%s (%s %s..%s)",
            request_id, employee_id, leave_type.value, start_date, end_date,
        )
        return self._to_view(self._load(request_id), self._employees.display_name_for(employee_id))

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: LeaveStatus | str | None = None,
        page: int | None = 1,
        limit: int | None = DEFAULT_LEAVE_PAGE_SIZE,
    ) -> dict:
        """List requests newest first.

        ``employee_id=None`` lists every employee's requests; callers must restrict
        that to admin/HR.
        """

        status = require_enum(LeaveStatus, status, "Status") if status else None
        paging = PageRequest.of(page, limit, default_limit=DEFAULT_LEAVE_PAGE_SIZE)

        rows = self._leaves.list_requests(
            user_id=employee_id,
            status=status,
            limit=paging.limit,
            offset=paging.offset,
        )
        total = self._leaves.count_requests(user_id=employee_id, status=status)
        return {
            "requests": [self._to_view(row.request, row.employee_name) for row in rows],
            "total": total,
            "page": paging.page,
            "limit": paging.limit,
        }

    def decide(
        self,
        request_id: int,
        *,
        reviewer_id: int,
        decision: LeaveStatus | str,
        comment: str | None = None,
        now: datetime | None = None,
    ) -> dict:
        decision = require_enum(LeaveStatus, decision, "Status")
        if decision not in DECISIONS:
            raise ValidationError('Status must be "approved" or "rejected"')
        comment = optional_text(comment, "Comment")

        request = self._load(request_id)
        if request.status.is_terminal:
            raise AlreadyProcessedError()

        applied = self._leaves.decide(
            request_id=request.request_id,
            status=decision,
            reviewed_by=int(reviewer_id),
            reviewed_at=(now or now_local()).replace(microsecond=0),
            admin_comment=comment,
        )
        if not applied:
            logger.warning("Leave request %s was decided concurrently", request_id)
            raise AlreadyProcessedError()

        logger.info("Leave request %s %s by user_id=%s", request_id, decision.value, reviewer_id)
        return self._to_view(self._load(request_id), self._employees.display_name_for(request.user_id))

    def _load(self, request_id: int) -> LeaveRequest:
        request = self._leaves.get_by_id(int(request_id))
        if not request:
            raise NotFoundError("Leave request not found")
        return request

    @staticmethod
    def _to_view(r: LeaveRequest, employee_name: str) -> dict:
        return {
            "id": r.request_id,
            "employee_id": r.user_id,
            "employee_name": employee_name,
            "type": r.leave_type.value,
            "start_date": r.start_date.strftime("%Y-%m-%d"),
            "end_date": r.end_date.strftime("%Y-%m-%d"),
            "reason": r.reason,
            "status": r.status.value,
            "admin_comment": r.admin_comment,
            "reviewed_by": r.reviewed_by,
            "reviewed_at": r.reviewed_at.strftime("%Y-%m-%d %H:%M:%S") if r.reviewed_at else None,
            "created_at": r.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        }
