from __future__ import annotations

import threading
from datetime import date, datetime

import pytest

from dayflow.core.enums import LeaveStatus
from dayflow.core.exceptions import (
    AlreadyProcessedError,
    InvalidDateRangeError,
    NotFoundError,
    OverlappingRequestError,
    UnauthorizedError,
    ValidationError,
)
from dayflow.leaves.service import LeaveService
from tests.fakes import ADMIN_ID, EMPLOYEE_ID, INACTIVE_ID, OTHER_EMPLOYEE_ID, InMemoryLeaves

DECIDED_AT = datetime(2026, 1, 8, 14, 15, 0)


class RacingLeaves(InMemoryLeaves):
    """Holds the first two lookups until both reviewers have made them."""

    def __init__(self, employees):
        super().__init__(employees)
        self._barrier = threading.Barrier(2, timeout=5)
        self._reads = 0
        self._reads_lock = threading.Lock()

    def get_by_id(self, request_id: int):
        with self._reads_lock:
            self._reads += 1
            wait = self._reads <= 2
        request = super().get_by_id(request_id)
        if wait:
            self._barrier.wait()
        return request


@pytest.fixture
def repo(employees_repo):
    return InMemoryLeaves(employees_repo)


@pytest.fixture
def service(repo, employee_service):
    return LeaveService(repo, employee_service)


def _request(service, start, end, leave_type="paid", employee_id=EMPLOYEE_ID, reason="Family trip"):
    return service.create_request(
        employee_id,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        reason=reason,
    )


def test_create_request_is_pending(service):
    created = _request(service, date(2026, 1, 10), date(2026, 1, 12))

    assert created["status"] == "pending"
    assert created["type"] == "paid"
    assert created["employee_name"] == "Evan Park"
    assert created["start_date"] == "2026-01-10"
    assert created["end_date"] == "2026-01-12"
    assert created["reviewed_by"] is None
    assert created["admin_comment"] is None


def test_single_day_request_is_allowed(service):
    created = _request(service, date(2026, 2, 2), date(2026, 2, 2), leave_type="sick")

    assert created["start_date"] == created["end_date"]


def test_create_rejects_inverted_range(service, repo):
    with pytest.raises(InvalidDateRangeError):
        _request(service, date(2026, 1, 12), date(2026, 1, 10))

    assert repo.count_requests() == 0


def test_create_rejects_unknown_type(service):
    with pytest.raises(ValidationError):
        _request(service, date(2026, 1, 10), date(2026, 1, 12), leave_type="sabbatical")


@pytest.mark.parametrize("reason", ["", "   ", "x" * 1001])
def test_create_rejects_bad_reason(service, reason):
    with pytest.raises(ValidationError):
        _request(service, date(2026, 1, 10), date(2026, 1, 12), reason=reason)


def test_create_requires_active_employee(service):
    with pytest.raises(UnauthorizedError):
        _request(service, date(2026, 1, 10), date(2026, 1, 12), employee_id=INACTIVE_ID)


@pytest.mark.parametrize(
    "start,end",
    [
        (date(2026, 1, 12), date(2026, 1, 14)),  # shares the last day
        (date(2026, 1, 8), date(2026, 1, 10)),  # shares the first day
        (date(2026, 1, 11), date(2026, 1, 11)),  # inside
        (date(2026, 1, 1), date(2026, 1, 31)),  # covers
    ],
)
def test_overlapping_pending_request_is_rejected(service, repo, start, end):
    _request(service, date(2026, 1, 10), date(2026, 1, 12))

    with pytest.raises(OverlappingRequestError):
        _request(service, start, end, leave_type="sick")

    assert repo.count_requests() == 1


def test_adjacent_request_is_allowed(service):
    _request(service, date(2026, 1, 10), date(2026, 1, 12))

    created = _request(service, date(2026, 1, 13), date(2026, 1, 14))

    assert created["status"] == "pending"


def test_other_employees_requests_do_not_overlap(service):
    _request(service, date(2026, 1, 10), date(2026, 1, 12))

    created = _request(service, date(2026, 1, 10), date(2026, 1, 12), employee_id=OTHER_EMPLOYEE_ID)

    assert created["employee_name"] == "Mia Chen"


def test_approved_request_does_not_block_new_request(service):
    first = _request(service, date(2026, 1, 10), date(2026, 1, 12))
    service.decide(first["id"], reviewer_id=ADMIN_ID, decision="approved", now=DECIDED_AT)

    created = _request(service, date(2026, 1, 11), date(2026, 1, 13))

    assert created["status"] == "pending"


def test_decide_records_review(service):
    created = _request(service, date(2026, 1, 10), date(2026, 1, 12))

    decided = service.decide(
        created["id"],
        reviewer_id=ADMIN_ID,
        decision=LeaveStatus.APPROVED,
        comment="  Enjoy  ",
        now=DECIDED_AT.replace(microsecond=123),
    )

    assert decided["status"] == "approved"
    assert decided["reviewed_by"] == ADMIN_ID
    assert decided["reviewed_at"] == "2026-01-08 14:15:00"
    assert decided["admin_comment"] == "Enjoy"
    assert decided["employee_name"] == "Evan Park"


@pytest.mark.parametrize("decision", ["pending", "cancelled", ""])
def test_decide_rejects_non_terminal_decision(service, decision):
    created = _request(service, date(2026, 1, 10), date(2026, 1, 12))

    with pytest.raises(ValidationError):
        service.decide(created["id"], reviewer_id=ADMIN_ID, decision=decision, now=DECIDED_AT)


def test_decide_unknown_request(service):
    with pytest.raises(NotFoundError):
        service.decide(404, reviewer_id=ADMIN_ID, decision="approved", now=DECIDED_AT)


def test_decided_request_cannot_be_decided_again(service, repo):
    created = _request(service, date(2026, 1, 10), date(2026, 1, 12))
    service.decide(created["id"], reviewer_id=ADMIN_ID, decision="rejected", comment="No", now=DECIDED_AT)

    with pytest.raises(AlreadyProcessedError):
        service.decide(created["id"], reviewer_id=ADMIN_ID, decision="approved", now=DECIDED_AT)

    stored = repo.get_by_id(created["id"])
    assert stored.status == LeaveStatus.REJECTED
    assert stored.admin_comment == "No"


def test_concurrent_decisions_apply_exactly_once(employees_repo, employee_service):
    repo = RacingLeaves(employees_repo)
    service = LeaveService(repo, employee_service)
    request_id = repo.create_pending(
        user_id=EMPLOYEE_ID,
        leave_type="paid",
        start_date=date(2026, 1, 10),
        end_date=date(2026, 1, 12),
        reason="Trip",
    )
    outcomes: list[object] = []

    def worker(decision: str):
        try:
            outcomes.append(service.decide(request_id, reviewer_id=ADMIN_ID, decision=decision, now=DECIDED_AT))
        except AlreadyProcessedError as exc:
            outcomes.append(exc)

    threads = [threading.Thread(target=worker, args=(d,)) for d in ("approved", "rejected")]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    successes = [o for o in outcomes if isinstance(o, dict)]
    assert len(successes) == 1
    assert sum(isinstance(o, AlreadyProcessedError) for o in outcomes) == 1
    assert repo.get_by_id(request_id).status.value == successes[0]["status"]


def test_list_own_requests_newest_first(service):
    _request(service, date(2026, 1, 10), date(2026, 1, 12))
    _request(service, date(2026, 2, 10), date(2026, 2, 12))
    _request(service, date(2026, 3, 10), date(2026, 3, 12), employee_id=OTHER_EMPLOYEE_ID)

    result = service.list_requests(employee_id=EMPLOYEE_ID)

    assert result["total"] == 2
    assert [r["start_date"] for r in result["requests"]] == ["2026-02-10", "2026-01-10"]
    assert (result["page"], result["limit"]) == (1, 10)


def test_list_all_requests_with_status_filter(service):
    first = _request(service, date(2026, 1, 10), date(2026, 1, 12))
    _request(service, date(2026, 3, 10), date(2026, 3, 12), employee_id=OTHER_EMPLOYEE_ID)
    service.decide(first["id"], reviewer_id=ADMIN_ID, decision="approved", now=DECIDED_AT)

    pending = service.list_requests(status="pending")
    everything = service.list_requests()

    assert [r["employee_name"] for r in pending["requests"]] == ["Mia Chen"]
    assert everything["total"] == 2


def test_list_rejects_unknown_status(service):
    with pytest.raises(ValidationError):
        service.list_requests(status="archived")


def test_list_paginates(service):
    for month in range(1, 6):
        _request(service, date(2026, month, 1), date(2026, month, 2))

    page = service.list_requests(employee_id=EMPLOYEE_ID, page=2, limit=2)

    assert page["total"] == 5
    assert [r["start_date"] for r in page["requests"]] == ["2026-03-01", "2026-02-01"]


def test_reject_then_resubmit_overlapping_request(service):
    paid = _request(service, date(2026, 1, 10), date(2026, 1, 12), leave_type="paid")

    with pytest.raises(OverlappingRequestError):
        _request(service, date(2026, 1, 11), date(2026, 1, 13), leave_type="sick")

    rejected = service.decide(paid["id"], reviewer_id=ADMIN_ID, decision="rejected", now=DECIDED_AT)
    assert rejected["status"] == "rejected"

    sick = _request(service, date(2026, 1, 11), date(2026, 1, 13), leave_type="sick")
    assert sick["status"] == "pending"
    assert sick["type"] == "sick"
