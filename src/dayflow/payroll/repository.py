from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollRecord, PayrollTotals, SalaryComponents


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        month: int,
        year: int,
        components: SalaryComponents,
        totals: PayrollTotals,
    ) -> Optional[int]:
        """Insert a PENDING record. Returns None if (user, month, year) already exists."""

        raise NotImplementedError

    def list_records(
        self,
        *,
        user_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        limit: int = 12,
        offset: int = 0,
    ) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def count_records(
        self,
        *,
        user_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def update_status(self, *, payroll_id: int, status: PayrollStatus) -> bool:
        raise NotImplementedError
