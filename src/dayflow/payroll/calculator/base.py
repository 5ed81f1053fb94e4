from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import PayrollTotals, SalaryComponents


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def totals(self, components: SalaryComponents) -> PayrollTotals:
        raise NotImplementedError
