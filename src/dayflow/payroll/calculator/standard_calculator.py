from __future__ import annotations

from decimal import Decimal

from ..model import PayrollTotals, SalaryComponents
from .base import PayrollCalculator

CENTS = Decimal("0.01")


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: gross = basic + allowances, net = gross - (PF + professional tax + income tax)."""

    def totals(self, components: SalaryComponents) -> PayrollTotals:
        allowances = (
            components.house_rent_allowance
            + components.medical_allowance
            + components.conveyance_allowance
            + components.special_allowance
        )
        deductions = components.provident_fund + components.professional_tax + components.income_tax
        gross = components.basic_salary + allowances
        return PayrollTotals(
            allowances=allowances.quantize(CENTS),
            deductions=deductions.quantize(CENTS),
            gross_salary=gross.quantize(CENTS),
            net_salary=(gross - deductions).quantize(CENTS),
        )
