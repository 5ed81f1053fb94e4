from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class SalaryComponents:
    """Inputs of a monthly payslip, already validated as non-negative amounts."""

    basic_salary: Decimal
    house_rent_allowance: Decimal = Decimal("0.00")
    medical_allowance: Decimal = Decimal("0.00")
    conveyance_allowance: Decimal = Decimal("0.00")
    special_allowance: Decimal = Decimal("0.00")
    provident_fund: Decimal = Decimal("0.00")
    professional_tax: Decimal = Decimal("0.00")
    income_tax: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class PayrollTotals:
    allowances: Decimal
    deductions: Decimal
    gross_salary: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class PayrollRecord:
    payroll_id: int
    user_id: int
    month: int
    year: int
    components: SalaryComponents
    totals: PayrollTotals
    status: PayrollStatus
