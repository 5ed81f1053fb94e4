from __future__ import annotations

import logging
from typing import Optional

from ..common.pagination import PageRequest
from ..common.validators import require_enum, require_non_negative_amount
from ..core.constants import DEFAULT_PAYROLL_PAGE_SIZE
from ..core.enums import PayrollStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.service import EmployeeService
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollRecord, SalaryComponents
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

COMPONENT_FIELDS = (
    "house_rent_allowance",
    "medical_allowance",
    "conveyance_allowance",
    "special_allowance",
    "provident_fund",
    "professional_tax",
    "income_tax",
)


def _require_period(month, year) -> tuple[int, int]:
    try:
        month, year = int(month), int(year)
    except (TypeError, ValueError):
        raise ValidationError("Month and year must be numbers")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if not 1900 <= year <= 9999:
        raise ValidationError("Year is out of range")
    return month, year


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeService,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        page: int | None = 1,
        limit: int | None = DEFAULT_PAYROLL_PAGE_SIZE,
    ) -> dict:
        paging = PageRequest.of(page, limit, default_limit=DEFAULT_PAYROLL_PAGE_SIZE)
        rows = self._payroll.list_records(
            user_id=employee_id,
            month=month,
            year=year,
            limit=paging.limit,
            offset=paging.offset,
        )
        total = self._payroll.count_records(user_id=employee_id, month=month, year=year)
        return {
            "records": [self._to_view(r) for r in rows],
            "total": total,
            "page": paging.page,
            "limit": paging.limit,
        }

    def create_record(self, *, employee_id: int, month, year, basic_salary, **amounts) -> dict:
        unknown = set(amounts) - set(COMPONENT_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown salary components: {', '.join(sorted(unknown))}")
        if not employee_id:
            raise ValidationError("employee_id is required")
        if basic_salary in (None, ""):
            raise ValidationError("basic_salary is required")

        self._employees.require_active(employee_id)
        month, year = _require_period(month, year)

        components = SalaryComponents(
            basic_salary=require_non_negative_amount(basic_salary, "basic_salary"),
            **{name: require_non_negative_amount(amounts.get(name), name) for name in COMPONENT_FIELDS},
        )
        totals = self._calculator.totals(components)

        payroll_id = self._payroll.create(
            user_id=int(employee_id),
            month=month,
            year=year,
            components=components,
            totals=totals,
        )
        if payroll_id is None:
            raise ConflictError("Payroll record already exists for this month and year")

        logger.info("Payroll %s created for user_id=%s %02d/%s net=%s", payroll_id, employee_id, month, year, totals.net_salary)
        return self._to_view(self._load(payroll_id))

    def update_status(self, payroll_id: int, status: PayrollStatus | str) -> dict:
        status = require_enum(PayrollStatus, status, "Status")
        self._load(payroll_id)
        self._payroll.update_status(payroll_id=int(payroll_id), status=status)
        logger.info("Payroll %s marked %s", payroll_id, status.value)
        return self._to_view(self._load(payroll_id))

    def _load(self, payroll_id: int) -> PayrollRecord:
        record = self._payroll.get_by_id(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll record not found")
        return record

    @staticmethod
    def _to_view(r: PayrollRecord) -> dict:
        c, t = r.components, r.totals
        return {
            "id": r.payroll_id,
            "employee_id": r.user_id,
            "month": r.month,
            "year": r.year,
            "basic_salary": float(c.basic_salary),
            "house_rent_allowance": float(c.house_rent_allowance),
            "medical_allowance": float(c.medical_allowance),
            "conveyance_allowance": float(c.conveyance_allowance),
            "special_allowance": float(c.special_allowance),
            "provident_fund": float(c.provident_fund),
            "professional_tax": float(c.professional_tax),
            "income_tax": float(c.income_tax),
            "allowances": float(t.allowances),
            "deductions": float(t.deductions),
            "gross_salary": float(t.gross_salary),
            "net_salary": float(t.net_salary),
            "status": r.status.value,
        }
