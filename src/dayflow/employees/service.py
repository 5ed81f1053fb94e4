from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from werkzeug.security import check_password_hash

from ..common.pagination import PageRequest
from ..common.validators import optional_text, require_max_length, require_non_empty
from ..core.constants import DEFAULT_EMPLOYEE_PAGE_SIZE
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, UnauthorizedError, ValidationError
from .model import EDITABLE_PROFILE_FIELDS, UNKNOWN_NAME, Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_STATUSES = {"active": True, "inactive": False}
_REQUIRED_PROFILE_FIELDS = frozenset({"first_name", "last_name"})
_MAX_PROFILE_LENGTHS = {"phone": 30, "address": 1000}


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    display_name: str
    email: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, email: str, password: str) -> SessionUser:
        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthenticationError()

        employee = self._employees.get_by_email(email.strip().lower())
        if not employee or not employee.is_active:
            raise AuthenticationError()

        try:
            ok = check_password_hash(employee.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("Failed login for user_id=%s", employee.user_id)
            raise AuthenticationError()

        return SessionUser(
            user_id=employee.user_id,
            display_name=employee.display_name,
            email=employee.email,
            role=employee.role,
        )


class EmployeeService:
    """Identity checks used by the attendance and leave engines, plus profile management."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def require_active(self, employee_id: Optional[int]) -> Employee:
        if not employee_id:
            raise UnauthorizedError()

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        if not employee.is_active:
            raise UnauthorizedError("Account is not active")
        return employee

    def display_name_for(self, employee_id: int) -> str:
        employee = self._employees.get_by_id(int(employee_id))
        return employee.display_name if employee else UNKNOWN_NAME

    def profile(self, employee_id: int) -> dict:
        return self._to_view(self.require_active(employee_id))

    def get_employee(self, employee_id: int) -> dict:
        return self._to_view(self._load(employee_id))

    def update_profile(self, employee_id: int, changes: Mapping[str, object]) -> dict:
        employee = self.require_active(employee_id)

        unknown = set(changes) - set(EDITABLE_PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

        cleaned: dict[str, Optional[str]] = {}
        for name in EDITABLE_PROFILE_FIELDS:
            if name not in changes:
                continue
            label = name.replace("_", " ").capitalize()
            if name in _REQUIRED_PROFILE_FIELDS:
                value = require_non_empty(changes[name], label)
            else:
                value = optional_text(changes[name], label)
            if value is not None:
                require_max_length(value, label, _MAX_PROFILE_LENGTHS.get(name, 100))
            cleaned[name] = value

        if not cleaned:
            return self._to_view(employee)

        self._employees.update_profile(employee.user_id, cleaned)
        logger.info("user_id=%s updated profile fields %s", employee.user_id, ", ".join(sorted(cleaned)))
        return self._to_view(self._load(employee.user_id))

    def list_employees(
        self,
        *,
        page: int | None = 1,
        limit: int | None = DEFAULT_EMPLOYEE_PAGE_SIZE,
        search: str | None = None,
    ) -> dict:
        search = optional_text(search, "Search")
        paging = PageRequest.of(page, limit, default_limit=DEFAULT_EMPLOYEE_PAGE_SIZE)
        rows = self._employees.list_employees(search=search, limit=paging.limit, offset=paging.offset)
        total = self._employees.count_employees(search=search)
        return {
            "employees": [self._to_view(e) for e in rows],
            "total": total,
            "page": paging.page,
            "limit": paging.limit,
        }

    def update_status(self, employee_id: int, status: str, *, actor_id: int) -> dict:
        if not isinstance(status, str) or status not in _STATUSES:
            raise ValidationError('Status must be "active" or "inactive"')
        is_active = _STATUSES[status]

        employee = self._load(employee_id)
        if not is_active and employee.user_id == int(actor_id):
            raise ValidationError("You cannot deactivate your own account")

        self._employees.set_active(employee.user_id, is_active=is_active)
        logger.info("user_id=%s set to %s by user_id=%s", employee.user_id, status, actor_id)
        return self._to_view(self._load(employee.user_id))

    def _load(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    @staticmethod
    def _to_view(e: Employee) -> dict:
        return {
            "id": e.user_id,
            "employee_code": e.employee_code,
            "email": e.email,
            "role": e.role.value,
            "name": e.display_name,
            "first_name": e.first_name,
            "last_name": e.last_name,
            "phone": e.phone,
            "address": e.address,
            "department": e.department,
            "position": e.position,
            "status": "active" if e.is_active else "inactive",
        }
