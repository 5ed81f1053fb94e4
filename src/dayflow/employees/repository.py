from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_employees(self, *, search: Optional[str] = None, limit: int = 10, offset: int = 0) -> Sequence[Employee]:
        """Employees and HR staff ordered by first name; admins are not listed."""

        raise NotImplementedError

    def count_employees(self, *, search: Optional[str] = None) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, changes: Mapping[str, Optional[str]]) -> bool:
        """Write the given profile columns. Callers pass only editable fields."""

        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
