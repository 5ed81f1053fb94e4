from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role

UNKNOWN_NAME = "Unknown"

# Profile fields an employee may edit on their own record.
EDITABLE_PROFILE_FIELDS = ("first_name", "last_name", "phone", "address", "department", "position")


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee account with its profile.

    Note: Plain data object, no DB access code here.
    """

    user_id: int
    employee_code: str
    email: str
    password_hash: str
    role: Role
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool = True
    phone: Optional[str] = None
    address: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None

    @property
    def display_name(self) -> str:
        return full_name(self.first_name, self.last_name)


def full_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    name = " ".join(part for part in (first_name, last_name) if part)
    return name or UNKNOWN_NAME
