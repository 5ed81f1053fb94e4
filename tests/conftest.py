from __future__ import annotations

from datetime import datetime

import pytest

from dayflow.container import assemble
from dayflow.core.enums import Role
from dayflow.employees.service import EmployeeService
from dayflow.main import create_app
from tests.fakes import (
    ADMIN_ID,
    EMPLOYEE_ID,
    HR_ID,
    INACTIVE_ID,
    OTHER_EMPLOYEE_ID,
    InMemoryAttendance,
    InMemoryDashboard,
    InMemoryEmployees,
    InMemoryLeaves,
    InMemoryPayroll,
    make_employee,
)


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday
    return datetime(2026, 1, 7, 9, 0, 0)


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees(
        make_employee(ADMIN_ID, Role.ADMIN, "Ada", "Admin", department="Management"),
        make_employee(HR_ID, Role.HR, "Harriet", "Reyes", department="People"),
        make_employee(EMPLOYEE_ID, Role.EMPLOYEE, "Evan", "Park", department="Engineering"),
        make_employee(OTHER_EMPLOYEE_ID, Role.EMPLOYEE, "Mia", "Chen", department="Engineering"),
        make_employee(INACTIVE_ID, Role.EMPLOYEE, "Ike", "Gone", is_active=False),
    )


@pytest.fixture
def employee_service(employees_repo) -> EmployeeService:
    return EmployeeService(employees_repo)


@pytest.fixture
def container(employees_repo):
    attendance = InMemoryAttendance()
    leaves = InMemoryLeaves(employees_repo)
    return assemble(
        employees=employees_repo,
        attendance=attendance,
        leaves=leaves,
        payroll=InMemoryPayroll(),
        dashboard=InMemoryDashboard(employees_repo, attendance, leaves),
    )


@pytest.fixture
def app(container):
    return create_app(container, settings_module="dayflow.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(user_id: int, role: Role):
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["role"] = role.value
        return client

    return _login
