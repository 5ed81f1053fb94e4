from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .dashboard.mysql_dashboard_repository import MySQLDashboardRepository
from .dashboard.repository import DashboardRepository
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    payroll_repo: PayrollRepository
    dashboard_repo: DashboardRepository

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = None

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()


def assemble(
    *,
    employees: EmployeeRepository,
    attendance: AttendanceRepository,
    leaves: LeaveRepository,
    payroll: PayrollRepository,
    dashboard: DashboardRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    employee_service = EmployeeService(employees)
    return Container(
        employees_repo=employees,
        attendance_repo=attendance,
        leaves_repo=leaves,
        payroll_repo=payroll,
        dashboard_repo=dashboard,
        auth_service=AuthService(employees),
        employee_service=employee_service,
        attendance_service=AttendanceService(
            attendance,
            employee_service,
            strategy_factory=AttendanceStrategyFactory(),
        ),
        leave_service=LeaveService(leaves, employee_service),
        payroll_service=PayrollService(payroll, employee_service),
        dashboard_service=DashboardService(dashboard),
        conn=conn,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return assemble(
        employees=MySQLEmployeeRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        leaves=MySQLLeaveRepository(conn),
        payroll=MySQLPayrollRepository(conn),
        dashboard=MySQLDashboardRepository(conn),
        conn=conn,
    )
