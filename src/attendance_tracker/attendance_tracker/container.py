from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import ClosingStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .companies.mysql_company_repository import MySQLCompanyRepository
from .companies.repository import CompanyRepository
from .core.constants import (
    CAS_ATTEMPTS,
    DEFAULT_UTC_OFFSET,
    RECONCILE_LOOKBACK_DAYS,
    RECONCILE_RECORD_ATTEMPTS,
    SIGN_IN_GRACE_MINUTES,
)
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .reconciler.service import AutoSignOutReconciler
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_repo: AttendanceRepository
    employees_repo: EmployeeRepository
    companies_repo: CompanyRepository
    leave_repo: LeaveRepository

    attendance_service: AttendanceService
    leave_service: LeaveService
    report_service: AttendanceReportService
    reconciler: AutoSignOutReconciler


def build_services(
    *,
    attendance_repo: AttendanceRepository,
    employees_repo: EmployeeRepository,
    companies_repo: CompanyRepository,
    leave_repo: LeaveRepository,
    conn: Optional[DatabaseConnection] = None,
    grace_minutes: int = SIGN_IN_GRACE_MINUTES,
    cas_attempts: int = CAS_ATTEMPTS,
    lookback_days: int = RECONCILE_LOOKBACK_DAYS,
    record_attempts: int = RECONCILE_RECORD_ATTEMPTS,
) -> Container:
    """Wire services on top of any repository implementations (MySQL or in-memory)."""
    strategy_factory = ClosingStrategyFactory()
    leave_service = LeaveService(leave_repo, employees_repo, attendance_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        companies_repo,
        leave_service,
        strategy_factory=strategy_factory,
        grace_minutes=grace_minutes,
        cas_attempts=cas_attempts,
    )
    report_service = AttendanceReportService(attendance_repo, employees_repo, companies_repo)
    reconciler = AutoSignOutReconciler(
        companies_repo,
        employees_repo,
        attendance_repo,
        strategy_factory=strategy_factory,
        lookback_days=lookback_days,
        record_attempts=record_attempts,
    )

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        employees_repo=employees_repo,
        companies_repo=companies_repo,
        leave_repo=leave_repo,
        attendance_service=attendance_service,
        leave_service=leave_service,
        report_service=report_service,
        reconciler=reconciler,
    )


def build_container(*, db_config: dict, default_utc_offset: str = DEFAULT_UTC_OFFSET, **options) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        companies_repo=MySQLCompanyRepository(conn, default_utc_offset=default_utc_offset),
        leave_repo=MySQLLeaveRepository(conn),
        conn=conn,
        **options,
    )
