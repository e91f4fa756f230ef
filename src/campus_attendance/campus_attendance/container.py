from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService, GateService
from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.repository import AuditRepository
from .audit.service import AuditService
from .core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .database.transaction import TransactionManager
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .parking.mysql_parking_repository import MySQLParkingRepository
from .parking.repository import ParkingRepository
from .parking.service import ParkingService
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    parking_repo: ParkingRepository
    audit_repo: AuditRepository

    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    gate_service: GateService
    parking_service: ParkingService
    report_service: ReportService
    audit_service: AuditService


def wire_services(
    *,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    parking_repo: ParkingRepository,
    audit_repo: AuditRepository,
    tokens: TokenService,
    tx: Optional[TransactionManager] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build every service on top of the given repositories."""
    audit_service = AuditService(audit_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        parking_repo=parking_repo,
        audit_repo=audit_repo,
        auth_service=AuthService(users_repo, tokens, audit_service),
        user_service=UserService(users_repo, audit_service),
        employee_service=EmployeeService(
            employees_repo,
            attendance=attendance_repo,
            parking=parking_repo,
            audit=audit_service,
            tx=tx,
        ),
        attendance_service=AttendanceService(attendance_repo),
        gate_service=GateService(attendance_repo, employees_repo, parking_repo, audit=audit_service, tx=tx),
        parking_service=ParkingService(parking_repo, audit=audit_service, tx=tx),
        report_service=ReportService(attendance_repo, employees_repo, parking_repo),
        audit_service=audit_service,
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        parking_repo=MySQLParkingRepository(conn),
        audit_repo=MySQLAuditRepository(conn),
        tokens=TokenService(secret_key, max_age_seconds=token_max_age_seconds),
        tx=conn,
        conn=conn,
    )
