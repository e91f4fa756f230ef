from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.campus_attendance.campus_attendance.attendance.model import AttendanceRecord, NewAttendance
from src.campus_attendance.campus_attendance.attendance.service import AttendanceService, GateService
from src.campus_attendance.campus_attendance.audit.model import AuditEntry
from src.campus_attendance.campus_attendance.audit.service import AuditService
from src.campus_attendance.campus_attendance.core.enums import AuditKind, Role
from src.campus_attendance.campus_attendance.core.exceptions import DuplicateKeyError
from src.campus_attendance.campus_attendance.employees.model import Employee, EmployeeFields
from src.campus_attendance.campus_attendance.parking.model import ParkingConfig
from src.campus_attendance.campus_attendance.users.model import Actor, User


class FakeEmployees:
    def __init__(self):
        self._rows: dict[int, Employee] = {}
        self._next_id = 1

    def add(self, name: str, code: Optional[str] = None, *, plate: Optional[str] = None) -> Employee:
        pk = self.create(
            EmployeeFields(
                name=name,
                employee_id=code or f"{name.lower().replace(' ', '.')}@campus.edu",
                department="Engineering",
                position="Lecturer",
                vehicle_plate_number=plate,
            )
        )
        return self._rows[pk]

    def list_all(self):
        return sorted(self._rows.values(), key=lambda e: (e.name, e.id))

    def get_by_id(self, employee_pk):
        return self._rows.get(int(employee_pk))

    def create(self, fields: EmployeeFields) -> int:
        if any(e.employee_id == fields.employee_id for e in self._rows.values()):
            raise DuplicateKeyError("Employee ID already exists")
        pk = self._next_id
        self._next_id += 1
        self._rows[pk] = Employee(id=pk, **fields.__dict__)
        return pk

    def update(self, employee_pk, fields: EmployeeFields) -> bool:
        if employee_pk not in self._rows:
            return False
        if any(e.employee_id == fields.employee_id and e.id != employee_pk for e in self._rows.values()):
            raise DuplicateKeyError("Employee ID already exists")
        self._rows[employee_pk] = Employee(id=employee_pk, **fields.__dict__)
        return True

    def delete_by_id(self, employee_pk) -> bool:
        return self._rows.pop(int(employee_pk), None) is not None


class FakeAttendance:
    def __init__(self, employees: Optional[FakeEmployees] = None):
        self._rows: dict[int, AttendanceRecord] = {}
        self._next_id = 1
        self._employees = employees

    def add(self, **kwargs) -> AttendanceRecord:
        """Seed a record directly, bypassing the gate rules."""
        kwargs.setdefault("time_in", time(8, 0))
        time_out = kwargs.pop("time_out", None)
        pk = self.create(NewAttendance(**kwargs))
        if time_out is not None:
            self.set_exit_time(pk, time_out)
        return self._rows[pk]

    def all(self) -> list[AttendanceRecord]:
        return list(self._rows.values())

    def list_between(self, *, start_date=None, end_date=None):
        rows = [
            r
            for r in self._visible()
            if (start_date is None or r.date >= start_date) and (end_date is None or r.date <= end_date)
        ]
        return sorted(rows, key=lambda r: (r.date, r.time_in, r.id), reverse=True)

    def _visible(self):
        # Mirrors the ON DELETE CASCADE on employee_id.
        if self._employees is None:
            return list(self._rows.values())
        return [r for r in self._rows.values() if r.employee_id is None or self._employees.get_by_id(r.employee_id)]

    def get_by_id(self, record_id):
        rec = self._rows.get(int(record_id))
        return rec if rec in self._visible() else None

    def find_open_for_employee(self, employee_id, day):
        hits = [
            r
            for r in self._visible()
            if r.employee_id == employee_id and r.date == day and r.time_out is None and not r.is_guest
        ]
        return max(hits, key=lambda r: (r.time_in, r.id)) if hits else None

    def list_open_for_employee(self, employee_id):
        return [r for r in self._visible() if r.employee_id == employee_id and r.time_out is None]

    def create(self, record: NewAttendance) -> int:
        pk = self._next_id
        self._next_id += 1
        self._rows[pk] = AttendanceRecord(id=pk, **record.__dict__)
        return pk

    def set_exit_time(self, record_id, time_out) -> bool:
        if record_id not in self._rows:
            return False
        self._rows[record_id] = replace(self._rows[record_id], time_out=time_out)
        return True

    def set_plate(self, record_id, plate_number) -> bool:
        if record_id not in self._rows:
            return False
        self._rows[record_id] = replace(self._rows[record_id], plate_number=plate_number)
        return True

    def delete_by_id(self, record_id) -> bool:
        return self._rows.pop(int(record_id), None) is not None


class FakeParking:
    def __init__(self, total: int = 10, occupied: int = 0):
        self.config: Optional[ParkingConfig] = ParkingConfig(id=1, total_spaces=total, occupied_spaces=occupied)
        self.locks = 0

    def get(self):
        return self.config

    def get_for_update(self):
        self.locks += 1
        return self.config

    def save(self, config_id, *, total_spaces, occupied_spaces) -> bool:
        self.config = ParkingConfig(id=config_id, total_spaces=total_spaces, occupied_spaces=occupied_spaces)
        return True


class FakeUsers:
    def __init__(self):
        self._rows: dict[int, User] = {}
        self._next_id = 1

    def add(self, username: str, password: str, role: Role) -> User:
        pk = self.create_user(username=username, password_hash=generate_password_hash(password), role=role)
        return self._rows[pk]

    def get_by_id(self, user_id):
        return self._rows.get(int(user_id))

    def get_by_username(self, username):
        return next((u for u in self._rows.values() if u.username == username), None)

    def list_all(self):
        return sorted(self._rows.values(), key=lambda u: u.username)

    def create_user(self, *, username, password_hash, role) -> int:
        if self.get_by_username(username):
            raise DuplicateKeyError("Username already exists")
        pk = self._next_id
        self._next_id += 1
        self._rows[pk] = User(id=pk, username=username, password_hash=password_hash, role=role)
        return pk

    def update_password(self, user_id, *, password_hash) -> bool:
        if user_id not in self._rows:
            return False
        self._rows[user_id] = replace(self._rows[user_id], password_hash=password_hash)
        return True

    def delete_by_id(self, user_id) -> bool:
        return self._rows.pop(int(user_id), None) is not None


class FakeAudit:
    def __init__(self):
        self.entries: list[AuditEntry] = []
        self.broken = False

    def append(self, *, kind, user_id, username, role, action, details=None) -> int:
        if self.broken:
            raise RuntimeError("audit table unavailable")
        entry = AuditEntry(
            id=len(self.entries) + 1,
            kind=kind,
            user_id=user_id,
            username=username,
            role=role,
            action=action,
            details=details,
            created_at=datetime(2026, 3, 18, 9, 0, 0),
        )
        self.entries.append(entry)
        return entry.id

    def list_recent(self, *, kind: Optional[AuditKind] = None, limit: int = 200):
        rows = [e for e in reversed(self.entries) if kind is None or e.kind == kind]
        return rows[:limit]

    def actions(self) -> list[str]:
        return [e.action for e in self.entries]


class FakeTx:
    def __init__(self):
        self.opened = 0

    @contextmanager
    def transaction(self):
        self.opened += 1
        yield


@pytest.fixture
def now() -> datetime:
    # A Wednesday, mid-month.
    return datetime(2026, 3, 18, 9, 30, 0)


@pytest.fixture
def today(now) -> date:
    return now.date()


@pytest.fixture
def employees():
    return FakeEmployees()


@pytest.fixture
def attendance(employees):
    return FakeAttendance(employees)


@pytest.fixture
def parking():
    return FakeParking(total=10, occupied=0)


@pytest.fixture
def users():
    return FakeUsers()


@pytest.fixture
def audit_repo():
    return FakeAudit()


@pytest.fixture
def tx():
    return FakeTx()


@pytest.fixture
def audit(audit_repo):
    return AuditService(audit_repo)


@pytest.fixture
def gate(attendance, employees, parking, audit, tx):
    return GateService(attendance, employees, parking, audit=audit, tx=tx)


@pytest.fixture
def records(attendance):
    return AttendanceService(attendance)


def _actor(user_id: int, role: Role) -> Actor:
    return Actor(user_id=user_id, username=role.value, role=role)


@pytest.fixture
def admin() -> Actor:
    return _actor(1, Role.ADMIN)


@pytest.fixture
def hr() -> Actor:
    return _actor(2, Role.HR)


@pytest.fixture
def security() -> Actor:
    return _actor(3, Role.SECURITY)


@pytest.fixture
def dean() -> Actor:
    return _actor(4, Role.DEAN)
