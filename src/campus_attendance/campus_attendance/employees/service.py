from __future__ import annotations

import csv
import io
import logging
from typing import Any, Mapping, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..audit.service import AuditService
from ..common.permissions import EMPLOYEE_MANAGERS, require_role
from ..common.validators import normalize_plate, require_fields
from ..core.constants import IMPORT_DEFAULT_DEPARTMENT, IMPORT_DEFAULT_POSITION
from ..core.exceptions import NotFoundError, ValidationError
from ..database.transaction import NullTransaction, TransactionManager
from ..parking.repository import ParkingRepository
from ..users.model import Actor
from .model import Employee, EmployeeFields, ImportResult
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "employee_id", "department", "position")


def parse_employee_fields(payload: Mapping[str, Any]) -> EmployeeFields:
    require_fields(payload, REQUIRED_FIELDS)
    return EmployeeFields(
        name=str(payload["name"]).strip(),
        employee_id=str(payload["employee_id"]).strip(),
        department=str(payload["department"]).strip(),
        position=str(payload["position"]).strip(),
        vehicle_plate_number=normalize_plate(payload.get("vehicle_plate_number")),
    )


class EmployeeService:
    """Use case: HR maintains the employee directory."""

    def __init__(
        self,
        employees: EmployeeRepository,
        *,
        attendance: Optional[AttendanceRepository] = None,
        parking: Optional[ParkingRepository] = None,
        audit: Optional[AuditService] = None,
        tx: Optional[TransactionManager] = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._parking = parking
        self._audit = audit
        self._tx = tx or NullTransaction()

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get_employee(self, employee_pk: int) -> Employee:
        employee = self._employees.get_by_id(employee_pk)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def create_employee(self, actor: Actor, payload: Mapping[str, Any]) -> Employee:
        require_role(actor.role, EMPLOYEE_MANAGERS)
        fields = parse_employee_fields(payload)

        new_id = self._employees.create(fields)
        self._log(actor, "Create Employee", f"Created employee: {fields.name}")
        return self.get_employee(new_id)

    def update_employee(self, actor: Actor, employee_pk: int, payload: Mapping[str, Any]) -> Employee:
        require_role(actor.role, EMPLOYEE_MANAGERS)
        fields = parse_employee_fields(payload)

        if not self._employees.update(employee_pk, fields):
            raise NotFoundError("Employee not found")
        self._log(actor, "Update Employee", f"Updated employee: {fields.name}")
        return self.get_employee(employee_pk)

    def delete_employee(self, actor: Actor, employee_pk: int) -> None:
        """Delete an employee; the store cascades to its attendance records.

        Spaces held by the employee's open plated records go back to the lot
        in the same transaction.
        """
        require_role(actor.role, EMPLOYEE_MANAGERS)

        with self._tx.transaction():
            employee = self._employees.get_by_id(employee_pk)
            if not employee:
                raise NotFoundError("Employee not found")

            self._release_spaces_of(employee)
            if not self._employees.delete_by_id(employee.id):
                raise NotFoundError("Employee not found")

        self._log(actor, "Delete Employee", f"Deleted employee: {employee.name}")

    def _release_spaces_of(self, employee: Employee) -> None:
        if self._attendance is None or self._parking is None:
            return
        config = self._parking.get_for_update()
        held = sum(1 for r in self._attendance.list_open_for_employee(employee.id) if r.holds_space)
        if not config or not held:
            return
        occupied = max(0, config.occupied_spaces - held)
        self._parking.save(config.id, total_spaces=config.total_spaces, occupied_spaces=occupied)
        logger.info("released %s parking space(s) held by deleted employee %s", held, employee.employee_id)

    def import_csv(self, actor: Actor, text: str) -> ImportResult:
        """Bulk import from ``Full Name, Email, Default Plate Number`` rows.

        The first row is a header. Rows whose name or code already exists
        (in the store or earlier in the file) are skipped, rows without a
        name or code are reported back by line number.
        """
        require_role(actor.role, EMPLOYEE_MANAGERS)
        if not text or not text.strip():
            raise ValidationError("Import file is empty")

        existing = self._employees.list_all()
        seen_names = {e.name.casefold() for e in existing}
        seen_codes = {e.employee_id.casefold() for e in existing}

        to_create: list[EmployeeFields] = []
        skipped = 0
        invalid: list[int] = []

        rows = csv.reader(io.StringIO(text.lstrip("\ufeff")))
        next(rows, None)
        for line_no, row in enumerate(rows, start=2):
            cells = [c.strip() for c in row] + ["", "", ""]
            name, code, plate = cells[0], cells[1], cells[2]
            if not any(cells):
                continue
            if not name or not code:
                invalid.append(line_no)
                continue
            if name.casefold() in seen_names or code.casefold() in seen_codes:
                skipped += 1
                continue

            seen_names.add(name.casefold())
            seen_codes.add(code.casefold())
            to_create.append(
                EmployeeFields(
                    name=name,
                    employee_id=code,
                    department=IMPORT_DEFAULT_DEPARTMENT,
                    position=IMPORT_DEFAULT_POSITION,
                    vehicle_plate_number=normalize_plate(plate),
                )
            )

        with self._tx.transaction():
            for fields in to_create:
                self._employees.create(fields)

        self._log(actor, "Bulk Import", f"Imported {len(to_create)} employees")
        return ImportResult(imported=len(to_create), skipped=skipped, invalid_rows=tuple(invalid))

    def _log(self, actor: Actor, action: str, details: str) -> None:
        if self._audit:
            self._audit.record(actor, action, details)

