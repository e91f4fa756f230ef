from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..audit.service import AuditService
from ..common.datetime_utils import now_local, parse_clock, parse_iso_date
from ..common.permissions import GATE_OPERATORS, RECORD_EDITORS, require_role
from ..common.validators import (
    normalize_plate,
    optional_text,
    require_bool,
    require_fields,
    require_int,
    require_non_empty,
)
from ..core.exceptions import (
    AlreadyCheckedOutError,
    InsufficientParkingError,
    NotFoundError,
    ParkingFullError,
    ValidationError,
)
from ..database.transaction import NullTransaction, TransactionManager
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..parking.model import ParkingConfig
from ..parking.repository import ParkingRepository
from ..users.model import Actor
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Arrival:
    """One employee in an entry batch.

    ``plate_number`` overrides the employee's default plate when given.
    """

    employee_id: int
    has_car: bool = False
    plate_number: Optional[str] = None


@dataclass(frozen=True)
class EntryResult:
    records: tuple[AttendanceRecord, ...]
    spaces_used: int


@dataclass(frozen=True)
class ExitFailure:
    employee_id: int
    employee_name: Optional[str]
    reason: str


@dataclass(frozen=True)
class ExitResult:
    closed: tuple[AttendanceRecord, ...]
    failures: tuple[ExitFailure, ...]
    spaces_freed: int


class AttendanceService:
    """Record-level access to attendance rows (listing and direct edits)."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def list_records(self, *, start_date: Optional[date] = None, end_date: Optional[date] = None):
        if start_date and end_date and end_date < start_date:
            raise ValidationError("endDate must be on or after startDate")
        return self._attendance.list_between(start_date=start_date, end_date=end_date)

    def get_record(self, record_id: int) -> AttendanceRecord:
        rec = self._attendance.get_by_id(record_id)
        if not rec:
            raise NotFoundError("Attendance record not found")
        return rec


class GateService:
    """Entry/exit rules keeping attendance rows and parking occupancy in step.

    Every public method runs inside one transaction that locks the parking
    row, so the occupancy change commits together with the attendance rows
    it belongs to.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        parking: ParkingRepository,
        *,
        audit: Optional[AuditService] = None,
        tx: Optional[TransactionManager] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._parking = parking
        self._audit = audit
        self._tx = tx or NullTransaction()

    def _locked_config(self) -> ParkingConfig:
        config = self._parking.get_for_update()
        if not config:
            raise NotFoundError("Parking config not found")
        return config

    def _set_occupied(self, config: ParkingConfig, occupied: int) -> None:
        occupied = max(0, occupied)
        self._parking.save(config.id, total_spaces=config.total_spaces, occupied_spaces=occupied)
        logger.info("parking occupancy %s -> %s/%s", config.occupied_spaces, occupied, config.total_spaces)

    def _release_space(self) -> None:
        config = self._locked_config()
        self._set_occupied(config, config.occupied_spaces - 1)

    def mark_entry(self, actor: Actor, arrivals: Sequence[Arrival], *, now: Optional[datetime] = None) -> EntryResult:
        """Mark entry for a batch of employees, all or nothing.

        An employee who already has an open record today keeps it (only the
        plate is refreshed). The batch is rejected before any write when it
        needs more parking spaces than are free.
        """
        require_role(actor.role, GATE_OPERATORS)
        if not arrivals:
            raise ValidationError("Please select at least one employee")
        ids = [int(a.employee_id) for a in arrivals]
        if len(set(ids)) != len(ids):
            raise ValidationError("The same employee was selected twice")

        now = now or now_local()
        today = now.date()

        with self._tx.transaction():
            config = self._locked_config()

            plans: list[tuple[Employee, Optional[str], Optional[AttendanceRecord]]] = []
            spaces_needed = 0
            for arrival in arrivals:
                employee = self._employees.get_by_id(arrival.employee_id)
                if not employee:
                    raise NotFoundError(f"Employee {arrival.employee_id} not found")

                plate = None
                if arrival.has_car:
                    plate = normalize_plate(arrival.plate_number) or employee.vehicle_plate_number
                    if not plate:
                        raise ValidationError(f"{employee.name} is missing plate number")

                open_record = self._attendance.find_open_for_employee(employee.id, today)
                if plate and (open_record is None or not open_record.plate_number):
                    spaces_needed += 1
                plans.append((employee, plate, open_record))

            available = config.total_spaces - config.occupied_spaces
            if spaces_needed > available:
                logger.info("entry batch rejected: need %s spaces, %s free", spaces_needed, available)
                raise InsufficientParkingError(
                    f"Not enough parking spaces. Need {spaces_needed}, only {max(0, available)} available"
                )

            records = []
            for employee, plate, open_record in plans:
                if open_record:
                    if plate and plate != open_record.plate_number:
                        self._attendance.set_plate(open_record.id, plate)
                    record_id = open_record.id
                else:
                    record_id = self._attendance.create(
                        NewAttendance(
                            employee_id=employee.id,
                            employee_name=employee.name,
                            date=today,
                            time_in=now.time(),
                            plate_number=plate,
                        )
                    )
                records.append(self._attendance.get_by_id(record_id))

            if spaces_needed:
                self._set_occupied(config, config.occupied_spaces + spaces_needed)

        self._log(actor, "Mark Entry", f"Marked entry for {len(records)} employee(s)")
        return EntryResult(records=tuple(records), spaces_used=spaces_needed)

    def mark_exit(self, actor: Actor, employee_ids: Sequence[int], *, now: Optional[datetime] = None) -> ExitResult:
        """Close today's open record for each employee, best effort per employee."""
        require_role(actor.role, GATE_OPERATORS)
        if not employee_ids:
            raise ValidationError("Please select at least one employee")

        now = now or now_local()
        today = now.date()

        closed: list[AttendanceRecord] = []
        failures: list[ExitFailure] = []
        freed = 0

        with self._tx.transaction():
            config = self._locked_config()

            for employee_id in employee_ids:
                employee = self._employees.get_by_id(int(employee_id))
                if not employee:
                    failures.append(ExitFailure(int(employee_id), None, "employee not found"))
                    continue

                record = self._attendance.find_open_for_employee(employee.id, today)
                if not record:
                    failures.append(ExitFailure(employee.id, employee.name, "no active entry"))
                    continue

                self._attendance.set_exit_time(record.id, now.time())
                if record.plate_number:
                    freed += 1
                closed.append(self._attendance.get_by_id(record.id))

            if freed:
                self._set_occupied(config, config.occupied_spaces - freed)

        self._log(actor, "Mark Exit", f"Marked exit for {len(closed)} employee(s), {len(failures)} failed")
        return ExitResult(closed=tuple(closed), failures=tuple(failures), spaces_freed=freed)

    def mark_guest_entry(
        self,
        actor: Actor,
        *,
        name: str,
        plate_number: Optional[str] = None,
        purpose: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        require_role(actor.role, GATE_OPERATORS)
        name = require_non_empty(name, "Guest name")
        plate = normalize_plate(plate_number)
        now = now or now_local()

        with self._tx.transaction():
            config = None
            if plate:
                config = self._locked_config()
                if config.is_full:
                    raise ParkingFullError("No parking spaces available")

            record_id = self._attendance.create(
                NewAttendance(
                    employee_name=name,
                    date=now.date(),
                    time_in=now.time(),
                    plate_number=plate,
                    is_guest=True,
                    guest_purpose=optional_text(purpose),
                )
            )
            if config:
                self._set_occupied(config, config.occupied_spaces + 1)

        self._log(actor, "Guest Entry", f"Guest entry marked for {name}")
        return self._attendance.get_by_id(record_id)

    def mark_guest_exit(self, actor: Actor, record_id: Any, *, now: Optional[datetime] = None) -> AttendanceRecord:
        require_role(actor.role, GATE_OPERATORS)
        if record_id in (None, ""):
            raise ValidationError("Please select a guest")
        record_id = require_int(record_id, "guest id")
        now = now or now_local()

        with self._tx.transaction():
            record = self._attendance.get_by_id(record_id)
            if not record or not record.is_guest:
                raise NotFoundError("Guest record not found")
            if record.time_out is not None:
                raise AlreadyCheckedOutError("Guest has already checked out")

            self._attendance.set_exit_time(record.id, now.time())
            if record.plate_number:
                self._release_space()

        self._log(actor, "Guest Exit", f"Exit marked for {record.employee_name}")
        return self._attendance.get_by_id(record_id)

    def create_record(self, actor: Actor, payload: Mapping[str, Any]) -> AttendanceRecord:
        """Insert a record as given; a plated record still takes a space."""
        require_role(actor.role, GATE_OPERATORS)
        require_fields(payload, ("employee_name", "date", "time_in"))

        employee_id = payload.get("employee_id")
        new = NewAttendance(
            employee_id=require_int(employee_id, "employee_id") if employee_id not in (None, "") else None,
            employee_name=str(payload["employee_name"]).strip(),
            date=parse_iso_date(str(payload["date"])),
            time_in=parse_clock(str(payload["time_in"])),
            plate_number=normalize_plate(payload.get("plate_number")),
            is_guest=require_bool(payload.get("is_guest"), "is_guest"),
            guest_purpose=optional_text(payload.get("guest_purpose")),
        )

        with self._tx.transaction():
            config = None
            if new.plate_number:
                config = self._locked_config()
                if config.is_full:
                    raise ParkingFullError("No parking spaces available")
            if new.employee_id is not None and not self._employees.get_by_id(new.employee_id):
                raise NotFoundError("Employee not found")
            if not new.is_guest and new.employee_id is not None:
                if self._attendance.find_open_for_employee(new.employee_id, new.date):
                    raise ValidationError(f"{new.employee_name} is already on campus")

            record_id = self._attendance.create(new)
            if config:
                self._set_occupied(config, config.occupied_spaces + 1)

        return self._attendance.get_by_id(record_id)

    def set_exit_time(self, actor: Actor, record_id: int, time_out: Any) -> AttendanceRecord:
        """Direct exit edit; closing an open plated record frees its space."""
        require_role(actor.role, GATE_OPERATORS)
        if time_out in (None, ""):
            raise ValidationError("time_out is required")
        clock = parse_clock(str(time_out))

        with self._tx.transaction():
            record = self._attendance.get_by_id(record_id)
            if not record:
                raise NotFoundError("Attendance record not found")

            self._attendance.set_exit_time(record.id, clock)
            if record.holds_space:
                self._release_space()

        return self._attendance.get_by_id(record_id)

    def delete_record(self, actor: Actor, record_id: int) -> None:
        require_role(actor.role, RECORD_EDITORS)

        with self._tx.transaction():
            record = self._attendance.get_by_id(record_id)
            if not record:
                raise NotFoundError("Attendance record not found")
            if record.holds_space:
                self._release_space()
            self._attendance.delete_by_id(record.id)

        self._log(
            actor,
            "Delete Attendance",
            f"Deleted attendance record for {record.employee_name} on {record.date:%Y-%m-%d}",
        )

    def _log(self, actor: Actor, action: str, details: str) -> None:
        if self._audit:
            self._audit.record(actor, action, details)
