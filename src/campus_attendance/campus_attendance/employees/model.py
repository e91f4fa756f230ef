from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: a permanent staff member.

    ``employee_id`` is the external code (usually the e-mail address), ``id``
    is the store key referenced by attendance records.
    """

    id: int
    name: str
    employee_id: str
    department: str
    position: str
    vehicle_plate_number: Optional[str] = None


@dataclass(frozen=True)
class EmployeeFields:
    """Writable columns for create/update."""

    name: str
    employee_id: str
    department: str
    position: str
    vehicle_plate_number: Optional[str] = None


@dataclass(frozen=True)
class ImportResult:
    imported: int
    skipped: int
    invalid_rows: tuple[int, ...] = ()
