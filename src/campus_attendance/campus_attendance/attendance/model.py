from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one visit to campus.

    ``time_out`` is None while the person is still on campus. Guests have
    no ``employee_id``; the record id is their identity for the exit.
    """

    id: int
    employee_id: Optional[int]
    employee_name: str
    date: date
    time_in: time
    time_out: Optional[time] = None
    plate_number: Optional[str] = None
    is_guest: bool = False
    guest_purpose: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.time_out is None

    @property
    def holds_space(self) -> bool:
        """An open record with a plate reserves one parking space."""
        return self.time_out is None and bool(self.plate_number)


@dataclass(frozen=True)
class NewAttendance:
    employee_name: str
    date: date
    time_in: time
    employee_id: Optional[int] = None
    plate_number: Optional[str] = None
    is_guest: bool = False
    guest_purpose: Optional[str] = None
