from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendance


class AttendanceRepository(Protocol):
    def list_between(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest first: date DESC, time_in DESC."""

        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_open_for_employee(self, employee_id: int, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_open_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        """Every open record of the employee, whatever the date."""
        raise NotImplementedError

    def create(self, record: NewAttendance) -> int:
        raise NotImplementedError

    def set_exit_time(self, record_id: int, time_out: time) -> bool:
        raise NotImplementedError

    def set_plate(self, record_id: int, plate_number: Optional[str]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, record_id: int) -> bool:
        raise NotImplementedError
