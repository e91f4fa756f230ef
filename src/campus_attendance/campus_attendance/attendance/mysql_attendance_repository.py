from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

_COLUMNS = "id, employee_id, employee_name, date, time_in, time_out, plate_number, is_guest, guest_purpose"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]) if r.get("employee_id") is not None else None,
        employee_name=r["employee_name"],
        date=r["date"],
        time_in=normalize_mysql_time(r["time_in"]),
        time_out=normalize_mysql_time(r.get("time_out")),
        plate_number=r.get("plate_number"),
        is_guest=bool(r.get("is_guest")),
        guest_purpose=r.get("guest_purpose"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_between(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = []
        params: list[object] = []
        if start_date is not None:
            clauses.append("date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("date <= %s")
            params.append(end_date)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {where}
                ORDER BY date DESC, time_in DESC, id DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_open_for_employee(self, employee_id: int, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND date=%s AND time_out IS NULL AND is_guest=0
                ORDER BY time_in DESC
                LIMIT 1
                """,
                (int(employee_id), day),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_open_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND time_out IS NULL
                ORDER BY date DESC, time_in DESC
                """,
                (int(employee_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: NewAttendance) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, employee_name, date, time_in, plate_number, is_guest, guest_purpose
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.employee_id,
                    record.employee_name,
                    record.date,
                    record.time_in,
                    record.plate_number,
                    1 if record.is_guest else 0,
                    record.guest_purpose,
                ),
            )
            return int(cur.lastrowid)

    def set_exit_time(self, record_id: int, time_out: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET time_out=%s WHERE id=%s",
                (time_out, int(record_id)),
            )
            return cur.rowcount > 0

    def set_plate(self, record_id: int, plate_number: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET plate_number=%s WHERE id=%s",
                (plate_number, int(record_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE id=%s", (int(record_id),))
            return cur.rowcount > 0
