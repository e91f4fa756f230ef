from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import DuplicateKeyError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Employee, EmployeeFields
from .repository import EmployeeRepository

_COLUMNS = "id, name, employee_id, department, position, vehicle_plate_number"


def _to_employee(r: dict) -> Employee:
    return Employee(
        id=int(r["id"]),
        name=r["name"],
        employee_id=r["employee_id"],
        department=r["department"],
        position=r["position"],
        vehicle_plate_number=r.get("vehicle_plate_number"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY name ASC, id ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_pk: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (int(employee_pk),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def create(self, fields: EmployeeFields) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(name, employee_id, department, position, vehicle_plate_number)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (
                        fields.name,
                        fields.employee_id,
                        fields.department,
                        fields.position,
                        fields.vehicle_plate_number,
                    ),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateKeyError("Employee ID already exists") from e
            raise

    def update(self, employee_pk: int, fields: EmployeeFields) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE employees
                    SET name=%s, employee_id=%s, department=%s, position=%s, vehicle_plate_number=%s
                    WHERE id=%s
                    """,
                    (
                        fields.name,
                        fields.employee_id,
                        fields.department,
                        fields.position,
                        fields.vehicle_plate_number,
                        int(employee_pk),
                    ),
                )
                # rowcount is 0 when nothing changed, so confirm existence separately.
                if cur.rowcount > 0:
                    return True
                cur.execute("SELECT 1 AS found FROM employees WHERE id=%s", (int(employee_pk),))
                return fetchone(cur) is not None
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateKeyError("Employee ID already exists") from e
            raise

    def delete_by_id(self, employee_pk: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE id=%s", (int(employee_pk),))
            return cur.rowcount > 0
