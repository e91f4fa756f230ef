from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeFields


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): services depend on this interface, not on a concrete DB.
    create/update raise DuplicateKeyError when ``employee_id`` is taken.
    """

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_pk: int) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, fields: EmployeeFields) -> int:
        raise NotImplementedError

    def update(self, employee_pk: int, fields: EmployeeFields) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_pk: int) -> bool:
        raise NotImplementedError
