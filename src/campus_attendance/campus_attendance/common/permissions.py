from __future__ import annotations

from ..core.enums import Role
from ..core.exceptions import AuthorizationError

# Which roles may perform which group of operations.
EMPLOYEE_MANAGERS = frozenset({Role.ADMIN, Role.HR})
GATE_OPERATORS = frozenset({Role.ADMIN, Role.SECURITY, Role.HR})
RECORD_EDITORS = frozenset({Role.ADMIN, Role.HR})
PARKING_EDITORS = frozenset({Role.ADMIN, Role.SECURITY})
REPORT_VIEWERS = frozenset({Role.ADMIN, Role.HR, Role.DEAN})
ACCOUNT_ADMINS = frozenset({Role.ADMIN})


def require_role(role: Role, allowed: frozenset) -> None:
    if role not in allowed:
        raise AuthorizationError("You do not have permission for this action")
