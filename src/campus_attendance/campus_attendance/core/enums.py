from __future__ import annotations

from enum import Enum

from .exceptions import ValidationError


class Role(str, Enum):
    """Account roles used for authorization."""

    ADMIN = "admin"
    SECURITY = "security"
    HR = "hr"
    DEAN = "dean"

    @classmethod
    def parse(cls, value: str) -> "Role":
        """Map a client supplied role string onto the closed enum.

        Older clients send ``superadmin`` for the admin account.
        """
        key = (value or "").strip().lower()
        key = _ROLE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValidationError(f"Unknown role: {value!r}")


_ROLE_ALIASES = {
    "superadmin": "admin",
    "super_admin": "admin",
}


class AuditKind(str, Enum):
    """Audit log streams."""

    ACCESS = "access"
    ACTION = "action"


class PresenceBand(str, Enum):
    """Monthly presence banding for the per-employee ranking."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    LOW = "Low"
