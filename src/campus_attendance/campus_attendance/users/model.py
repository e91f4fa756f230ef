from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: login account.

    Note: plain data object (no DB access code). ``password_hash`` never
    leaves the service layer.
    """

    id: int
    username: str
    password_hash: str
    role: Role
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Actor:
    """The authenticated caller every mutating operation is attributed to."""

    user_id: int
    username: str
    role: Role


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: str
