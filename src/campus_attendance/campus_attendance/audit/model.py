from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AuditKind


@dataclass(frozen=True)
class AuditEntry:
    """Append-only audit row (login/logout or a data change)."""

    id: int
    kind: AuditKind
    user_id: Optional[int]
    username: str
    role: Optional[str]
    action: str
    details: Optional[str]
    created_at: datetime
