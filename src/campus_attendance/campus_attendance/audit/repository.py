from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AuditKind
from .model import AuditEntry


class AuditRepository(Protocol):
    def append(
        self,
        *,
        kind: AuditKind,
        user_id: Optional[int],
        username: str,
        role: Optional[str],
        action: str,
        details: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_recent(self, *, kind: Optional[AuditKind] = None, limit: int = 200) -> Sequence[AuditEntry]:
        raise NotImplementedError
