from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.permissions import ACCOUNT_ADMINS, require_role
from ..core.constants import DEFAULT_AUDIT_LIMIT
from ..core.enums import AuditKind
from ..users.model import Actor
from .model import AuditEntry
from .repository import AuditRepository

logger = logging.getLogger(__name__)


class AuditService:
    """Append-and-list audit trail.

    Writes are best-effort: a failing insert is logged and never bubbles up
    into the operation being audited.
    """

    def __init__(self, audit: AuditRepository):
        self._audit = audit

    def record(self, actor: Actor, action: str, details: str = "") -> None:
        self._append(AuditKind.ACTION, actor, action, details)

    def record_access(self, actor: Actor, action: str) -> None:
        self._append(AuditKind.ACCESS, actor, action, None)

    def _append(self, kind: AuditKind, actor: Actor, action: str, details: Optional[str]) -> None:
        try:
            self._audit.append(
                kind=kind,
                user_id=actor.user_id,
                username=actor.username,
                role=actor.role.value,
                action=action,
                details=details or None,
            )
        except Exception:
            logger.warning("audit write failed: %s by %s", action, actor.username, exc_info=True)

    def list_entries(
        self,
        actor: Actor,
        *,
        kind: Optional[AuditKind] = None,
        limit: int = DEFAULT_AUDIT_LIMIT,
    ) -> Sequence[AuditEntry]:
        require_role(actor.role, ACCOUNT_ADMINS)
        return self._audit.list_recent(kind=kind, limit=limit)
