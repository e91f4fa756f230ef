from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AuditKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(kind, user_id, username, role, action, details)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (kind.value, user_id, username, role, action, details),
            )
            return int(cur.lastrowid)

    def list_recent(self, *, kind: Optional[AuditKind] = None, limit: int = 200) -> Sequence[AuditEntry]:
        clauses = []
        params: list[object] = []
        if kind is not None:
            clauses.append("kind=%s")
            params.append(kind.value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, kind, user_id, username, role, action, details, created_at
                FROM audit_logs
                {where}
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [
                AuditEntry(
                    id=int(r["id"]),
                    kind=AuditKind(r["kind"]),
                    user_id=r.get("user_id"),
                    username=r["username"],
                    role=r.get("role"),
                    action=r["action"],
                    details=r.get("details"),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]
