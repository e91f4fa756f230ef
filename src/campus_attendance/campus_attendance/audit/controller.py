from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, json_response, make_auth_required
from ..common.validators import require_int
from ..container import Container
from ..core.constants import DEFAULT_AUDIT_LIMIT
from ..core.enums import AuditKind
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container.auth_service)

    @app.route("/audit-logs", methods=["GET"], endpoint="audit_logs")
    @auth_required
    def audit_logs():
        kind_s = request.args.get("kind")
        try:
            kind = AuditKind(kind_s) if kind_s else None
        except ValueError:
            raise ValidationError(f"Unknown audit kind: {kind_s!r}")
        limit = require_int(request.args.get("limit", DEFAULT_AUDIT_LIMIT), "limit")

        entries = container.audit_service.list_entries(current_actor(), kind=kind, limit=max(1, limit))
        return json_response(entries)
