from __future__ import annotations

from functools import wraps
from typing import Any

from flask import g, jsonify, request

from ..core.exceptions import AuthenticationError, ValidationError
from ..users.model import Actor
from .serializers import to_json


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Access token required")
    return token.strip()


def make_auth_required(auth_service):
    """Build a view decorator that resolves the bearer token into ``g.actor``."""

    def auth_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.actor = auth_service.verify_token(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    return auth_required


def current_actor() -> Actor:
    actor = g.get("actor")
    if actor is None:
        raise AuthenticationError("Access token required")
    return actor


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def json_response(value: Any, status: int = 200):
    return jsonify(to_json(value)), status


def message(text: str, status: int = 200):
    return jsonify({"message": text}), status


def csv_attachment(app, text: str, *, filename: str):
    return app.response_class(
        text.encode("utf-8-sig"),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
