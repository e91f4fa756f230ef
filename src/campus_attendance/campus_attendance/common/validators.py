from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_fields(payload: Mapping[str, Any], fields: Sequence[str]) -> None:
    missing = [f for f in fields if payload.get(f) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    v = str(value).strip()
    return v or None


def normalize_plate(value: Any) -> Optional[str]:
    """Plates are stored upper-cased, blank means no plate."""
    v = optional_text(value)
    return v.upper() if v else None


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def require_bool(value: Any, field_name: str, default: bool = False) -> bool:
    """JSON flags must be real booleans; a missing flag takes the default."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise ValidationError(f"{field_name} must be true or false")
