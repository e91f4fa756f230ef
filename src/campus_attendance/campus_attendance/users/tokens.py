from __future__ import annotations

from dataclasses import dataclass

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import User


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Role


class TokenService:
    """Signed bearer tokens, same signing scheme Flask uses for its session cookie."""

    SALT = "campus-attendance-auth"

    def __init__(self, secret_key: str, *, max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS):
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self.SALT)
        self._max_age = int(max_age_seconds)

    def issue(self, user: User) -> str:
        return self._serializer.dumps({"uid": user.id, "role": user.role.value})

    def verify(self, token: str) -> TokenClaims:
        if not token:
            raise AuthenticationError("Access token required")
        try:
            data = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired:
            raise AuthenticationError("Session expired, please log in again")
        except BadSignature:
            raise AuthenticationError("Invalid access token")

        try:
            return TokenClaims(user_id=int(data["uid"]), role=Role(data["role"]))
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid access token")
