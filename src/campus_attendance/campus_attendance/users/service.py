from __future__ import annotations

from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..audit.service import AuditService
from ..common.permissions import ACCOUNT_ADMINS, require_role
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, DuplicateKeyError, NotFoundError, ValidationError
from .model import Actor, LoginResult, User
from .repository import UserRepository
from .tokens import TokenService


class AuthService:
    """Use case: authenticate user (login) and resolve bearer tokens."""

    def __init__(self, users: UserRepository, tokens: TokenService, audit: Optional[AuditService] = None):
        self._users = users
        self._tokens = tokens
        self._audit = audit

    def login(self, username: str, password: str) -> LoginResult:
        user = self._users.get_by_username((username or "").strip())
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except Exception:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        if self._audit:
            self._audit.record_access(_actor_of(user), "login")
        return LoginResult(user=user, token=self._tokens.issue(user))

    def logout(self, actor: Actor) -> None:
        if self._audit:
            self._audit.record_access(actor, "logout")

    def verify_token(self, token: str) -> Actor:
        claims = self._tokens.verify(token)
        # Deleted accounts lose access immediately; the role comes from the store.
        user = self._users.get_by_id(claims.user_id)
        if not user:
            raise AuthenticationError("Account no longer exists")
        return _actor_of(user)


class UserService:
    """Use case: manage accounts (admin only)."""

    def __init__(self, users: UserRepository, audit: Optional[AuditService] = None):
        self._users = users
        self._audit = audit

    def list_users(self, actor: Actor) -> Sequence[User]:
        require_role(actor.role, ACCOUNT_ADMINS)
        return self._users.list_all()

    def create_user(self, actor: Actor, *, username: str, password: str, role: Role | str) -> User:
        require_role(actor.role, ACCOUNT_ADMINS)

        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = role if isinstance(role, Role) else Role.parse(role)

        if self._users.get_by_username(username):
            raise DuplicateKeyError("Username already exists")

        user_id = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
        )
        self._log(actor, "Create User", f"Created {role.value} user: {username}")
        return self._users.get_by_id(user_id)

    def reset_password(self, actor: Actor, user_id: int, new_password: str) -> User:
        require_role(actor.role, ACCOUNT_ADMINS)
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        self._users.update_password(user.id, password_hash=generate_password_hash(new_password))
        self._log(actor, "Reset Password", f"Reset password for user: {user.username}")
        return self._users.get_by_id(user.id)

    def delete_user(self, actor: Actor, user_id: int) -> None:
        require_role(actor.role, ACCOUNT_ADMINS)

        if int(user_id) == actor.user_id:
            raise ValidationError("Cannot delete your own account")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not self._users.delete_by_id(user.id):
            raise NotFoundError("User not found")

        self._log(actor, "Delete User", f"Deleted user: {user.username} ({user.role.value})")

    def _log(self, actor: Actor, action: str, details: str) -> None:
        if self._audit:
            self._audit.record(actor, action, details)


def _actor_of(user: User) -> Actor:
    return Actor(user_id=user.id, username=user.username, role=user.role)
