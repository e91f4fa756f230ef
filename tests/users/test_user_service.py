from __future__ import annotations

import pytest

from src.campus_attendance.campus_attendance.core.enums import AuditKind, Role
from src.campus_attendance.campus_attendance.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateKeyError,
    NotFoundError,
    ValidationError,
)
from src.campus_attendance.campus_attendance.users.model import Actor
from src.campus_attendance.campus_attendance.users.service import AuthService, UserService
from src.campus_attendance.campus_attendance.users.tokens import TokenService


@pytest.fixture
def tokens():
    return TokenService("test-secret", max_age_seconds=60)


@pytest.fixture
def auth(users, tokens, audit):
    return AuthService(users, tokens, audit)


@pytest.fixture
def accounts(users, audit):
    return UserService(users, audit)


@pytest.fixture
def root(users):
    return users.add("root", "rootpass", Role.ADMIN)


def test_login_issues_token_that_resolves_to_actor(auth, root, audit_repo):
    result = auth.login("root", "rootpass")

    actor = auth.verify_token(result.token)
    assert actor.user_id == root.id
    assert actor.role is Role.ADMIN
    assert [(e.kind, e.action) for e in audit_repo.entries] == [(AuditKind.ACCESS, "login")]


def test_login_rejects_bad_credentials(auth, root):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        auth.login("root", "wrong")
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        auth.login("ghost", "rootpass")


def test_login_with_unusable_hash_is_rejected(auth, users):
    user = users.add("legacy", "whatever", Role.HR)
    users.update_password(user.id, password_hash="CHANGE_ME")

    with pytest.raises(AuthenticationError):
        auth.login("legacy", "whatever")


def test_tampered_token_is_rejected(auth, root):
    token = auth.login("root", "rootpass").token

    _, rest = token.split(".", 1)
    forged = "eyJ1aWQiOjIsInJvbGUiOiJhZG1pbiJ9" + "." + rest
    assert forged != token

    with pytest.raises(AuthenticationError):
        auth.verify_token(forged)
    with pytest.raises(AuthenticationError):
        auth.verify_token("")


def test_token_signed_with_other_key_is_rejected(auth, root):
    foreign = TokenService("other-secret").issue(root)

    with pytest.raises(AuthenticationError):
        auth.verify_token(foreign)


def test_token_of_deleted_account_stops_working(auth, users, root):
    token = auth.login("root", "rootpass").token
    users.delete_by_id(root.id)

    with pytest.raises(AuthenticationError, match="no longer exists"):
        auth.verify_token(token)


def test_duplicate_username_leaves_list_unchanged(accounts, admin, root):
    before = accounts.list_users(admin)

    with pytest.raises(DuplicateKeyError):
        accounts.create_user(admin, username="root", password="another1", role="hr")

    assert accounts.list_users(admin) == before


def test_create_user_maps_superadmin_alias(accounts, admin):
    user = accounts.create_user(admin, username="boss", password="secret1", role="superadmin")

    assert user.role is Role.ADMIN
    assert user.password_hash != "secret1"


def test_create_user_validation(accounts, admin):
    with pytest.raises(ValidationError, match="at least 6"):
        accounts.create_user(admin, username="x", password="123", role="hr")
    with pytest.raises(ValidationError, match="Unknown role"):
        accounts.create_user(admin, username="x", password="123456", role="janitor")
    with pytest.raises(ValidationError):
        accounts.create_user(admin, username="  ", password="123456", role="hr")


def test_only_admin_manages_accounts(accounts, hr):
    with pytest.raises(AuthorizationError):
        accounts.list_users(hr)
    with pytest.raises(AuthorizationError):
        accounts.create_user(hr, username="x", password="123456", role="hr")


def test_cannot_delete_own_account(accounts, users, root, audit_repo):
    me = users.add("me", "mypassword", Role.ADMIN)
    actor = Actor(user_id=me.id, username=me.username, role=me.role)

    with pytest.raises(ValidationError, match="own account"):
        accounts.delete_user(actor, me.id)
    accounts.delete_user(actor, root.id)

    assert [u.username for u in users.list_all()] == ["me"]
    assert audit_repo.actions() == ["Delete User"]
    with pytest.raises(NotFoundError):
        accounts.delete_user(actor, root.id)


def test_reset_password_allows_login_with_new_one(accounts, auth, admin, users):
    user = users.add("guard", "oldpass", Role.SECURITY)

    accounts.reset_password(admin, user.id, "newpass")

    assert auth.login("guard", "newpass").user.id == user.id
    with pytest.raises(AuthenticationError):
        auth.login("guard", "oldpass")
    with pytest.raises(ValidationError):
        accounts.reset_password(admin, user.id, "123")
    with pytest.raises(NotFoundError):
        accounts.reset_password(admin, 999, "long-enough")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("superadmin", Role.ADMIN),
        ("SuperAdmin", Role.ADMIN),
        ("admin", Role.ADMIN),
        (" hr ", Role.HR),
        ("security", Role.SECURITY),
        ("dean", Role.DEAN),
    ],
)
def test_role_parse(raw, expected):
    assert Role.parse(raw) is expected
