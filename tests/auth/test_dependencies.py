"""Tests for topichub/auth/dependencies.py - identity and tier gates."""

import uuid
from unittest.mock import MagicMock

import pytest

from topichub.auth.dependencies import (
    ensure_self_or_admin,
    get_admin_user,
    get_current_user,
    require_super_admin,
)
from topichub.auth.exceptions import (
    AdminRequiredError,
    NotAuthenticatedError,
    SuperAdminRequiredError,
    UserBannedError,
)
from topichub.core.settings import get_settings
from topichub.user.directory import UserDirectory
from topichub.user.schemas import UserRecord


def create_mock_request(user_id: str | None = None):
    """Create a request carrying the forwarded identity header."""
    mock_request = MagicMock()
    mock_request.headers = {"X-User-Id": user_id} if user_id is not None else {}
    return mock_request


# --- get_current_user ---


def test_get_current_user_resolves_header(users: UserDirectory, test_user: UserRecord):
    request = create_mock_request(str(test_user.id))

    result = get_current_user(request, get_settings(), users)

    assert result.id == test_user.id
    assert result.telegram_id == test_user.telegram_id


def test_get_current_user_missing_header(users: UserDirectory):
    with pytest.raises(NotAuthenticatedError) as exc_info:
        get_current_user(create_mock_request(), get_settings(), users)

    assert exc_info.value.status_code == 401


def test_get_current_user_malformed_header(users: UserDirectory):
    with pytest.raises(NotAuthenticatedError):
        get_current_user(create_mock_request("nonsense"), get_settings(), users)


def test_get_current_user_unknown_user(users: UserDirectory):
    with pytest.raises(NotAuthenticatedError):
        get_current_user(create_mock_request(str(uuid.uuid4())), get_settings(), users)


def test_get_current_user_banned(users: UserDirectory, clock, test_user: UserRecord):
    users.ban(test_user.id, 1_000)
    request = create_mock_request(str(test_user.id))

    with pytest.raises(UserBannedError) as exc_info:
        get_current_user(request, get_settings(), users)

    assert exc_info.value.status_code == 403

    clock.advance(1_000)
    assert get_current_user(request, get_settings(), users).id == test_user.id


# --- tier gates ---


def test_get_admin_user_rejects_regular_user(test_user: UserRecord):
    with pytest.raises(AdminRequiredError):
        get_admin_user(test_user)


def test_get_admin_user_accepts_admins(admin_user, super_admin_user):
    assert get_admin_user(admin_user) is admin_user
    assert get_admin_user(super_admin_user) is super_admin_user


def test_require_super_admin(admin_user, super_admin_user):
    require_super_admin(super_admin_user)

    with pytest.raises(SuperAdminRequiredError) as exc_info:
        require_super_admin(admin_user)

    assert exc_info.value.status_code == 403


def test_ensure_self_or_admin(test_user: UserRecord, admin_user: UserRecord):
    ensure_self_or_admin(test_user, test_user.id)
    ensure_self_or_admin(admin_user, test_user.id)

    with pytest.raises(AdminRequiredError):
        ensure_self_or_admin(test_user, admin_user.id)
