"""Auth domain dependencies.

JWT verification happens in front of this service; the gateway forwards
the verified user id in a header (``USER_ID_HEADER``). These dependencies
turn that id into a user record and gate routes on ban state and admin
tier.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Request

from topichub.access.control import ban_in_effect, has_tier
from topichub.auth.exceptions import (
    AdminRequiredError,
    NotAuthenticatedError,
    SuperAdminRequiredError,
    UserBannedError,
)
from topichub.core.deps import SettingsDep, UserDirectoryDep
from topichub.core.exceptions import InvalidArgumentError
from topichub.user.models import AdminTier
from topichub.user.schemas import UserRecord


def get_current_user(
    request: Request, settings: SettingsDep, users: UserDirectoryDep
) -> UserRecord:
    """Resolve the forwarded user id to a user record.

    Raises:
        NotAuthenticatedError: If the header is missing, malformed or names
            an unknown user
        UserBannedError: If the user has a ban that has not expired yet
    """
    raw_user_id = request.headers.get(settings.user_id_header)
    if not raw_user_id:
        raise NotAuthenticatedError()

    try:
        user = users.find_by_id(raw_user_id)
    except InvalidArgumentError as e:
        raise NotAuthenticatedError() from e

    if user is None:
        raise NotAuthenticatedError()

    if ban_in_effect(user, users.clock()):
        raise UserBannedError()

    return user


# Type alias for dependency injection
CurrentUserDep = Annotated[UserRecord, Depends(get_current_user)]


def require_auth(_user: CurrentUserDep) -> None:
    """Require authentication without injecting user into path operation.

    Use as a router-level dependency when all routes require auth:
        router = APIRouter(dependencies=[Depends(require_auth)])

    For endpoints that need the user object, still use CurrentUserDep directly.
    FastAPI caches dependencies, so there's no duplicate auth overhead.
    """
    pass  # Authentication already validated by CurrentUserDep


def get_admin_user(user: CurrentUserDep) -> UserRecord:
    """Verify the current user holds at least the admin tier."""
    if not has_tier(user, AdminTier.admin):
        raise AdminRequiredError()
    return user


AdminUserDep = Annotated[UserRecord, Depends(get_admin_user)]


def require_admin(_user: AdminUserDep) -> None:
    """Require admin privileges without injecting user into path operation."""
    pass  # Admin check already validated by AdminUserDep


def require_super_admin(user: CurrentUserDep) -> None:
    """Require the super admin tier."""
    if not has_tier(user, AdminTier.super_admin):
        raise SuperAdminRequiredError()


def ensure_self_or_admin(user: UserRecord, target_id: uuid.UUID) -> None:
    """Allow acting on one's own record; anything else needs admin."""
    if user.id != target_id and not has_tier(user, AdminTier.admin):
        raise AdminRequiredError()
