"""Auth domain router.

First-contact login through the Telegram widget and the admin password
check. Signature verification of the Telegram payload is done by the
gateway before the request reaches this service.
"""

import logging

from fastapi import APIRouter, status

from topichub.auth.dependencies import AdminUserDep
from topichub.auth.exceptions import InvalidAdminPasswordError
from topichub.auth.passwords import verify_password
from topichub.core.constants import CommonResponses, Routes
from topichub.core.deps import UserDirectoryDep
from topichub.user.schemas import (
    AdminPasswordRequest,
    AdminRead,
    TelegramProfile,
    UserRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=Routes.AUTH.prefix,
    tags=[Routes.AUTH.tag],
    responses={**CommonResponses.BAD_REQUEST, **CommonResponses.STORE_UNAVAILABLE},
)


@router.put(
    "/telegram/callback",
    response_model=UserRead,
    status_code=status.HTTP_200_OK,
)
async def telegram_callback(profile: TelegramProfile, users: UserDirectoryDep):
    """Create the user on first login, refresh the profile afterwards.

    Safe to call on every login.
    """
    record = users.upsert_from_external_identity(profile.id, profile.to_profile())
    return UserRead.from_record(record)


@router.post(
    "/admin/verify",
    response_model=AdminRead,
    responses={**CommonResponses.UNAUTHORIZED, **CommonResponses.FORBIDDEN},
)
async def verify_admin_password(
    body: AdminPasswordRequest, admin: AdminUserDep, users: UserDirectoryDep
):
    """Confirm the current admin's password before sensitive actions."""
    state = users.get_admin_state(admin.id)
    if not verify_password(body.password, state.password_hash):
        logger.info(
            "Admin password check failed for user %s",
            admin.id,
            extra={"user_id": str(admin.id)},
        )
        raise InvalidAdminPasswordError()
    return AdminRead(tier=state.tier)
