"""User domain router.

User management routes. Reads of single users are open to any
authenticated user; listing, bans and event administration need admin,
and changing admin tiers or deleting users needs super admin.
"""

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status

from topichub.auth.dependencies import (
    CurrentUserDep,
    ensure_self_or_admin,
    require_admin,
    require_auth,
    require_super_admin,
)
from topichub.auth.passwords import hash_password
from topichub.core.constants import CommonResponses, Routes
from topichub.core.deps import UserDirectoryDep
from topichub.core.exceptions import InvalidArgumentError
from topichub.user.exceptions import UserNotFoundError
from topichub.user.models import AdminTier
from topichub.user.schemas import (
    AdminRead,
    BanRequest,
    EventMembership,
    EventMembershipRequest,
    PromoteRequest,
    UserCount,
    UserProfile,
    UserRead,
    UserUpdate,
)

router = APIRouter(
    prefix=Routes.USER.prefix,
    tags=[Routes.USER.tag],
    dependencies=[Depends(require_auth)],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
        **CommonResponses.STORE_UNAVAILABLE,
    },
)


@router.patch("/me", response_model=UserRead)
async def update_me(
    user: CurrentUserDep, profile: UserProfile, users: UserDirectoryDep
):
    """Update current authenticated user's profile fields."""
    return UserRead.from_record(users.update_profile(user.id, profile))


@router.get("/", dependencies=[Depends(require_admin)])
async def list_users(
    users: UserDirectoryDep,
    fields: Annotated[
        str | None, Query(description="Comma separated, e.g. first_name,admin.tier")
    ] = None,
) -> list[dict[str, Any]]:
    """List all users. Admin only.

    The admin password hash is never returned from this route.
    """
    projection = None
    if fields:
        projection = [f.strip() for f in fields.split(",") if f.strip()]
        if any(f.startswith("admin.password") for f in projection):
            raise InvalidArgumentError("admin.password_hash cannot be listed")
    return users.list_all(projection)


@router.get("/count", response_model=UserCount, dependencies=[Depends(require_admin)])
async def count_users(users: UserDirectoryDep):
    return UserCount(total=users.count())


@router.get(
    "/telegram/{telegram_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def get_user_by_telegram_id(telegram_id: int, users: UserDirectoryDep):
    record = users.find_by_external_id(telegram_id)
    if record is None:
        raise UserNotFoundError()
    return UserRead.from_record(record)


@router.get(
    "/events/{event_id}",
    response_model=list[UserRead],
    dependencies=[Depends(require_admin)],
)
async def list_users_by_event(event_id: str, users: UserDirectoryDep):
    """List users whose event list contains ``event_id``. Admin only."""
    return [UserRead.from_record(r) for r in users.list_users_by_event(event_id)]


@router.get(
    "/{user_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def get_user(user_id: uuid.UUID, users: UserDirectoryDep):
    record = users.find_by_id(user_id)
    if record is None:
        raise UserNotFoundError()
    return UserRead.from_record(record)


@router.put(
    "/{user_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    user: CurrentUserDep,
    users: UserDirectoryDep,
):
    """Move a user to another department or delivery chat.

    Users may change their own record; admins may change anyone's.
    """
    ensure_self_or_admin(user, user_id)
    if body.new_department is None and body.new_telegram_chat_id is None:
        raise InvalidArgumentError(
            "new_department or new_telegram_chat_id is required"
        )

    record = None
    if body.new_department is not None:
        record = users.set_department(user_id, body.new_department)
    if body.new_telegram_chat_id is not None:
        record = users.set_telegram_chat_id(user_id, body.new_telegram_chat_id)
    return UserRead.from_record(record)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_super_admin)],
    responses={**CommonResponses.NOT_FOUND},
)
async def delete_user(user_id: uuid.UUID, users: UserDirectoryDep):
    """Delete a user and its event list. Super admin only."""
    users.remove(user_id)


# --- Bans ---


@router.post(
    "/{user_id}/ban",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
    responses={**CommonResponses.NOT_FOUND},
)
async def ban_user(user_id: uuid.UUID, body: BanRequest, users: UserDirectoryDep):
    return UserRead.from_record(users.ban(user_id, body.duration_ms))


@router.delete(
    "/{user_id}/ban",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
    responses={**CommonResponses.NOT_FOUND},
)
async def unban_user(user_id: uuid.UUID, users: UserDirectoryDep):
    return UserRead.from_record(users.unban(user_id))


# --- Admin tier ---


@router.get(
    "/{user_id}/admin",
    response_model=AdminRead,
    dependencies=[Depends(require_super_admin)],
    responses={**CommonResponses.NOT_FOUND},
)
async def get_admin_tier(user_id: uuid.UUID, users: UserDirectoryDep):
    return AdminRead(tier=users.get_admin_state(user_id).tier)


@router.put(
    "/{user_id}/admin",
    response_model=UserRead,
    dependencies=[Depends(require_super_admin)],
    responses={**CommonResponses.NOT_FOUND},
)
async def promote_user(
    user_id: uuid.UUID, body: PromoteRequest, users: UserDirectoryDep
):
    """Grant admin (tier 1) or super admin (tier 2) with a new password."""
    password_hash = hash_password(body.password)
    if body.tier == AdminTier.super_admin:
        record = users.promote_to_super_admin(user_id, password_hash)
    else:
        record = users.promote_to_admin(user_id, password_hash)
    return UserRead.from_record(record)


@router.delete(
    "/{user_id}/admin",
    response_model=UserRead,
    dependencies=[Depends(require_super_admin)],
    responses={**CommonResponses.NOT_FOUND},
)
async def demote_user(user_id: uuid.UUID, users: UserDirectoryDep):
    return UserRead.from_record(users.demote_to_none(user_id))


# --- Event membership ---


@router.get(
    "/{user_id}/events",
    response_model=list[EventMembership],
    responses={**CommonResponses.NOT_FOUND},
)
async def list_user_events(user_id: uuid.UUID, users: UserDirectoryDep):
    return users.list_events(user_id)


@router.post(
    "/{user_id}/events",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def add_user_event(
    user_id: uuid.UUID,
    body: EventMembershipRequest,
    user: CurrentUserDep,
    users: UserDirectoryDep,
):
    ensure_self_or_admin(user, user_id)
    return UserRead.from_record(users.add_event_membership(user_id, body.event_id))


@router.delete(
    "/{user_id}/events/{event_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def remove_user_event(
    user_id: uuid.UUID, event_id: str, user: CurrentUserDep, users: UserDirectoryDep
):
    ensure_self_or_admin(user, user_id)
    return UserRead.from_record(users.remove_event_membership(user_id, event_id))


@router.delete(
    "/{user_id}/events",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def clear_user_events(
    user_id: uuid.UUID, user: CurrentUserDep, users: UserDirectoryDep
):
    ensure_self_or_admin(user, user_id)
    return UserRead.from_record(users.clear_event_memberships(user_id))
