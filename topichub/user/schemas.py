"""User domain schemas.

Records returned by the UserDirectory plus the request and response
schemas of the user routes.

Security notes:
- UserRecord carries the admin password hash; it is internal only
- UserRead is the response shape and exposes the admin tier but never the hash
"""

import uuid
from collections.abc import Sequence
from datetime import datetime

from pydantic import Field, field_serializer
from sqlmodel import SQLModel

from topichub.core.mixins import format_utc
from topichub.user.models import AdminTier, User, UserEvent


class BanState(SQLModel):
    """Ban flag plus expiry in Unix milliseconds.

    Expiry is not enforced by the directory; see ban_in_effect.
    """

    status: bool = False
    expires_at: int = 0


class AdminState(SQLModel):
    tier: AdminTier = AdminTier.none
    password_hash: str | None = None


class EventMembership(SQLModel):
    event_id: str


class UserProfile(SQLModel):
    """Overwritable profile fields."""

    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    avatar: str | None = None


class TelegramProfile(SQLModel):
    """Login payload sent by the Telegram login widget."""

    id: int
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    photo_url: str | None = None

    def to_profile(self) -> UserProfile:
        return UserProfile(
            first_name=self.first_name,
            last_name=self.last_name,
            username=self.username,
            avatar=self.photo_url,
        )


class UserRecord(UserProfile):
    """Full user record as handed out by the UserDirectory."""

    id: uuid.UUID
    telegram_id: int
    telegram_chat_id: str | None = None
    department: uuid.UUID | None = None
    events: list[EventMembership] = Field(default_factory=list)
    banned: BanState = Field(default_factory=BanState)
    admin: AdminState = Field(default_factory=AdminState)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, user: User, events: Sequence[UserEvent] = ()) -> "UserRecord":
        return cls(
            id=user.id,
            telegram_id=user.telegram_id,
            telegram_chat_id=user.telegram_chat_id,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
            avatar=user.avatar,
            department=user.department,
            events=[EventMembership(event_id=e.event_id) for e in events],
            banned=BanState(
                status=user.banned_status, expires_at=user.banned_expires_at
            ),
            admin=AdminState(
                tier=AdminTier(user.admin_tier),
                password_hash=user.admin_password_hash,
            ),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AdminRead(SQLModel):
    tier: AdminTier


class UserRead(UserProfile):
    """Response schema for user data. Never includes the password hash."""

    id: uuid.UUID
    telegram_id: int
    telegram_chat_id: str | None
    department: uuid.UUID | None
    events: list[EventMembership]
    banned: BanState
    admin: AdminRead
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        return format_utc(value)

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserRead":
        return cls.model_validate(
            record.model_dump(exclude={"admin": {"password_hash"}})
        )


class UserUpdate(SQLModel):
    """Schema for changing a user's department or delivery channel.

    Exactly the fields that are set get written.
    """

    new_department: uuid.UUID | None = None
    new_telegram_chat_id: str | None = Field(default=None, max_length=64)


class BanRequest(SQLModel):
    duration_ms: int = Field(ge=0, description="Ban length in milliseconds")


class PromoteRequest(SQLModel):
    tier: int = Field(default=1, ge=1, le=2, description="1 = admin, 2 = super admin")
    password: str = Field(min_length=8, max_length=72)


class AdminPasswordRequest(SQLModel):
    password: str = Field(min_length=1, max_length=72)


class EventMembershipRequest(SQLModel):
    event_id: str = Field(min_length=1, max_length=64)


class UserCount(SQLModel):
    total: int
