"""User domain models.

SQLModel table definitions for users and their event memberships.
"""

import uuid
from enum import IntEnum

from sqlalchemy import BigInteger
from sqlmodel import Field, SQLModel

from topichub.core.mixins import TimestampMixin


class AdminTier(IntEnum):
    """Admin permission level.

    - none: regular user
    - admin: may manage topics and bans
    - super_admin: may also grant and revoke admin rights
    """

    none = 0
    admin = 1
    super_admin = 2


class User(TimestampMixin, SQLModel, table=True):
    """User database model.

    Ban and admin state are flattened into column groups; the record
    schemas regroup them as ``banned`` and ``admin``. The admin password
    hash must never appear in list responses.
    """

    __tablename__: str = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    telegram_id: int = Field(sa_type=BigInteger, index=True, unique=True)
    telegram_chat_id: str | None = Field(default=None, max_length=64)
    first_name: str | None = Field(default=None, max_length=64)
    last_name: str | None = Field(default=None, max_length=64)
    username: str | None = Field(default=None, max_length=64)
    avatar: str | None = Field(default=None, max_length=512)
    department: uuid.UUID | None = Field(default=None, index=True)

    # Ban state; {False, 0} is the unbanned baseline.
    banned_status: bool = Field(default=False)
    banned_expires_at: int = Field(default=0, sa_type=BigInteger)

    # Admin state; tier and hash are always written together.
    admin_tier: int = Field(default=AdminTier.none.value)
    admin_password_hash: str | None = Field(default=None, max_length=255)


class UserEvent(SQLModel, table=True):
    """One entry in a user's ordered event list.

    Duplicates are allowed: the same event id may be appended twice.
    """

    __tablename__: str = "user_events"

    seq: int | None = Field(default=None, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    event_id: str = Field(index=True, max_length=64)
