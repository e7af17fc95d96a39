"""Topic domain schemas."""

import uuid
from datetime import datetime

from pydantic import Field, field_serializer
from sqlmodel import SQLModel

from topichub.core.mixins import format_utc


class TopicCreate(SQLModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)


class TopicUpdate(SQLModel):
    """Partial update; unset fields keep their stored value."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)


class TopicRead(SQLModel):
    id: uuid.UUID
    title: str
    description: str | None
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        return format_utc(value)
