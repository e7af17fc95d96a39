"""Topic domain models."""

import uuid

from sqlmodel import Field, SQLModel

from topichub.core.mixins import TimestampMixin


class Topic(TimestampMixin, SQLModel, table=True):
    """Topic database model.

    Topics are created and updated but never deleted.
    """

    __tablename__: str = "topics"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=2000)
