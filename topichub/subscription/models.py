"""Subscription domain models."""

import uuid

from sqlmodel import Field, SQLModel, UniqueConstraint


class Subscription(SQLModel, table=True):
    """Membership edge between one user and one topic.

    The row carries no payload; its existence is the subscription. The
    unique constraint is what makes subscribe idempotent under concurrency.
    Topic and user ids are plain references without foreign keys, so
    removing a user never fails on its subscriptions.
    """

    __tablename__: str = "subscriptions"
    __table_args__ = (
        UniqueConstraint("topic_id", "user_id", name="uq_subscriptions_topic_user"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    topic_id: uuid.UUID = Field(index=True)
    user_id: uuid.UUID = Field(index=True)
