"""Subscription domain schemas."""

import uuid

from sqlmodel import SQLModel


class SubscriptionRead(SQLModel):
    id: uuid.UUID
    topic_id: uuid.UUID
    user_id: uuid.UUID


class UnsubscribeResult(SQLModel):
    deleted: int


class SubscriberList(SQLModel):
    data: list[uuid.UUID]
