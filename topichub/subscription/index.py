"""Subscription index: the many-to-many membership of users and topics.

At most one row exists per (topic, user). Subscribing an existing pair
returns the stored row; unsubscribing a missing pair deletes nothing and
succeeds. Both are single statements, so concurrent identical calls cannot
create duplicates. User and topic rows are only referenced, never changed.
"""

import logging
import uuid
from typing import Any

from topichub.core.query import Pagination
from topichub.core.validation import parse_uuid
from topichub.db.store import EntityStore
from topichub.subscription.models import Subscription

logger = logging.getLogger("topichub.subscription")


class SubscriptionIndex:
    def __init__(self, store: EntityStore):
        self.store = store

    def subscribe(
        self, topic_id: uuid.UUID | str, user_id: uuid.UUID | str
    ) -> Subscription:
        candidate = Subscription(
            topic_id=parse_uuid(topic_id, "topic_id"),
            user_id=parse_uuid(user_id, "user_id"),
        )
        subscription = self.store.upsert(
            candidate, conflict_keys=("topic_id", "user_id")
        )
        if subscription.id == candidate.id:
            logger.info(
                "User %s subscribed to topic %s",
                subscription.user_id,
                subscription.topic_id,
                extra={
                    "user_id": str(subscription.user_id),
                    "topic_id": str(subscription.topic_id),
                },
            )
        return subscription

    def unsubscribe(self, topic_id: uuid.UUID | str, user_id: uuid.UUID | str) -> int:
        """Remove the pair if present and return the number of rows deleted."""
        pair = {
            "topic_id": parse_uuid(topic_id, "topic_id"),
            "user_id": parse_uuid(user_id, "user_id"),
        }
        deleted = self.store.delete(Subscription, pair)
        if deleted:
            logger.info(
                "User %s unsubscribed from topic %s",
                pair["user_id"],
                pair["topic_id"],
                extra={
                    "user_id": str(pair["user_id"]),
                    "topic_id": str(pair["topic_id"]),
                },
            )
        return deleted

    def list_by_topic(
        self, topic_id: uuid.UUID | str, pagination: Pagination | None = None
    ) -> list[Subscription]:
        return self.store.find(
            Subscription,
            {"topic_id": parse_uuid(topic_id, "topic_id")},
            pagination=pagination,
        )

    def subscriber_ids(
        self, topic_id: uuid.UUID | str, pagination: Pagination | None = None
    ) -> list[uuid.UUID]:
        return [s.user_id for s in self.list_by_topic(topic_id, pagination)]

    def list_all(
        self,
        filters: dict[str, Any] | None = None,
        pagination: Pagination | None = None,
    ) -> list[Subscription]:
        return self.store.find(Subscription, filters, pagination=pagination)

    def count(self, filters: dict[str, Any] | None = None) -> int:
        return self.store.count(Subscription, filters)
