"""Topic catalog: create, read and update topics."""

import logging
import uuid
from typing import Any

from topichub.core.exceptions import InvalidArgumentError
from topichub.core.query import Pagination
from topichub.core.validation import parse_uuid, require
from topichub.db.store import EntityStore
from topichub.topic.exceptions import TopicNotFoundError
from topichub.topic.models import Topic
from topichub.topic.schemas import TopicCreate, TopicUpdate

logger = logging.getLogger("topichub.topic")


class TopicCatalog:
    def __init__(self, store: EntityStore):
        self.store = store

    def create(self, payload: TopicCreate) -> Topic:
        require(payload=payload)
        topic = self.store.insert(Topic(**payload.model_dump()))
        logger.info("Created topic %s", topic.id, extra={"topic_id": str(topic.id)})
        return topic

    def update(self, topic_id: uuid.UUID | str, payload: TopicUpdate) -> Topic:
        """Merge the fields set on ``payload`` into the stored topic."""
        topic_id = parse_uuid(topic_id, "topic_id")
        require(payload=payload)
        values = payload.model_dump(exclude_unset=True)
        if "title" in values and values["title"] is None:
            raise InvalidArgumentError("title must not be null")
        if values and not self.store.update(Topic, {"id": topic_id}, values):
            raise TopicNotFoundError()
        topic = self.store.find_one(Topic, {"id": topic_id})
        if topic is None:
            raise TopicNotFoundError()
        return topic

    def find_by_id(self, topic_id: uuid.UUID | str) -> Topic | None:
        return self.store.find_one(Topic, {"id": parse_uuid(topic_id, "topic_id")})

    def list_all(
        self,
        filters: dict[str, Any] | None = None,
        pagination: Pagination | None = None,
    ) -> list[Topic]:
        return self.store.find(Topic, filters, pagination=pagination)

    def count(self, filters: dict[str, Any] | None = None) -> int:
        return self.store.count(Topic, filters)
