"""Tests for topichub/topic/catalog.py."""

import uuid

import pytest

from topichub.core.exceptions import InvalidArgumentError
from topichub.core.query import Pagination, SortKey
from topichub.topic.catalog import TopicCatalog
from topichub.topic.exceptions import TopicNotFoundError
from topichub.topic.schemas import TopicCreate, TopicUpdate


def test_create_and_find(topics: TopicCatalog):
    created = topics.create(TopicCreate(title="Outages", description="Prod only"))

    found = topics.find_by_id(created.id)

    assert found.title == "Outages"
    assert found.description == "Prod only"
    assert found.created_at is not None


def test_find_unknown_returns_none(topics: TopicCatalog):
    assert topics.find_by_id(uuid.uuid4()) is None


def test_update_merges_only_set_fields(topics: TopicCatalog):
    created = topics.create(TopicCreate(title="Old", description="Keep me"))

    updated = topics.update(created.id, TopicUpdate(title="New"))

    assert updated.title == "New"
    assert updated.description == "Keep me"


def test_update_can_clear_description(topics: TopicCatalog):
    created = topics.create(TopicCreate(title="T", description="Drop me"))

    updated = topics.update(created.id, TopicUpdate(description=None))

    assert updated.description is None


def test_update_rejects_null_title(topics: TopicCatalog):
    created = topics.create(TopicCreate(title="T"))

    with pytest.raises(InvalidArgumentError):
        topics.update(created.id, TopicUpdate(title=None))


def test_update_unknown_topic(topics: TopicCatalog):
    with pytest.raises(TopicNotFoundError):
        topics.update(uuid.uuid4(), TopicUpdate(title="x"))


def test_empty_update_of_unknown_topic(topics: TopicCatalog):
    with pytest.raises(TopicNotFoundError):
        topics.update(uuid.uuid4(), TopicUpdate())


def test_list_filter_and_count(topics: TopicCatalog):
    for title in ("b", "a", "b"):
        topics.create(TopicCreate(title=title))

    listed = topics.list_all({"title": "b"})
    ordered = topics.list_all(pagination=Pagination(sort=(SortKey("title"),)))

    assert len(listed) == 2
    assert [t.title for t in ordered] == ["a", "b", "b"]
    assert topics.count() == 3
    assert topics.count({"title": "a"}) == 1
