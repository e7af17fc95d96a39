"""Topic domain router.

Topic listing and reads are open to authenticated users; creating and
editing topics needs admin. Subscribe and unsubscribe live here as
``/topics/{topic_id}/{user_id}``.
"""

import uuid

from fastapi import APIRouter, Depends

from topichub.auth.dependencies import (
    CurrentUserDep,
    ensure_self_or_admin,
    require_admin,
    require_auth,
)
from topichub.core.constants import CommonResponses, Routes
from topichub.core.deps import SubscriptionIndexDep, TopicCatalogDep, UserDirectoryDep
from topichub.core.query import FiltersDep, Page, PaginationDep, build_page
from topichub.subscription.schemas import SubscriptionRead, UnsubscribeResult
from topichub.topic.exceptions import TopicNotFoundError
from topichub.topic.schemas import TopicCreate, TopicRead, TopicUpdate
from topichub.user.exceptions import UserNotFoundError

router = APIRouter(
    prefix=Routes.TOPIC.prefix,
    tags=[Routes.TOPIC.tag],
    dependencies=[Depends(require_auth)],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
        **CommonResponses.STORE_UNAVAILABLE,
    },
)


@router.get("/", response_model=Page[TopicRead])
async def list_topics(
    topics: TopicCatalogDep, pagination: PaginationDep, filters: FiltersDep
):
    """List topics. ``pages.total`` is present when a limit is given."""
    items = topics.list_all(filters, pagination)
    total = topics.count(filters) if pagination.limit else len(items)
    return build_page(items, pagination, total)


@router.post("/", response_model=TopicRead, dependencies=[Depends(require_admin)])
async def create_topic(payload: TopicCreate, topics: TopicCatalogDep):
    return topics.create(payload)


@router.get(
    "/{topic_id}",
    response_model=TopicRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def get_topic(topic_id: uuid.UUID, topics: TopicCatalogDep):
    topic = topics.find_by_id(topic_id)
    if topic is None:
        raise TopicNotFoundError()
    return topic


@router.put(
    "/{topic_id}",
    response_model=TopicRead,
    dependencies=[Depends(require_admin)],
    responses={**CommonResponses.NOT_FOUND},
)
async def update_topic(
    topic_id: uuid.UUID, payload: TopicUpdate, topics: TopicCatalogDep
):
    return topics.update(topic_id, payload)


@router.post(
    "/{topic_id}/{user_id}",
    response_model=SubscriptionRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def subscribe(
    topic_id: uuid.UUID,
    user_id: uuid.UUID,
    user: CurrentUserDep,
    topics: TopicCatalogDep,
    users: UserDirectoryDep,
    subscriptions: SubscriptionIndexDep,
):
    """Subscribe a user to a topic. Repeating the call changes nothing."""
    ensure_self_or_admin(user, user_id)
    if topics.find_by_id(topic_id) is None:
        raise TopicNotFoundError()
    if users.find_by_id(user_id) is None:
        raise UserNotFoundError()
    return subscriptions.subscribe(topic_id, user_id)


@router.delete("/{topic_id}/{user_id}", response_model=UnsubscribeResult)
async def unsubscribe(
    topic_id: uuid.UUID,
    user_id: uuid.UUID,
    user: CurrentUserDep,
    subscriptions: SubscriptionIndexDep,
):
    """Unsubscribe a user; unsubscribing twice is not an error."""
    ensure_self_or_admin(user, user_id)
    return UnsubscribeResult(deleted=subscriptions.unsubscribe(topic_id, user_id))
