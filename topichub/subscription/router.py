"""Subscription domain router."""

import uuid

from fastapi import APIRouter, Depends

from topichub.auth.dependencies import require_admin, require_auth
from topichub.core.constants import CommonResponses, Routes
from topichub.core.deps import SubscriptionIndexDep
from topichub.core.query import FiltersDep, Page, PaginationDep, build_page
from topichub.subscription.schemas import SubscriberList, SubscriptionRead

router = APIRouter(
    prefix=Routes.SUBSCRIPTION.prefix,
    tags=[Routes.SUBSCRIPTION.tag],
    dependencies=[Depends(require_auth)],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
        **CommonResponses.STORE_UNAVAILABLE,
    },
)


@router.get(
    "/",
    response_model=Page[SubscriptionRead],
    dependencies=[Depends(require_admin)],
)
async def list_subscriptions(
    subscriptions: SubscriptionIndexDep,
    pagination: PaginationDep,
    filters: FiltersDep,
):
    """List subscriptions, filterable by ``topic_id`` and ``user_id``. Admin only."""
    items = subscriptions.list_all(filters, pagination)
    total = subscriptions.count(filters) if pagination.limit else len(items)
    return build_page(items, pagination, total)


@router.get("/topic/{topic_id}", response_model=SubscriberList)
async def list_topic_subscribers(
    topic_id: uuid.UUID, subscriptions: SubscriptionIndexDep, pagination: PaginationDep
):
    """Return the ids of the users subscribed to a topic."""
    return SubscriberList(data=subscriptions.subscriber_ids(topic_id, pagination))
