"""Centralized dependency type aliases for FastAPI routes.

Import all dependencies from this single module:
    from topichub.core.deps import StoreDep, SettingsDep, UserDirectoryDep

Components are cheap wrappers around the store that was attached to the
app at startup, so one is built per request.
"""

from typing import Annotated

from fastapi import Depends

from topichub.core.settings import Settings, get_settings
from topichub.db.engine import get_store
from topichub.db.store import EntityStore
from topichub.subscription.index import SubscriptionIndex
from topichub.topic.catalog import TopicCatalog
from topichub.user.directory import UserDirectory

# Entity store
StoreDep = Annotated[EntityStore, Depends(get_store)]

# Application settings
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_user_directory(store: StoreDep) -> UserDirectory:
    return UserDirectory(store)


def get_topic_catalog(store: StoreDep) -> TopicCatalog:
    return TopicCatalog(store)


def get_subscription_index(store: StoreDep) -> SubscriptionIndex:
    return SubscriptionIndex(store)


UserDirectoryDep = Annotated[UserDirectory, Depends(get_user_directory)]
TopicCatalogDep = Annotated[TopicCatalog, Depends(get_topic_catalog)]
SubscriptionIndexDep = Annotated[SubscriptionIndex, Depends(get_subscription_index)]
