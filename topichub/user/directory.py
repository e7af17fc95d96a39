"""User directory.

Owns user rows and every mutation of ban, admin, department, delivery
channel and event-membership state. Lookups return None on absence;
mutations on an unknown id raise UserNotFoundError. Arguments are
checked before the store is touched.
"""

import logging
import uuid
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from topichub.core.exceptions import InvalidArgumentError
from topichub.core.mixins import epoch_ms
from topichub.core.query import Pagination, SortKey
from topichub.core.validation import (
    parse_external_id,
    parse_non_negative_int,
    parse_uuid,
    require,
)
from topichub.db.store import EntityStore
from topichub.user.exceptions import UserNotFoundError
from topichub.user.models import AdminTier, User, UserEvent
from topichub.user.schemas import (
    AdminState,
    EventMembership,
    UserProfile,
    UserRecord,
)

logger = logging.getLogger("topichub.user")

PROFILE_FIELDS = ("first_name", "last_name", "username", "avatar")

# Event lists keep insertion order.
EVENT_ORDER = Pagination(sort=(SortKey("seq"),))


def _projection(fields: Iterable[str] | None) -> dict[str, Any]:
    """Translate a field list into model_dump include/exclude arguments.

    Dotted names select sub-fields (``admin.tier``). The password hash is
    only included when asked for by its full name.
    """
    if fields is None:
        return {"exclude": {"admin": {"password_hash"}}}

    include: dict[str, Any] = {"id": True}
    for name in fields:
        top, _, sub = name.strip().partition(".")
        if top not in UserRecord.model_fields:
            raise InvalidArgumentError(f"Unknown field: {name}")
        if not sub:
            include[top] = True
        elif include.get(top) is not True:
            include.setdefault(top, {})[sub] = True

    if include.get("admin") is True:
        include["admin"] = {"tier": True}
    return {"include": include}


class UserDirectory:
    def __init__(self, store: EntityStore, clock: Callable[[], int] = epoch_ms):
        self.store = store
        self.clock = clock

    # -- reads -------------------------------------------------------------

    def _records(self, users: Sequence[User]) -> list[UserRecord]:
        if not users:
            return []
        events = self.store.find(
            UserEvent,
            {"user_id": [user.id for user in users]},
            pagination=EVENT_ORDER,
        )
        by_user: dict[uuid.UUID, list[UserEvent]] = defaultdict(list)
        for event in events:
            by_user[event.user_id].append(event)
        return [UserRecord.from_row(user, by_user[user.id]) for user in users]

    def _record(self, user: User) -> UserRecord:
        return self._records([user])[0]

    def _get_row(self, user_id: uuid.UUID) -> User:
        user = self.store.find_one(User, {"id": user_id})
        if user is None:
            raise UserNotFoundError()
        return user

    def find_by_id(self, user_id: uuid.UUID | str) -> UserRecord | None:
        user = self.store.find_one(User, {"id": parse_uuid(user_id, "user_id")})
        return self._record(user) if user else None

    def find_by_external_id(self, telegram_id: int | str) -> UserRecord | None:
        user = self.store.find_one(
            User, {"telegram_id": parse_external_id(telegram_id)}
        )
        return self._record(user) if user else None

    def list_all(self, fields: Iterable[str] | None = None) -> list[dict[str, Any]]:
        """Return every user as a dict, projected to ``fields``.

        Without ``fields`` everything except the admin password hash is
        returned.
        """
        projection = _projection(fields)
        records = self._records(self.store.find(User))
        return [record.model_dump(**projection) for record in records]

    def count(self) -> int:
        return self.store.count(User)

    def get_department(self, user_id: uuid.UUID | str) -> uuid.UUID | None:
        return self._get_row(parse_uuid(user_id, "user_id")).department

    def get_admin_state(self, user_id: uuid.UUID | str) -> AdminState:
        """Return only the tier and password hash of a user."""
        user = self._get_row(parse_uuid(user_id, "user_id"))
        return AdminState(
            tier=AdminTier(user.admin_tier), password_hash=user.admin_password_hash
        )

    # -- identity and profile -----------------------------------------------

    def upsert_from_external_identity(
        self, telegram_id: int | str, profile: UserProfile
    ) -> UserRecord:
        """Create the user on first contact, otherwise refresh the profile.

        Existing ban, admin and event state is left alone. The insert and
        the update are a single statement, so repeated calls never produce
        a second row for the same telegram id.
        """
        require(profile=profile)
        row = User(telegram_id=parse_external_id(telegram_id), **profile.model_dump())
        user = self.store.upsert(
            row,
            conflict_keys=("telegram_id",),
            update_fields=(*PROFILE_FIELDS, "updated_at"),
        )
        if user.id == row.id:
            logger.info(
                "Created user %s for telegram id %s",
                user.id,
                user.telegram_id,
                extra={"user_id": str(user.id)},
            )
        return self._record(user)

    def update_profile(
        self, user_id: uuid.UUID | str, profile: UserProfile
    ) -> UserRecord:
        require(profile=profile)
        return self._update(user_id, profile.model_dump(include=set(PROFILE_FIELDS)))

    def set_department(
        self, user_id: uuid.UUID | str, department_id: uuid.UUID | str
    ) -> UserRecord:
        user_id = parse_uuid(user_id, "user_id")
        department = parse_uuid(department_id, "department_id")
        return self._update(user_id, {"department": department})

    def set_telegram_chat_id(
        self, user_id: uuid.UUID | str, chat_id: int | str
    ) -> UserRecord:
        user_id = parse_uuid(user_id, "user_id")
        require(chat_id=chat_id)
        return self._update(user_id, {"telegram_chat_id": str(chat_id)})

    def remove(self, user_id: uuid.UUID | str) -> None:
        """Hard-delete a user together with its event list."""
        user_id = parse_uuid(user_id, "user_id")
        deleted = self.store.delete(
            User, {"id": user_id}, dependents=((UserEvent, "user_id"),)
        )
        if not deleted:
            raise UserNotFoundError()
        logger.info("Removed user %s", user_id, extra={"user_id": str(user_id)})

    def _update(self, user_id: uuid.UUID | str, values: dict[str, Any]) -> UserRecord:
        user_id = parse_uuid(user_id, "user_id")
        if not self.store.update(User, {"id": user_id}, values):
            raise UserNotFoundError()
        return self._record(self._get_row(user_id))

    # -- bans ----------------------------------------------------------------

    def ban(self, user_id: uuid.UUID | str, duration_ms: int) -> UserRecord:
        """Ban a user until now + duration_ms.

        Nothing lifts the ban automatically; readers compare
        ``banned.expires_at`` with the current time.
        """
        user_id = parse_uuid(user_id, "user_id")
        duration_ms = parse_non_negative_int(duration_ms, "duration_ms")
        expires_at = self.clock() + duration_ms
        record = self._update(
            user_id, {"banned_status": True, "banned_expires_at": expires_at}
        )
        logger.info(
            "Banned user %s until %s",
            user_id,
            expires_at,
            extra={"user_id": str(user_id)},
        )
        return record

    def unban(self, user_id: uuid.UUID | str) -> UserRecord:
        record = self._update(
            user_id, {"banned_status": False, "banned_expires_at": 0}
        )
        logger.info("Unbanned user %s", record.id, extra={"user_id": str(record.id)})
        return record

    # -- admin tier ----------------------------------------------------------

    def _set_admin(
        self, user_id: uuid.UUID | str, tier: AdminTier, password_hash: str | None
    ) -> UserRecord:
        record = self._update(
            user_id,
            {"admin_tier": tier.value, "admin_password_hash": password_hash},
        )
        logger.info(
            "Set admin tier of user %s to %s",
            record.id,
            tier.name,
            extra={"user_id": str(record.id)},
        )
        return record

    def promote_to_admin(
        self, user_id: uuid.UUID | str, password_hash: str
    ) -> UserRecord:
        user_id = parse_uuid(user_id, "user_id")
        require(password_hash=password_hash)
        return self._set_admin(user_id, AdminTier.admin, password_hash)

    def promote_to_super_admin(
        self, user_id: uuid.UUID | str, password_hash: str
    ) -> UserRecord:
        user_id = parse_uuid(user_id, "user_id")
        require(password_hash=password_hash)
        return self._set_admin(user_id, AdminTier.super_admin, password_hash)

    def demote_to_none(self, user_id: uuid.UUID | str) -> UserRecord:
        return self._set_admin(parse_uuid(user_id, "user_id"), AdminTier.none, None)

    # -- event membership ----------------------------------------------------

    def list_events(self, user_id: uuid.UUID | str) -> list[EventMembership]:
        user_id = parse_uuid(user_id, "user_id")
        self._get_row(user_id)
        events = self.store.find(
            UserEvent, {"user_id": user_id}, pagination=EVENT_ORDER
        )
        return [EventMembership(event_id=e.event_id) for e in events]

    def add_event_membership(
        self, user_id: uuid.UUID | str, event_id: str
    ) -> UserRecord:
        """Append ``event_id`` to the user's event list.

        An id that is already present is appended again.
        """
        user_id = parse_uuid(user_id, "user_id")
        require(event_id=event_id)
        user = self._get_row(user_id)
        self.store.insert(UserEvent(user_id=user_id, event_id=event_id))
        return self._record(user)

    def remove_event_membership(
        self, user_id: uuid.UUID | str, event_id: str
    ) -> UserRecord:
        """Drop every entry of ``event_id`` from the user's event list."""
        user_id = parse_uuid(user_id, "user_id")
        require(event_id=event_id)
        user = self._get_row(user_id)
        self.store.delete(UserEvent, {"user_id": user_id, "event_id": event_id})
        return self._record(user)

    def clear_event_memberships(self, user_id: uuid.UUID | str) -> UserRecord:
        user_id = parse_uuid(user_id, "user_id")
        user = self._get_row(user_id)
        self.store.delete(UserEvent, {"user_id": user_id})
        return self._record(user)

    def list_users_by_event(self, event_id: str) -> list[UserRecord]:
        require(event_id=event_id)
        events = self.store.find(UserEvent, {"event_id": event_id})
        user_ids = list(dict.fromkeys(event.user_id for event in events))
        if not user_ids:
            return []
        return self._records(self.store.find(User, {"id": user_ids}))

