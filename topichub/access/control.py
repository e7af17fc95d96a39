"""Access control derived from user records.

Pure functions: no store access and no side effects. The request layer
decides what tier an operation needs and compares.
"""

from topichub.user.models import AdminTier
from topichub.user.schemas import UserRecord


def effective_tier(user: UserRecord) -> AdminTier:
    """Return the admin tier the user currently holds."""
    return AdminTier(user.admin.tier)


def has_tier(user: UserRecord, required: AdminTier) -> bool:
    """Tier 2 implies every tier 1 capability."""
    return effective_tier(user) >= required


def ban_in_effect(user: UserRecord, now_ms: int) -> bool:
    """Whether a stored ban is still running at ``now_ms``.

    Bans are never lifted by a background job; an expired ban simply stops
    counting here.
    """
    return user.banned.status and user.banned.expires_at > now_ms
