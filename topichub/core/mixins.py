"""Reusable model mixins and time helpers.

Provides common field patterns for SQLModel table definitions.
"""

import time
from datetime import UTC, datetime

from sqlalchemy import text
from sqlmodel import Field


def utc_now() -> datetime:
    """Return current UTC time without microseconds."""
    return datetime.now(UTC).replace(microsecond=0)


def epoch_ms() -> int:
    """Return the current Unix time in milliseconds.

    Ban expiry is stored in this unit.
    """
    return time.time_ns() // 1_000_000


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps.

    created_at is written once on insert and never touched again;
    updated_at follows every UPDATE statement issued against the row.

    Usage:
        class MyModel(TimestampMixin, SQLModel, table=True):
            id: int = Field(primary_key=True)
            name: str
    """

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={
            "server_default": text("CURRENT_TIMESTAMP"),
            "onupdate": utc_now,
        },
    )


def format_utc(value: datetime) -> str:
    """Format datetime as ISO 8601 string in UTC.

    Converts datetime to UTC timezone and formats with Z suffix
    (e.g. 2026-01-19T12:34:56Z). Naive values are assumed to be UTC
    already, which is how SQLite hands them back.
    """
    if value.tzinfo is not None:
        utc_value = value.astimezone(UTC)
    else:
        utc_value = value.replace(tzinfo=UTC)
    return utc_value.replace(microsecond=0).isoformat().replace("+00:00", "Z")
