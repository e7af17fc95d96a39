"""Argument guards shared by the directory, catalog and index.

Every guard raises InvalidArgumentError, so a bad call fails before the
store is reached.
"""

import uuid
from typing import Any

from topichub.core.exceptions import InvalidArgumentError


def require(**arguments: Any) -> None:
    """Reject missing arguments (None or empty string)."""
    for name, value in arguments.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidArgumentError(f"{name} is required")


def parse_uuid(value: Any, name: str) -> uuid.UUID:
    """Coerce an identifier to a UUID."""
    require(**{name: value})
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError as e:
        raise InvalidArgumentError(f"{name} is not a valid id") from e


def parse_external_id(value: Any, name: str = "telegram_id") -> int:
    """Coerce a chat-platform id to an int.

    Accepts ints and decimal strings; booleans are rejected even though
    they are ints.
    """
    require(**{name: value})
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as e:
        raise InvalidArgumentError(f"{name} must be an integer") from e


def parse_non_negative_int(value: Any, name: str) -> int:
    require(**{name: value})
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer")
    if value < 0:
        raise InvalidArgumentError(f"{name} must not be negative")
    return value
