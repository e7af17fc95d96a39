"""Pagination, sorting and filter parameters for list endpoints.

The components pass Pagination through to the store untouched; page
arithmetic happens here, in the request layer.
"""

import math
from dataclasses import dataclass
from typing import Annotated, Any, Generic, TypeVar

from fastapi import Depends, Query, Request
from pydantic import BaseModel

from topichub.core.exceptions import InvalidArgumentError
from topichub.core.settings import Settings, get_settings

T = TypeVar("T")

# Query parameters consumed by pagination; everything else is a filter.
RESERVED_PARAMS = frozenset({"limit", "offset", "sort", "fields"})


@dataclass(frozen=True)
class SortKey:
    """One ORDER BY term."""

    field: str
    descending: bool = False

    @classmethod
    def parse(cls, raw: str) -> "SortKey":
        """Parse ``field`` or ``-field``."""
        raw = raw.strip()
        descending = raw.startswith("-")
        field = raw.lstrip("-+")
        if not field:
            raise InvalidArgumentError("Sort field must not be empty")
        return cls(field=field, descending=descending)


@dataclass(frozen=True)
class Pagination:
    """Offset/limit window plus ordering.

    A limit of 0 means "no limit".
    """

    offset: int = 0
    limit: int = 0
    sort: tuple[SortKey, ...] = ()

    def total_pages(self, total: int) -> int | None:
        """Number of pages for ``total`` rows, or None when unlimited."""
        if self.limit <= 0:
            return None
        return math.ceil(total / self.limit)


class PageInfo(BaseModel):
    total: int


class Page(BaseModel, Generic[T]):
    """List response envelope: ``{"data": [...], "pages": {"total": n}}``."""

    data: list[T]
    pages: PageInfo | None = None


def parse_sort(raw: str | None) -> tuple[SortKey, ...]:
    if not raw:
        return ()
    return tuple(SortKey.parse(part) for part in raw.split(",") if part.strip())


def get_pagination(
    settings: Annotated[Settings, Depends(get_settings)],
    limit: Annotated[int | None, Query(ge=0)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
    sort: Annotated[
        str | None, Query(description="field or -field, comma separated")
    ] = None,
) -> Pagination:
    """Build Pagination from ``limit``, ``offset`` and ``sort`` query params."""
    if limit is None:
        limit = settings.default_page_limit
    limit = min(limit, settings.max_page_limit) if limit else 0
    return Pagination(offset=offset, limit=limit, sort=parse_sort(sort))


def get_filters(request: Request) -> dict[str, Any]:
    """Collect the remaining query params as equality filters."""
    return {
        key: value
        for key, value in request.query_params.items()
        if key not in RESERVED_PARAMS
    }


def build_page(items: list[Any], pagination: Pagination, total: int) -> dict[str, Any]:
    pages = pagination.total_pages(total)
    page: dict[str, Any] = {"data": items}
    if pages is not None:
        page["pages"] = {"total": pages}
    return page


PaginationDep = Annotated[Pagination, Depends(get_pagination)]
FiltersDep = Annotated[dict[str, Any], Depends(get_filters)]
