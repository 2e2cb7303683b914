"""Shared pagination for every list endpoint."""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanstay.services.filters import parse_int

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One slice of a result set plus the counts a pager needs."""

    items: List[T]
    total: int
    page: int
    limit: int
    pages: int = field(init=False)

    def __post_init__(self) -> None:
        self.pages = page_count(self.total, self.limit)

    @property
    def count(self) -> int:
        return len(self.items)

    def envelope(self, key: str, items: List[Any]) -> dict:
        """Response body with the item list named after the resource."""
        return {
            "success": True,
            "count": len(items),
            "total": self.total,
            "page": self.page,
            "pages": self.pages,
            key: items,
        }


@dataclass
class PageArgs:
    page: int = 1
    limit: Optional[int] = None


def page_args(page: Optional[str] = None, limit: Optional[str] = None) -> PageArgs:
    """Query-string paging. A missing or unusable value falls back to the default."""
    parsed_page = parse_int(page)
    parsed_limit = parse_int(limit)
    return PageArgs(
        page=parsed_page if parsed_page and parsed_page > 0 else 1,
        limit=parsed_limit if parsed_limit and parsed_limit > 0 else None,
    )


def page_count(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def clamp_page(page: int, limit: int, max_limit: int) -> tuple:
    return max(page, 1), min(max(limit, 1), max_limit)


async def paginate(db: AsyncSession, query: Select, page: int, limit: int) -> Page:
    """Count ``query`` and fetch the requested page of scalars.

    ``query`` must already carry a deterministic ORDER BY.
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    items: list = []
    if (page - 1) * limit < total:
        result = await db.execute(query.offset((page - 1) * limit).limit(limit))
        items = list(result.scalars().unique().all())

    return Page(items=items, total=total, page=page, limit=limit)
