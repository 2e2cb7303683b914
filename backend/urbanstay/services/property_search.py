"""Translate property criteria into SQL and execute paged searches."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Select, and_, asc, desc, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from urbanstay.models.property import PUBLIC_STATUSES, Property
from urbanstay.services.filters import PropertyCriteria, SortKey
from urbanstay.services.pagination import Page, clamp_page, paginate
from urbanstay.utils.logging import get_logger

logger = get_logger("services.property_search")

STATUS_ALL = "all"


def _like(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_conditions(criteria: PropertyCriteria, now: Optional[datetime] = None) -> List:
    """Predicates for ``criteria``; an empty list means "match everything"."""
    conditions = []

    if criteria.listing_type is not None:
        conditions.append(Property.listing_type == criteria.listing_type.value)

    if criteria.property_types:
        conditions.append(
            Property.property_type.in_([t.value for t in criteria.property_types])
        )

    if criteria.cities:
        conditions.append(
            or_(*[Property.city.ilike(_like(city), escape="\\") for city in criteria.cities])
        )

    if criteria.min_price is not None:
        conditions.append(Property.price >= criteria.min_price)
    if criteria.max_price is not None:
        conditions.append(Property.price <= criteria.max_price)

    if criteria.bedrooms is not None:
        conditions.append(Property.bedrooms == criteria.bedrooms)
    if criteria.min_bedrooms is not None:
        conditions.append(Property.bedrooms >= criteria.min_bedrooms)

    if criteria.min_area is not None:
        conditions.append(Property.carpet_area >= criteria.min_area)
    if criteria.max_area is not None:
        conditions.append(Property.carpet_area <= criteria.max_area)

    if criteria.furnishing is not None:
        conditions.append(Property.furnishing == criteria.furnishing.value)

    # amenities is a JSON array column; every requested entry must be present
    for amenity in criteria.amenities:
        conditions.append(Property.amenities.like(_like(f'"{amenity}"'), escape="\\"))

    if criteria.search:
        term = _like(criteria.search)
        conditions.append(
            or_(
                Property.title.ilike(term, escape="\\"),
                Property.description.ilike(term, escape="\\"),
                Property.city.ilike(term, escape="\\"),
                Property.locality.ilike(term, escape="\\"),
                Property.address.ilike(term, escape="\\"),
            )
        )

    if criteria.featured_only:
        conditions.append(featured_condition(now))

    if criteria.verified_only:
        conditions.append(Property.is_verified.is_(True))

    return conditions


def featured_condition(now: Optional[datetime] = None):
    """Featured flag set and the promotion window still open."""
    now = now or datetime.now(timezone.utc)
    return and_(Property.is_featured.is_(True), Property.featured_until >= now)


def status_condition(status: Optional[str]):
    """No status shows every public status; ``all`` removes the constraint."""
    if not status:
        return Property.status.in_(PUBLIC_STATUSES)
    if status == STATUS_ALL:
        return None
    return Property.status == status


def order_clauses(sort: Optional[SortKey]) -> list:
    """ORDER BY for ``sort``, always ending with the id as tie-break.

    The tie-break follows the primary direction so ``price_low`` and
    ``price_high`` are exact reverses of each other.
    """
    if sort == SortKey.PRICE_LOW:
        return [asc(Property.price), asc(Property.id)]
    if sort == SortKey.PRICE_HIGH:
        return [desc(Property.price), desc(Property.id)]
    if sort == SortKey.NEWEST:
        return [desc(Property.created_at), desc(Property.id)]
    if sort == SortKey.OLDEST:
        return [asc(Property.created_at), asc(Property.id)]
    if sort == SortKey.POPULAR:
        return [desc(Property.views), desc(Property.id)]
    return [desc(Property.is_featured), desc(Property.created_at), desc(Property.id)]


def property_query(
    criteria: PropertyCriteria,
    *,
    status: Optional[str] = None,
    owner_id: Optional[int] = None,
    sort: Optional[SortKey] = None,
) -> Select:
    query = select(Property).options(selectinload(Property.owner))

    conditions = build_conditions(criteria)
    status_expr = status_condition(status)
    if status_expr is not None:
        conditions.append(status_expr)
    if owner_id is not None:
        conditions.append(Property.owner_id == owner_id)
    if conditions:
        query = query.where(and_(*conditions))

    return query.order_by(*order_clauses(sort))


async def search_properties(
    db: AsyncSession,
    criteria: PropertyCriteria,
    *,
    page: int = 1,
    limit: int = 12,
    max_limit: int = 100,
    status: Optional[str] = None,
    owner_id: Optional[int] = None,
    sort: Optional[SortKey] = None,
) -> Page:
    """Run a paged property search."""
    page, limit = clamp_page(page, limit, max_limit)
    query = property_query(criteria, status=status, owner_id=owner_id, sort=sort)
    result = await paginate(db, query, page, limit)

    logger.debug(
        "property_search",
        criteria=criteria.to_storage(),
        status=status,
        owner_id=owner_id,
        sort=sort.value if sort else None,
        page=page,
        limit=limit,
        total=result.total,
    )
    return result


async def increment_views(db: AsyncSession, property_id: int) -> None:
    """Atomic ``views = views + 1``; concurrent readers never lose an increment."""
    await db.execute(
        update(Property)
        .where(Property.id == property_id)
        .values(views=Property.views + 1)
        .execution_options(synchronize_session=False)
    )


async def increment_inquiry_count(db: AsyncSession, property_id: int) -> None:
    await db.execute(
        update(Property)
        .where(Property.id == property_id)
        .values(inquiry_count=Property.inquiry_count + 1)
        .execution_options(synchronize_session=False)
    )
