"""Properties API endpoints."""

import json
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import and_, func, inspect, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from urbanstay.config import settings
from urbanstay.database import get_db
from urbanstay.models.property import Property, PropertyStatus
from urbanstay.models.user import User
from urbanstay.schemas.common import MessageResponse
from urbanstay.schemas.property import (
    AdminStats,
    AdminStatsResponse,
    CityStat,
    CityStatsResponse,
    FeaturePropertyRequest,
    MyPropertiesResponse,
    PropertyCreate,
    PropertyDetailResponse,
    PropertyImage,
    PropertyListResponse,
    PropertyLocation,
    PropertyMatchesResponse,
    PropertyResponse,
    PropertySpecifications,
    PropertyUpdate,
    StatusStat,
)
from urbanstay.schemas.user import OwnerSummary
from urbanstay.services.filters import PropertyCriteria, SortKey, normalize_criteria, normalize_sort
from urbanstay.services.pagination import PageArgs, page_args
from urbanstay.services.property_search import (
    featured_condition,
    increment_views,
    order_clauses,
    search_properties,
)
from urbanstay.utils.logging import AuditLogger, get_logger
from urbanstay.utils.security import (
    ensure_owner_or_admin,
    get_current_user,
    require_admin,
    require_seller,
)
from urbanstay.utils.transitions import PROPERTY_TRANSITIONS, ensure_transition

router = APIRouter()
logger = get_logger("api.properties")

_SLUG_CHARS = re.compile(r"[^a-z0-9]+")

SPECIFICATION_FIELDS = tuple(PropertySpecifications.model_fields)
LOCATION_FIELDS = tuple(PropertyLocation.model_fields)


def make_slug(title: str) -> str:
    base = _SLUG_CHARS.sub("-", title.lower()).strip("-")[:80] or "property"
    return f"{base}-{secrets.token_hex(3)}"


def _json_list(raw: Optional[str]) -> list:
    return json.loads(raw) if raw else []


def property_to_response(prop: Property, owner: Optional[User] = None) -> PropertyResponse:
    """Convert Property model to response schema."""
    if owner is None and "owner" not in inspect(prop).unloaded:
        owner = prop.owner

    return PropertyResponse(
        id=prop.id,
        slug=prop.slug,
        title=prop.title,
        description=prop.description,
        listing_type=prop.listing_type,
        property_type=prop.property_type,
        price=prop.price,
        location=PropertyLocation(**{f: getattr(prop, f) for f in LOCATION_FIELDS}),
        specifications=PropertySpecifications(**{f: getattr(prop, f) for f in SPECIFICATION_FIELDS}),
        amenities=_json_list(prop.amenities),
        highlights=_json_list(prop.highlights),
        images=[PropertyImage(**img) for img in _json_list(prop.images)],
        owner_id=prop.owner_id,
        owner=OwnerSummary.model_validate(owner) if owner is not None else None,
        status=prop.status,
        is_verified=prop.is_verified,
        is_featured=prop.is_featured_active,
        featured_until=prop.featured_until,
        views=prop.views,
        inquiry_count=prop.inquiry_count,
        created_at=prop.created_at,
        updated_at=prop.updated_at,
    )


async def get_property_or_404(db: AsyncSession, property_id: int, with_owner: bool = False) -> Property:
    query = select(Property).where(Property.id == property_id)
    if with_owner:
        query = query.options(selectinload(Property.owner)).execution_options(
            populate_existing=True
        )
    result = await db.execute(query)
    property_data = result.scalar_one_or_none()

    if not property_data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    return property_data


@router.get("/", response_model=PropertyListResponse)
async def list_properties(
    paging: PageArgs = Depends(page_args),
    search: Optional[str] = None,
    listing_type: Optional[str] = Query(None, alias="listingType"),
    property_type: Optional[str] = Query(None, alias="propertyType"),
    city: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    bedrooms: Optional[str] = None,
    min_area: Optional[str] = Query(None, alias="minArea"),
    max_area: Optional[str] = Query(None, alias="maxArea"),
    furnishing: Optional[str] = None,
    amenities: Optional[str] = None,
    featured: Optional[str] = None,
    verified: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    sort: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
) -> PropertyListResponse:
    """Search listings. Unparsable filter values are ignored, not rejected."""
    criteria = normalize_criteria({
        "search": search,
        "listingType": listing_type,
        "propertyType": property_type,
        "city": city,
        "minPrice": min_price,
        "maxPrice": max_price,
        "bedrooms": bedrooms,
        "minArea": min_area,
        "maxArea": max_area,
        "furnishing": furnishing,
        "amenities": amenities,
        "featured": featured,
        "verified": verified,
    })

    result = await search_properties(
        db,
        criteria,
        page=paging.page,
        limit=paging.limit or settings.search_page_size,
        max_limit=settings.max_page_size,
        status=status_filter,
        sort=normalize_sort(sort),
    )
    return PropertyListResponse(
        **result.envelope("properties", [property_to_response(p) for p in result.items])
    )


@router.post("/", response_model=PropertyDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    request: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_seller),
) -> PropertyDetailResponse:
    """Create a new property listing. Requires Seller or Admin role."""
    property_data = Property(
        slug=make_slug(request.title),
        title=request.title,
        description=request.description,
        listing_type=request.listing_type.value,
        property_type=request.property_type.value,
        price=request.price,
        **request.location.model_dump(),
        **request.specifications.model_dump(mode="json"),
        amenities=json.dumps(request.amenities),
        highlights=json.dumps(request.highlights),
        images=json.dumps([img.model_dump() for img in request.images]),
        owner_id=current_user.id,
        status=PropertyStatus.AVAILABLE.value,
        is_verified=False,
        is_featured=False,
        views=0,
        inquiry_count=0,
    )

    db.add(property_data)
    await db.flush()
    await db.refresh(property_data)

    logger.info("property_created", property_id=property_data.id, owner_id=current_user.id)
    return PropertyDetailResponse(property=property_to_response(property_data, owner=current_user))


@router.get("/featured", response_model=PropertyMatchesResponse)
async def get_featured_properties(
    db: AsyncSession = Depends(get_db),
) -> PropertyMatchesResponse:
    """Available listings with an active featured promotion."""
    query = (
        select(Property)
        .options(selectinload(Property.owner))
        .where(
            Property.status == PropertyStatus.AVAILABLE.value,
            featured_condition(),
        )
        .order_by(*order_clauses(SortKey.NEWEST))
        .limit(settings.featured_limit)
    )
    properties = (await db.execute(query)).scalars().all()
    return PropertyMatchesResponse(
        count=len(properties),
        properties=[property_to_response(p) for p in properties],
    )


@router.get("/stats/cities", response_model=CityStatsResponse)
async def get_property_count_by_city(
    db: AsyncSession = Depends(get_db),
) -> CityStatsResponse:
    """Top cities by number of available listings."""
    count_col = func.count(Property.id).label("count")
    query = (
        select(Property.city, count_col, func.avg(Property.price).label("avg_price"))
        .where(Property.status == PropertyStatus.AVAILABLE.value)
        .group_by(Property.city)
        .order_by(count_col.desc(), Property.city.asc())
        .limit(10)
    )
    rows = (await db.execute(query)).all()
    return CityStatsResponse(
        cities=[
            CityStat(city=row.city, count=row.count, avg_price=float(row.avg_price or 0))
            for row in rows
        ]
    )


@router.get("/stats/admin", response_model=AdminStatsResponse)
async def get_admin_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> AdminStatsResponse:
    """Inventory breakdown for the admin dashboard."""
    total = await db.scalar(select(func.count(Property.id))) or 0
    verified = await db.scalar(
        select(func.count(Property.id)).where(Property.is_verified.is_(True))
    ) or 0
    featured = await db.scalar(
        select(func.count(Property.id)).where(featured_condition())
    ) or 0

    async def grouped(column) -> dict:
        rows = (await db.execute(select(column, func.count(Property.id)).group_by(column))).all()
        return {key: count for key, count in rows}

    by_status = await grouped(Property.status)

    recent = (
        await db.execute(
            select(Property)
            .options(selectinload(Property.owner))
            .order_by(*order_clauses(SortKey.NEWEST))
            .limit(5)
        )
    ).scalars().all()

    return AdminStatsResponse(
        stats=AdminStats(
            total_properties=total,
            available_properties=by_status.get(PropertyStatus.AVAILABLE.value, 0),
            verified_properties=verified,
            featured_properties=featured,
            by_status=by_status,
            by_property_type=await grouped(Property.property_type),
            by_listing_type=await grouped(Property.listing_type),
        ),
        recent_properties=[property_to_response(p) for p in recent],
    )


@router.get("/user/my", response_model=MyPropertiesResponse)
async def get_my_properties(
    paging: PageArgs = Depends(page_args),
    status_filter: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MyPropertiesResponse:
    """The caller's own listings with per-status totals."""
    result = await search_properties(
        db,
        PropertyCriteria(),
        page=paging.page,
        limit=paging.limit or settings.seller_page_size,
        max_limit=settings.max_page_size,
        status=status_filter or "all",
        owner_id=current_user.id,
        sort=SortKey.NEWEST,
    )

    stats_rows = (
        await db.execute(
            select(
                Property.status,
                func.count(Property.id),
                func.coalesce(func.sum(Property.views), 0),
                func.coalesce(func.sum(Property.inquiry_count), 0),
            )
            .where(Property.owner_id == current_user.id)
            .group_by(Property.status)
        )
    ).all()

    return MyPropertiesResponse(
        **result.envelope("properties", [property_to_response(p) for p in result.items]),
        stats=[
            StatusStat(status=s, count=c, total_views=v, total_inquiries=i)
            for s, c, v, i in stats_rows
        ],
    )


@router.get("/slug/{slug}", response_model=PropertyDetailResponse)
async def get_property_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db),
) -> PropertyDetailResponse:
    """Get property details by slug. Counts as a view."""
    result = await db.execute(select(Property.id).where(Property.slug == slug))
    property_id = result.scalar_one_or_none()
    if property_id is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    return await get_property(property_id=property_id, db=db)


@router.get("/{property_id}", response_model=PropertyDetailResponse)
async def get_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
) -> PropertyDetailResponse:
    """Get property details by ID. Every fetch counts as a view."""
    await increment_views(db, property_id)
    property_data = await get_property_or_404(db, property_id, with_owner=True)
    return PropertyDetailResponse(property=property_to_response(property_data))


@router.get("/{property_id}/similar", response_model=PropertyMatchesResponse)
async def get_similar_properties(
    property_id: int,
    db: AsyncSession = Depends(get_db),
) -> PropertyMatchesResponse:
    """Available listings of the same listing type sharing city, type or price band."""
    prop = await get_property_or_404(db, property_id)

    query = (
        select(Property)
        .options(selectinload(Property.owner))
        .where(
            and_(
                Property.id != prop.id,
                Property.status == PropertyStatus.AVAILABLE.value,
                Property.listing_type == prop.listing_type,
                or_(
                    func.lower(Property.city) == prop.city.lower(),
                    Property.property_type == prop.property_type,
                    Property.price.between(prop.price * 0.8, prop.price * 1.2),
                ),
            )
        )
        .order_by(*order_clauses(SortKey.NEWEST))
        .limit(settings.similar_limit)
    )
    properties = (await db.execute(query)).scalars().all()
    return PropertyMatchesResponse(
        count=len(properties),
        properties=[property_to_response(p) for p in properties],
    )


@router.put("/{property_id}", response_model=PropertyDetailResponse)
async def update_property(
    property_id: int,
    request: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PropertyDetailResponse:
    """Update a listing. Owner or admin only."""
    property_data = await get_property_or_404(db, property_id, with_owner=True)
    ensure_owner_or_admin(property_data.owner_id, current_user, "update this property")

    update_data = request.model_dump(exclude_unset=True, mode="json")

    new_status = update_data.pop("status", None)
    if new_status is not None:
        ensure_transition(PROPERTY_TRANSITIONS, property_data.status, new_status, "property")
        if new_status != property_data.status:
            AuditLogger(current_user.id, "property").status_changed(
                property_data.id, property_data.status, new_status
            )
        property_data.status = new_status

    for group in ("location", "specifications"):
        values = update_data.pop(group, None)
        if values:
            for field, value in values.items():
                setattr(property_data, field, value)

    for field in ("amenities", "highlights", "images"):
        if field in update_data:
            value = update_data.pop(field)
            setattr(property_data, field, json.dumps(value if value is not None else []))

    for field, value in update_data.items():
        if value is not None:
            setattr(property_data, field, value)

    await db.flush()
    property_data = await get_property_or_404(db, property_id, with_owner=True)

    logger.info("property_updated", property_id=property_data.id, actor_id=current_user.id)
    return PropertyDetailResponse(property=property_to_response(property_data))


@router.delete("/{property_id}", response_model=MessageResponse)
async def delete_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Delete a listing. Owner or admin only."""
    property_data = await get_property_or_404(db, property_id)
    ensure_owner_or_admin(property_data.owner_id, current_user, "delete this property")

    await db.delete(property_data)
    await db.flush()

    logger.info("property_deleted", property_id=property_id, actor_id=current_user.id)
    return MessageResponse(message="Property deleted successfully")


@router.put("/{property_id}/verify", response_model=PropertyDetailResponse)
async def verify_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> PropertyDetailResponse:
    """Mark a listing as verified. Admin only."""
    property_data = await get_property_or_404(db, property_id, with_owner=True)
    property_data.is_verified = True
    property_data.verified_at = datetime.now(timezone.utc)
    property_data.verified_by = current_user.id

    await db.flush()
    property_data = await get_property_or_404(db, property_id, with_owner=True)

    AuditLogger(current_user.id, "property").log("property_verified", property_id)
    return PropertyDetailResponse(property=property_to_response(property_data))


@router.put("/{property_id}/feature", response_model=PropertyDetailResponse)
async def feature_property(
    property_id: int,
    request: FeaturePropertyRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> PropertyDetailResponse:
    """Promote a listing for ``days`` days. Admin only."""
    property_data = await get_property_or_404(db, property_id, with_owner=True)
    days = request.days or settings.featured_default_days

    property_data.is_featured = True
    property_data.featured_until = datetime.now(timezone.utc) + timedelta(days=days)

    await db.flush()
    property_data = await get_property_or_404(db, property_id, with_owner=True)

    AuditLogger(current_user.id, "property").log("property_featured", property_id, days=days)
    return PropertyDetailResponse(property=property_to_response(property_data))


async def list_all_properties(
    db: AsyncSession,
    page: int,
    limit: int,
    status_filter: Optional[str],
    search: Optional[str],
    sort: Optional[str],
) -> PropertyListResponse:
    """Admin table: every status unless narrowed; same contract as public search."""
    result = await search_properties(
        db,
        normalize_criteria({"search": search}),
        page=page,
        limit=limit,
        max_limit=settings.max_page_size,
        status=status_filter or "all",
        sort=normalize_sort(sort) or SortKey.NEWEST,
    )
    return PropertyListResponse(
        **result.envelope("properties", [property_to_response(p) for p in result.items])
    )


def property_responses(properties: List[Property]) -> List[PropertyResponse]:
    return [property_to_response(p) for p in properties]
