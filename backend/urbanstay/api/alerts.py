"""Saved-search alert endpoints."""

import json

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanstay.api.properties import property_responses
from urbanstay.config import settings
from urbanstay.database import get_db
from urbanstay.models.alert import Alert
from urbanstay.models.user import User
from urbanstay.schemas.alert import (
    AlertCreate,
    AlertDetailResponse,
    AlertListResponse,
    AlertResponse,
    AlertUpdate,
)
from urbanstay.schemas.common import MessageResponse
from urbanstay.schemas.property import PropertyMatchesResponse
from urbanstay.services.alert_matcher import alert_criteria, find_matching_properties
from urbanstay.services.filters import PropertyCriteria, normalize_criteria
from urbanstay.utils.logging import get_logger
from urbanstay.utils.security import get_current_user

router = APIRouter()
logger = get_logger("api.alerts")


def alert_to_response(alert: Alert) -> AlertResponse:
    return AlertResponse(
        id=alert.id,
        user_id=alert.user_id,
        name=alert.name,
        criteria=alert_criteria(alert).to_wire(),
        is_active=alert.is_active,
        frequency=alert.frequency,
        last_matched_at=alert.last_matched_at,
        created_at=alert.created_at,
        updated_at=alert.updated_at,
    )


def criteria_or_400(raw: dict) -> PropertyCriteria:
    criteria = normalize_criteria(raw)
    if criteria.is_empty():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Alert must have at least one search criterion",
        )
    return criteria


async def ensure_alert_capacity(db: AsyncSession, user_id: int) -> None:
    active = await db.scalar(
        select(func.count(Alert.id)).where(Alert.user_id == user_id, Alert.is_active.is_(True))
    ) or 0
    if active >= settings.max_active_alerts:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum {settings.max_active_alerts} active alerts allowed",
        )


async def get_own_alert(db: AsyncSession, alert_id: int, user: User) -> Alert:
    """Alerts belonging to someone else are reported as missing."""
    result = await db.execute(
        select(Alert).where(Alert.id == alert_id, Alert.user_id == user.id)
    )
    alert = result.scalar_one_or_none()
    if not alert:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Alert not found",
        )
    return alert


@router.post("/", response_model=AlertDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_alert(
    request: AlertCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AlertDetailResponse:
    criteria = criteria_or_400(request.criteria)
    if request.is_active:
        await ensure_alert_capacity(db, current_user.id)

    alert = Alert(
        user_id=current_user.id,
        name=request.name,
        criteria=json.dumps(criteria.to_storage()),
        frequency=request.frequency.value,
        is_active=request.is_active,
    )
    db.add(alert)
    await db.flush()
    await db.refresh(alert)

    logger.info("alert_created", alert_id=alert.id, user_id=current_user.id)
    return AlertDetailResponse(alert=alert_to_response(alert))


@router.get("/", response_model=AlertListResponse)
async def list_alerts(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AlertListResponse:
    result = await db.execute(
        select(Alert)
        .where(Alert.user_id == current_user.id)
        .order_by(Alert.created_at.desc(), Alert.id.desc())
    )
    alerts = result.scalars().all()
    return AlertListResponse(count=len(alerts), alerts=[alert_to_response(a) for a in alerts])


@router.get("/{alert_id}", response_model=AlertDetailResponse)
async def get_alert(
    alert_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AlertDetailResponse:
    alert = await get_own_alert(db, alert_id, current_user)
    return AlertDetailResponse(alert=alert_to_response(alert))


@router.put("/{alert_id}", response_model=AlertDetailResponse)
async def update_alert(
    alert_id: int,
    request: AlertUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AlertDetailResponse:
    alert = await get_own_alert(db, alert_id, current_user)

    if request.criteria is not None:
        alert.criteria = json.dumps(criteria_or_400(request.criteria).to_storage())
    if request.name is not None:
        alert.name = request.name
    if request.frequency is not None:
        alert.frequency = request.frequency.value
    if request.is_active is not None and request.is_active != alert.is_active:
        if request.is_active:
            await ensure_alert_capacity(db, current_user.id)
        alert.is_active = request.is_active

    await db.flush()
    await db.refresh(alert)
    return AlertDetailResponse(alert=alert_to_response(alert))


@router.delete("/{alert_id}", response_model=MessageResponse)
async def delete_alert(
    alert_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    alert = await get_own_alert(db, alert_id, current_user)
    await db.delete(alert)
    await db.flush()

    logger.info("alert_deleted", alert_id=alert_id, user_id=current_user.id)
    return MessageResponse(message="Alert deleted successfully")


@router.patch("/{alert_id}/toggle", response_model=AlertDetailResponse)
async def toggle_alert(
    alert_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AlertDetailResponse:
    """Flip ``is_active``; re-activating respects the active-alert limit."""
    alert = await get_own_alert(db, alert_id, current_user)
    if not alert.is_active:
        await ensure_alert_capacity(db, current_user.id)
    alert.is_active = not alert.is_active

    await db.flush()
    await db.refresh(alert)
    return AlertDetailResponse(alert=alert_to_response(alert))


@router.get("/{alert_id}/matches", response_model=PropertyMatchesResponse)
async def get_alert_matches(
    alert_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PropertyMatchesResponse:
    alert = await get_own_alert(db, alert_id, current_user)
    properties = await find_matching_properties(db, alert)
    await db.flush()
    return PropertyMatchesResponse(count=len(properties), properties=property_responses(properties))
