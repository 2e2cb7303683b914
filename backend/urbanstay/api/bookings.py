"""Booking endpoints: visits, purchases and rentals."""

import secrets
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanstay.api.properties import get_property_or_404
from urbanstay.config import settings
from urbanstay.database import get_db
from urbanstay.models.booking import Booking, BookingStatus
from urbanstay.models.user import User
from urbanstay.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingNote,
    BookingResponse,
)
from urbanstay.services.pagination import PageArgs, clamp_page, page_args, paginate
from urbanstay.utils.logging import AuditLogger, get_logger
from urbanstay.utils.security import get_current_user
from urbanstay.utils.transitions import BOOKING_TRANSITIONS, ensure_transition

router = APIRouter()
logger = get_logger("api.bookings")


async def get_booking_or_404(db: AsyncSession, booking_id: int) -> Booking:
    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking


def _forbidden(action: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Not authorized to {action}",
    )


async def _move(
    db: AsyncSession,
    booking: Booking,
    target: BookingStatus,
    actor: User,
) -> BookingDetailResponse:
    ensure_transition(BOOKING_TRANSITIONS, booking.status, target.value, "booking")
    if booking.status != target.value:
        AuditLogger(actor.id, "booking").status_changed(booking.id, booking.status, target.value)
        booking.status = target.value
    await db.flush()

    booking = await get_booking_or_404(db, booking.id)
    return BookingDetailResponse(booking=BookingResponse.model_validate(booking))


@router.post("/", response_model=BookingDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BookingDetailResponse:
    prop = await get_property_or_404(db, request.property_id)
    if prop.owner_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot book your own property",
        )

    pending = await db.scalar(
        select(Booking.id).where(
            Booking.property_id == prop.id,
            Booking.buyer_id == current_user.id,
            Booking.status == BookingStatus.PENDING.value,
        )
    )
    if pending is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You already have a pending booking for this property",
        )

    booking = Booking(
        property_id=prop.id,
        buyer_id=current_user.id,
        seller_id=prop.owner_id,
        booking_type=request.booking_type.value,
        status=BookingStatus.PENDING.value,
        visit_date=request.visit_date,
        visit_time=request.visit_time,
        price_negotiated=request.price_negotiated,
        buyer_message=request.message,
        confirmation_token=secrets.token_hex(16),
    )
    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    logger.info("booking_created", booking_id=booking.id, property_id=prop.id, buyer_id=current_user.id)
    return BookingDetailResponse(booking=BookingResponse.model_validate(booking))


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    role: str = Query("buyer", pattern="^(buyer|seller)$"),
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    paging: PageArgs = Depends(page_args),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BookingListResponse:
    """The caller's bookings as buyer (default) or seller."""
    column = Booking.seller_id if role == "seller" else Booking.buyer_id
    query = select(Booking).where(column == current_user.id)
    if status_filter:
        query = query.where(Booking.status == status_filter.value)
    query = query.order_by(Booking.created_at.desc(), Booking.id.desc())

    page, limit = clamp_page(
        paging.page, paging.limit or settings.seller_page_size, settings.max_page_size
    )
    result = await paginate(db, query, page, limit)
    return BookingListResponse(
        **result.envelope(
            "bookings", [BookingResponse.model_validate(b) for b in result.items]
        )
    )


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BookingDetailResponse:
    booking = await get_booking_or_404(db, booking_id)
    if not booking.is_participant(current_user.id) and not current_user.is_admin:
        raise _forbidden("view this booking")
    return BookingDetailResponse(booking=BookingResponse.model_validate(booking))


@router.put("/{booking_id}/confirm-seller", response_model=BookingDetailResponse)
async def seller_confirm(
    booking_id: int,
    request: BookingNote,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BookingDetailResponse:
    booking = await get_booking_or_404(db, booking_id)
    if booking.seller_id != current_user.id:
        raise _forbidden("confirm this booking")

    ensure_transition(BOOKING_TRANSITIONS, booking.status, BookingStatus.CONFIRMED.value, "booking")
    booking.seller_confirmed_at = datetime.now(timezone.utc)
    if request.note:
        booking.seller_note = request.note
    return await _move(db, booking, BookingStatus.CONFIRMED, current_user)


@router.put("/{booking_id}/confirm-buyer", response_model=BookingDetailResponse)
async def buyer_confirm(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BookingDetailResponse:
    """Buyer acknowledges a booking the seller has already confirmed."""
    booking = await get_booking_or_404(db, booking_id)
    if booking.buyer_id != current_user.id:
        raise _forbidden("confirm this booking")
    if booking.status != BookingStatus.CONFIRMED.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Booking must be confirmed by the seller first",
        )

    booking.buyer_confirmed_at = datetime.now(timezone.utc)
    await db.flush()

    booking = await get_booking_or_404(db, booking_id)
    return BookingDetailResponse(booking=BookingResponse.model_validate(booking))


@router.put("/{booking_id}/cancel", response_model=BookingDetailResponse)
async def cancel_booking(
    booking_id: int,
    request: BookingNote,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BookingDetailResponse:
    booking = await get_booking_or_404(db, booking_id)
    if not booking.is_participant(current_user.id):
        raise _forbidden("cancel this booking")

    ensure_transition(BOOKING_TRANSITIONS, booking.status, BookingStatus.CANCELLED.value, "booking")
    if request.note and current_user.id == booking.seller_id:
        booking.seller_note = request.note
    return await _move(db, booking, BookingStatus.CANCELLED, current_user)


@router.put("/{booking_id}/complete", response_model=BookingDetailResponse)
async def complete_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BookingDetailResponse:
    booking = await get_booking_or_404(db, booking_id)
    if booking.seller_id != current_user.id:
        raise _forbidden("complete this booking")
    return await _move(db, booking, BookingStatus.COMPLETED, current_user)
