"""Inquiry endpoints: buyers contacting listing owners."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from urbanstay.api.properties import get_property_or_404
from urbanstay.config import settings
from urbanstay.database import get_db
from urbanstay.models.inquiry import Inquiry, InquiryReply, InquiryStatus
from urbanstay.models.user import User
from urbanstay.schemas.inquiry import (
    InquiryCreate,
    InquiryDetailResponse,
    InquiryListResponse,
    InquiryReplyCreate,
    InquiryResponse,
    InquiryStatusUpdate,
)
from urbanstay.services.pagination import PageArgs, clamp_page, page_args, paginate
from urbanstay.services.property_search import increment_inquiry_count
from urbanstay.utils.logging import AuditLogger, get_logger
from urbanstay.utils.security import get_current_user
from urbanstay.utils.transitions import INQUIRY_TRANSITIONS, ensure_transition

router = APIRouter()
logger = get_logger("api.inquiries")


async def get_inquiry_or_404(db: AsyncSession, inquiry_id: int) -> Inquiry:
    result = await db.execute(
        select(Inquiry)
        .options(selectinload(Inquiry.replies))
        .where(Inquiry.id == inquiry_id)
        .execution_options(populate_existing=True)
    )
    inquiry = result.scalar_one_or_none()
    if not inquiry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Inquiry not found",
        )
    return inquiry


def ensure_participant(inquiry: Inquiry, user: User) -> None:
    if not inquiry.is_participant(user.id) and not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this inquiry",
        )


async def list_inquiries(
    db: AsyncSession,
    column,
    user_id: int,
    page: int,
    limit: Optional[int],
    status_filter: Optional[InquiryStatus],
) -> InquiryListResponse:
    query = select(Inquiry).where(column == user_id)
    if status_filter:
        query = query.where(Inquiry.status == status_filter.value)
    query = query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc())

    page, limit = clamp_page(page, limit or settings.seller_page_size, settings.max_page_size)
    result = await paginate(db, query, page, limit)
    return InquiryListResponse(
        **result.envelope(
            "inquiries", [InquiryResponse.model_validate(i) for i in result.items]
        )
    )


@router.post("/", response_model=InquiryDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_inquiry(
    request: InquiryCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InquiryDetailResponse:
    """Send an inquiry to the listing owner."""
    prop = await get_property_or_404(db, request.property_id)
    if prop.owner_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot send an inquiry for your own property",
        )

    inquiry = Inquiry(
        property_id=prop.id,
        sender_id=current_user.id,
        receiver_id=prop.owner_id,
        message=request.message,
        inquiry_type=request.inquiry_type.value,
        preferred_visit_date=request.preferred_visit_date,
        preferred_visit_time=request.preferred_visit_time,
        phone=request.phone or current_user.phone,
        email=request.email or current_user.email,
        status=InquiryStatus.PENDING.value,
        is_read=False,
    )
    db.add(inquiry)
    await db.flush()
    await increment_inquiry_count(db, prop.id)

    inquiry = await get_inquiry_or_404(db, inquiry.id)
    logger.info(
        "inquiry_created",
        inquiry_id=inquiry.id,
        property_id=prop.id,
        sender_id=current_user.id,
    )
    return InquiryDetailResponse(inquiry=InquiryResponse.model_validate(inquiry))


@router.get("/sent", response_model=InquiryListResponse)
async def get_sent_inquiries(
    paging: PageArgs = Depends(page_args),
    status_filter: Optional[InquiryStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InquiryListResponse:
    return await list_inquiries(
        db, Inquiry.sender_id, current_user.id, paging.page, paging.limit, status_filter
    )


@router.get("/received", response_model=InquiryListResponse)
async def get_received_inquiries(
    paging: PageArgs = Depends(page_args),
    status_filter: Optional[InquiryStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InquiryListResponse:
    return await list_inquiries(
        db, Inquiry.receiver_id, current_user.id, paging.page, paging.limit, status_filter
    )


@router.get("/{inquiry_id}", response_model=InquiryDetailResponse)
async def get_inquiry(
    inquiry_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InquiryDetailResponse:
    """Participants only. The receiver opening it marks it read."""
    inquiry = await get_inquiry_or_404(db, inquiry_id)
    ensure_participant(inquiry, current_user)

    if inquiry.receiver_id == current_user.id and not inquiry.is_read:
        inquiry.is_read = True
        inquiry.read_at = datetime.now(timezone.utc)
        await db.flush()
        inquiry = await get_inquiry_or_404(db, inquiry_id)

    return InquiryDetailResponse(inquiry=InquiryResponse.model_validate(inquiry))


@router.post("/{inquiry_id}/replies", response_model=InquiryDetailResponse)
async def reply_to_inquiry(
    inquiry_id: int,
    request: InquiryReplyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InquiryDetailResponse:
    """Append to the thread. The receiver's first reply marks it responded."""
    inquiry = await get_inquiry_or_404(db, inquiry_id)
    if not inquiry.is_participant(current_user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to reply to this inquiry",
        )

    db.add(
        InquiryReply(
            inquiry_id=inquiry.id,
            responder_id=current_user.id,
            message=request.message,
            created_at=datetime.now(timezone.utc),
        )
    )
    if (
        inquiry.receiver_id == current_user.id
        and inquiry.status == InquiryStatus.PENDING.value
    ):
        inquiry.status = InquiryStatus.RESPONDED.value

    await db.flush()
    inquiry = await get_inquiry_or_404(db, inquiry_id)
    return InquiryDetailResponse(inquiry=InquiryResponse.model_validate(inquiry))


@router.put("/{inquiry_id}/status", response_model=InquiryDetailResponse)
async def update_inquiry_status(
    inquiry_id: int,
    request: InquiryStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> InquiryDetailResponse:
    inquiry = await get_inquiry_or_404(db, inquiry_id)
    if not inquiry.is_participant(current_user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to update this inquiry",
        )

    new_status = request.status.value
    ensure_transition(INQUIRY_TRANSITIONS, inquiry.status, new_status, "inquiry")
    if new_status != inquiry.status:
        AuditLogger(current_user.id, "inquiry").status_changed(
            inquiry.id, inquiry.status, new_status
        )
        inquiry.status = new_status
        await db.flush()

    inquiry = await get_inquiry_or_404(db, inquiry_id)
    return InquiryDetailResponse(inquiry=InquiryResponse.model_validate(inquiry))
