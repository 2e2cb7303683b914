"""Property review endpoints."""

import json
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from urbanstay.api.properties import get_property_or_404
from urbanstay.config import settings
from urbanstay.database import get_db
from urbanstay.models.review import Review, ReviewStatus, ReviewVote
from urbanstay.models.user import User
from urbanstay.schemas.common import MessageResponse
from urbanstay.schemas.review import (
    CategoryRatings,
    OwnerResponseRequest,
    ReviewCreate,
    ReviewDetailResponse,
    ReviewListResponse,
    ReviewModerationRequest,
    ReviewResponse,
    ReviewUpdate,
    ReviewVoteRequest,
    ReviewVoteResponse,
)
from urbanstay.services.pagination import PageArgs, clamp_page, page_args, paginate
from urbanstay.utils.logging import AuditLogger, get_logger
from urbanstay.utils.security import ensure_owner_or_admin, get_current_user, require_admin
from urbanstay.utils.transitions import REVIEW_TRANSITIONS, ensure_transition

router = APIRouter()
logger = get_logger("api.reviews")


def review_to_response(review: Review) -> ReviewResponse:
    """Convert Review model to response schema."""
    return ReviewResponse(
        id=review.id,
        property_id=review.property_id,
        user_id=review.user_id,
        rating=review.rating,
        title=review.title,
        comment=review.comment,
        ratings=CategoryRatings(**json.loads(review.ratings)) if review.ratings else None,
        pros=json.loads(review.pros) if review.pros else [],
        cons=json.loads(review.cons) if review.cons else [],
        status=review.status,
        rejection_reason=review.rejection_reason,
        helpful_votes=review.helpful_votes,
        owner_response=review.owner_response,
        owner_responded_at=review.owner_responded_at,
        created_at=review.created_at,
        updated_at=review.updated_at,
    )


async def get_review_or_404(db: AsyncSession, review_id: int) -> Review:
    result = await db.execute(
        select(Review)
        .where(Review.id == review_id)
        .execution_options(populate_existing=True)
    )
    review = result.scalar_one_or_none()
    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found",
        )
    return review


def _already_reviewed() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Already reviewed",
    )


async def _review_page(db: AsyncSession, query, page: int, limit: Optional[int]) -> ReviewListResponse:
    query = query.order_by(Review.created_at.desc(), Review.id.desc())
    page, limit = clamp_page(page, limit or settings.seller_page_size, settings.max_page_size)
    result = await paginate(db, query, page, limit)
    return ReviewListResponse(
        **result.envelope("reviews", [review_to_response(r) for r in result.items])
    )


@router.post("/", response_model=ReviewDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    request: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReviewDetailResponse:
    """One review per (property, user); new reviews wait for moderation."""
    prop = await get_property_or_404(db, request.property_id)
    if prop.owner_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot review your own property",
        )

    existing = await db.scalar(
        select(Review.id).where(
            Review.property_id == prop.id,
            Review.user_id == current_user.id,
        )
    )
    if existing is not None:
        raise _already_reviewed()

    review = Review(
        property_id=prop.id,
        user_id=current_user.id,
        rating=request.rating,
        title=request.title,
        comment=request.comment,
        ratings=request.ratings.model_dump_json(exclude_none=True) if request.ratings else None,
        pros=json.dumps(request.pros),
        cons=json.dumps(request.cons),
        status=ReviewStatus.PENDING.value,
        helpful_votes=0,
    )
    db.add(review)
    try:
        await db.flush()
    except IntegrityError:
        # concurrent duplicate slipped past the pre-check
        raise _already_reviewed()
    await db.refresh(review)

    logger.info("review_created", review_id=review.id, property_id=prop.id, user_id=current_user.id)
    return ReviewDetailResponse(review=review_to_response(review))


@router.get("/property/{property_id}", response_model=ReviewListResponse)
async def get_property_reviews(
    property_id: int,
    paging: PageArgs = Depends(page_args),
    db: AsyncSession = Depends(get_db),
) -> ReviewListResponse:
    """Approved reviews only."""
    query = select(Review).where(
        Review.property_id == property_id,
        Review.status == ReviewStatus.APPROVED.value,
    )
    return await _review_page(db, query, paging.page, paging.limit)


@router.get("/my", response_model=ReviewListResponse)
async def get_my_reviews(
    paging: PageArgs = Depends(page_args),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReviewListResponse:
    query = select(Review).where(Review.user_id == current_user.id)
    return await _review_page(db, query, paging.page, paging.limit)


@router.get("/pending", response_model=ReviewListResponse)
async def get_pending_reviews(
    paging: PageArgs = Depends(page_args),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ReviewListResponse:
    query = select(Review).where(Review.status == ReviewStatus.PENDING.value)
    return await _review_page(db, query, paging.page, paging.limit)


@router.put("/{review_id}", response_model=ReviewDetailResponse)
async def update_review(
    review_id: int,
    request: ReviewUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReviewDetailResponse:
    """Author edit. The review goes back to moderation."""
    review = await get_review_or_404(db, review_id)
    if review.user_id != current_user.id:
        AuditLogger(current_user.id, "review").denied(review.id, "not_author")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to update this review",
        )

    update_data = request.model_dump(exclude_unset=True)
    if "ratings" in update_data:
        ratings = request.ratings
        review.ratings = ratings.model_dump_json(exclude_none=True) if ratings else None
        update_data.pop("ratings")
    for field in ("pros", "cons"):
        if field in update_data:
            setattr(review, field, json.dumps(update_data.pop(field) or []))
    for field, value in update_data.items():
        if value is not None:
            setattr(review, field, value)

    review.status = ReviewStatus.PENDING.value
    review.rejection_reason = None

    await db.flush()
    review = await get_review_or_404(db, review_id)
    return ReviewDetailResponse(review=review_to_response(review))


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    review = await get_review_or_404(db, review_id)
    ensure_owner_or_admin(review.user_id, current_user, "delete this review")

    await db.delete(review)
    await db.flush()
    return MessageResponse(message="Review deleted successfully")


@router.post("/{review_id}/vote", response_model=ReviewVoteResponse)
async def vote_review(
    review_id: int,
    request: ReviewVoteRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReviewVoteResponse:
    """Record or change the caller's vote; ``helpful_votes`` is recounted."""
    review = await get_review_or_404(db, review_id)
    if review.user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot vote on your own review",
        )

    result = await db.execute(
        select(ReviewVote).where(
            ReviewVote.review_id == review.id,
            ReviewVote.user_id == current_user.id,
        )
    )
    vote = result.scalar_one_or_none()
    if vote:
        vote.is_helpful = request.is_helpful
    else:
        db.add(ReviewVote(review_id=review.id, user_id=current_user.id, is_helpful=request.is_helpful))
    await db.flush()

    review.helpful_votes = await db.scalar(
        select(func.count(ReviewVote.id)).where(
            ReviewVote.review_id == review.id,
            ReviewVote.is_helpful.is_(True),
        )
    ) or 0
    await db.flush()

    return ReviewVoteResponse(helpful_votes=review.helpful_votes)


@router.post("/{review_id}/respond", response_model=ReviewDetailResponse)
async def respond_to_review(
    review_id: int,
    request: OwnerResponseRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReviewDetailResponse:
    """Public reply from the property owner."""
    review = await get_review_or_404(db, review_id)
    prop = await get_property_or_404(db, review.property_id)
    if prop.owner_id != current_user.id:
        AuditLogger(current_user.id, "review").denied(review.id, "not_property_owner")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the property owner can respond to this review",
        )

    review.owner_response = request.message
    review.owner_responded_at = datetime.now(timezone.utc)

    await db.flush()
    review = await get_review_or_404(db, review_id)
    return ReviewDetailResponse(review=review_to_response(review))


@router.put("/{review_id}/moderate", response_model=ReviewDetailResponse)
async def moderate_review(
    review_id: int,
    request: ReviewModerationRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ReviewDetailResponse:
    review = await get_review_or_404(db, review_id)
    new_status = request.status.value
    ensure_transition(REVIEW_TRANSITIONS, review.status, new_status, "review")

    if new_status != review.status:
        AuditLogger(current_user.id, "review").status_changed(review.id, review.status, new_status)
    review.status = new_status
    review.rejection_reason = (
        request.rejection_reason if new_status == ReviewStatus.REJECTED.value else None
    )

    await db.flush()
    review = await get_review_or_404(db, review_id)
    return ReviewDetailResponse(review=review_to_response(review))
