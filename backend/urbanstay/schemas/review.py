"""Review schemas for request/response validation."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from urbanstay.models.review import ReviewStatus
from urbanstay.schemas.common import PaginatedResponse


class CategoryRatings(BaseModel):
    location: Optional[int] = Field(None, ge=1, le=5)
    value_for_money: Optional[int] = Field(None, ge=1, le=5)
    amenities: Optional[int] = Field(None, ge=1, le=5)
    connectivity: Optional[int] = Field(None, ge=1, le=5)
    safety: Optional[int] = Field(None, ge=1, le=5)


class ReviewCreate(BaseModel):
    property_id: int
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=1, max_length=100)
    comment: str = Field(..., min_length=1, max_length=2000)
    ratings: Optional[CategoryRatings] = None
    pros: List[str] = []
    cons: List[str] = []


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    comment: Optional[str] = Field(None, min_length=1, max_length=2000)
    ratings: Optional[CategoryRatings] = None
    pros: Optional[List[str]] = None
    cons: Optional[List[str]] = None


class ReviewVoteRequest(BaseModel):
    is_helpful: bool


class OwnerResponseRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=1000)


class ReviewModerationRequest(BaseModel):
    status: ReviewStatus
    rejection_reason: Optional[str] = Field(None, max_length=500)


class ReviewResponse(BaseModel):
    id: int
    property_id: int
    user_id: int
    rating: int
    title: str
    comment: str
    ratings: Optional[CategoryRatings] = None
    pros: List[str] = []
    cons: List[str] = []
    status: str
    rejection_reason: Optional[str] = None
    helpful_votes: int
    owner_response: Optional[str] = None
    owner_responded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ReviewDetailResponse(BaseModel):
    success: bool = True
    review: ReviewResponse


class ReviewListResponse(PaginatedResponse):
    reviews: List[ReviewResponse]


class ReviewVoteResponse(BaseModel):
    success: bool = True
    helpful_votes: int
