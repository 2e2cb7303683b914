"""Booking schemas for request/response validation."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from urbanstay.models.booking import BookingType
from urbanstay.schemas.common import PaginatedResponse


class BookingCreate(BaseModel):
    property_id: int
    booking_type: BookingType
    visit_date: datetime
    visit_time: str = Field(..., min_length=1, max_length=50)
    message: Optional[str] = Field(None, max_length=500)
    price_negotiated: Optional[float] = Field(None, ge=0)


class BookingNote(BaseModel):
    note: Optional[str] = Field(None, max_length=500)


class BookingResponse(BaseModel):
    id: int
    property_id: int
    buyer_id: int
    seller_id: int
    booking_type: str
    status: str
    visit_date: datetime
    visit_time: str
    price_negotiated: Optional[float] = None
    buyer_message: Optional[str] = None
    seller_note: Optional[str] = None
    seller_confirmed_at: Optional[datetime] = None
    buyer_confirmed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BookingDetailResponse(BaseModel):
    success: bool = True
    booking: BookingResponse


class BookingListResponse(PaginatedResponse):
    bookings: List[BookingResponse]
