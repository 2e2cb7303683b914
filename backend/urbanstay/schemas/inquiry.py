"""Inquiry schemas for request/response validation."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from urbanstay.models.inquiry import InquiryStatus, InquiryType
from urbanstay.schemas.common import PaginatedResponse


class InquiryCreate(BaseModel):
    property_id: int
    message: str = Field(..., min_length=1, max_length=1000)
    inquiry_type: InquiryType = InquiryType.GENERAL
    preferred_visit_date: Optional[datetime] = None
    preferred_visit_time: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None


class InquiryReplyCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=1000)


class InquiryStatusUpdate(BaseModel):
    status: InquiryStatus


class InquiryReplyResponse(BaseModel):
    id: int
    responder_id: int
    message: str
    created_at: datetime

    class Config:
        from_attributes = True


class InquiryResponse(BaseModel):
    id: int
    property_id: int
    sender_id: int
    receiver_id: int
    message: str
    inquiry_type: str
    preferred_visit_date: Optional[datetime] = None
    preferred_visit_time: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    status: str
    is_read: bool
    read_at: Optional[datetime] = None
    replies: List[InquiryReplyResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InquiryDetailResponse(BaseModel):
    success: bool = True
    inquiry: InquiryResponse


class InquiryListResponse(PaginatedResponse):
    inquiries: List[InquiryResponse]
