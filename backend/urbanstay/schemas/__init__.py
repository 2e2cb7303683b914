"""Schemas package initialization."""

from urbanstay.schemas.alert import (
    AlertCreate,
    AlertDetailResponse,
    AlertListResponse,
    AlertResponse,
    AlertUpdate,
)
from urbanstay.schemas.auth import (
    FavoriteToggleResponse,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    Token,
    TokenPayload,
)
from urbanstay.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingNote,
    BookingResponse,
)
from urbanstay.schemas.common import MessageResponse, PaginatedResponse
from urbanstay.schemas.inquiry import (
    InquiryCreate,
    InquiryDetailResponse,
    InquiryListResponse,
    InquiryReplyCreate,
    InquiryResponse,
    InquiryStatusUpdate,
)
from urbanstay.schemas.property import (
    PropertyCreate,
    PropertyDetailResponse,
    PropertyListResponse,
    PropertyMatchesResponse,
    PropertyResponse,
    PropertyUpdate,
)
from urbanstay.schemas.review import (
    ReviewCreate,
    ReviewDetailResponse,
    ReviewListResponse,
    ReviewModerationRequest,
    ReviewResponse,
    ReviewUpdate,
)
from urbanstay.schemas.user import (
    OwnerSummary,
    ProfileUpdate,
    UserListResponse,
    UserResponse,
    UserRoleUpdate,
)

__all__ = [
    # Common
    "MessageResponse",
    "PaginatedResponse",
    # Auth
    "Token",
    "TokenPayload",
    "LoginRequest",
    "RegisterRequest",
    "PasswordChangeRequest",
    "FavoriteToggleResponse",
    # User
    "UserResponse",
    "UserListResponse",
    "UserRoleUpdate",
    "ProfileUpdate",
    "OwnerSummary",
    # Property
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyDetailResponse",
    "PropertyListResponse",
    "PropertyMatchesResponse",
    # Alert
    "AlertCreate",
    "AlertUpdate",
    "AlertResponse",
    "AlertDetailResponse",
    "AlertListResponse",
    # Inquiry
    "InquiryCreate",
    "InquiryReplyCreate",
    "InquiryStatusUpdate",
    "InquiryResponse",
    "InquiryDetailResponse",
    "InquiryListResponse",
    # Review
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewModerationRequest",
    "ReviewResponse",
    "ReviewDetailResponse",
    "ReviewListResponse",
    # Booking
    "BookingCreate",
    "BookingNote",
    "BookingResponse",
    "BookingDetailResponse",
    "BookingListResponse",
]
