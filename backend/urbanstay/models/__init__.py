"""Models package initialization."""

from urbanstay.models.alert import Alert, AlertFrequency
from urbanstay.models.booking import Booking, BookingStatus, BookingType
from urbanstay.models.inquiry import Inquiry, InquiryReply, InquiryStatus, InquiryType
from urbanstay.models.property import (
    Furnishing,
    ListingType,
    PossessionStatus,
    Property,
    PropertyStatus,
    PropertyType,
)
from urbanstay.models.review import Review, ReviewStatus, ReviewVote
from urbanstay.models.user import Favorite, User, UserRole

__all__ = [
    # User
    "User",
    "UserRole",
    "Favorite",
    # Property
    "Property",
    "ListingType",
    "PropertyType",
    "PropertyStatus",
    "Furnishing",
    "PossessionStatus",
    # Alert
    "Alert",
    "AlertFrequency",
    # Inquiry
    "Inquiry",
    "InquiryReply",
    "InquiryStatus",
    "InquiryType",
    # Review
    "Review",
    "ReviewStatus",
    "ReviewVote",
    # Booking
    "Booking",
    "BookingStatus",
    "BookingType",
]
