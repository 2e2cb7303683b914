"""API package initialization."""

from urbanstay.api.auth import router as auth_router
from urbanstay.api.properties import router as properties_router
from urbanstay.api.alerts import router as alerts_router
from urbanstay.api.inquiries import router as inquiries_router
from urbanstay.api.reviews import router as reviews_router
from urbanstay.api.bookings import router as bookings_router
from urbanstay.api.admin import router as admin_router

__all__ = [
    "auth_router",
    "properties_router",
    "alerts_router",
    "inquiries_router",
    "reviews_router",
    "bookings_router",
    "admin_router",
]
