"""Booking model for visits, purchases and rentals agreed between two users."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from urbanstay.database import Base


class BookingType(str, Enum):
    VISIT = "visit"
    PURCHASE = "purchase"
    RENT = "rent"


class BookingStatus(str, Enum):
    """Booking lifecycle status."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Booking(Base):
    """Booking requested by a buyer and confirmed by the property's seller."""

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Associations
    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    buyer_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    seller_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Booking Details
    booking_type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=BookingStatus.PENDING.value, nullable=False, index=True
    )
    visit_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    visit_time: Mapped[str] = mapped_column(String(50), nullable=False)
    price_negotiated: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    buyer_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    seller_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Confirmation Tracking
    seller_confirmed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    buyer_confirmed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    confirmation_token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Booking {self.id} ({self.status})>"

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.buyer_id, self.seller_id)
