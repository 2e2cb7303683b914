"""Inquiry model for buyer-to-owner conversations about a listing."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from urbanstay.database import Base


class InquiryType(str, Enum):
    """Type of inquiry."""
    GENERAL = "general"
    SCHEDULE_VISIT = "schedule-visit"
    PRICE_NEGOTIATION = "price-negotiation"
    DOCUMENTS = "documents"
    OTHER = "other"


class InquiryStatus(str, Enum):
    """Inquiry lifecycle status."""
    PENDING = "pending"
    RESPONDED = "responded"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Inquiry(Base):
    """A message thread started by a prospective buyer or renter."""

    __tablename__ = "inquiries"
    __table_args__ = (
        Index("ix_inquiries_property_sender", "property_id", "sender_id"),
        Index("ix_inquiries_receiver_status", "receiver_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Participants
    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    sender_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    receiver_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    # Inquiry Details
    message: Mapped[str] = mapped_column(Text, nullable=False)
    inquiry_type: Mapped[str] = mapped_column(String(30), default=InquiryType.GENERAL.value)
    preferred_visit_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    preferred_visit_time: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Contact override
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default=InquiryStatus.PENDING.value, nullable=False
    )
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    replies = relationship(
        "InquiryReply",
        order_by="InquiryReply.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Inquiry {self.id} ({self.status})>"

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.sender_id, self.receiver_id)


class InquiryReply(Base):
    """One message in an inquiry's reply thread."""

    __tablename__ = "inquiry_replies"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    inquiry_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("inquiries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    responder_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
