"""Saved-search alert model."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from urbanstay.database import Base


class AlertFrequency(str, Enum):
    """How often the owner wants to hear about new matches."""
    INSTANT = "instant"
    DAILY = "daily"
    WEEKLY = "weekly"


class Alert(Base):
    """A user's saved search, re-evaluated against live inventory on demand."""

    __tablename__ = "alerts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Normalized PropertyCriteria, stored as JSON
    criteria: Mapped[str] = mapped_column(Text, nullable=False, default="{}")

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    frequency: Mapped[str] = mapped_column(
        String(20), default=AlertFrequency.DAILY.value, nullable=False
    )
    last_matched_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Alert {self.id} ({self.name})>"
