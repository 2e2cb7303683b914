"""Property model for real estate listings."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from urbanstay.database import Base


class ListingType(str, Enum):
    """Whether the property is offered for sale or rent."""
    BUY = "buy"
    RENT = "rent"


class PropertyType(str, Enum):
    """Property type enumeration."""
    APARTMENT = "apartment"
    VILLA = "villa"
    HOUSE = "house"
    PLOT = "plot"
    COMMERCIAL = "commercial"
    OFFICE = "office"
    PG = "pg"


class PropertyStatus(str, Enum):
    """Property availability status."""
    AVAILABLE = "available"
    SOLD = "sold"
    RENTED = "rented"


class Furnishing(str, Enum):
    UNFURNISHED = "unfurnished"
    SEMI_FURNISHED = "semi-furnished"
    FULLY_FURNISHED = "fully-furnished"


class PossessionStatus(str, Enum):
    READY_TO_MOVE = "ready-to-move"
    UNDER_CONSTRUCTION = "under-construction"


# Statuses shown to buyers when no explicit status filter is given.
PUBLIC_STATUSES = (
    PropertyStatus.AVAILABLE.value,
    PropertyStatus.SOLD.value,
    PropertyStatus.RENTED.value,
)


class Property(Base):
    """Property model for real estate listings."""

    __tablename__ = "properties"
    # Ids of deleted listings are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(300), unique=True, index=True, nullable=False)

    # Basic Information
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    listing_type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    property_type: Mapped[str] = mapped_column(
        String(50), default=PropertyType.APARTMENT.value, index=True
    )

    # Location
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    pincode: Mapped[str] = mapped_column(String(10), nullable=False)
    locality: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Pricing
    price: Mapped[float] = mapped_column(Float, nullable=False, index=True)

    # Specifications
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    carpet_area: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    built_up_area: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    floor_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    total_floors: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    furnishing: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    facing: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    age_of_property: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    possession_status: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Features (stored as JSON strings)
    amenities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON array
    highlights: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON array
    images: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON array of objects

    # Ownership
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    owner = relationship("User", lazy="raise")

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default=PropertyStatus.AVAILABLE.value, nullable=False, index=True
    )
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    verified_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    featured_until: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Counters
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    inquiry_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Property {self.title} ({self.city})>"

    @property
    def is_featured_active(self) -> bool:
        """Featured flag is only honoured until ``featured_until``."""
        if not self.is_featured or self.featured_until is None:
            return False
        until = self.featured_until
        if until.tzinfo is None:
            until = until.replace(tzinfo=timezone.utc)
        return until >= datetime.now(timezone.utc)
