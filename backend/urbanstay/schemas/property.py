"""Property schemas for request/response validation."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from urbanstay.models.property import (
    Furnishing,
    ListingType,
    PossessionStatus,
    PropertyStatus,
    PropertyType,
)
from urbanstay.schemas.common import PaginatedResponse
from urbanstay.schemas.user import OwnerSummary


class PropertyLocation(BaseModel):
    address: str = Field(..., min_length=5, max_length=500)
    city: str = Field(..., min_length=2, max_length=100)
    state: str = Field(..., min_length=2, max_length=100)
    pincode: str = Field(..., pattern=r"^[0-9]{6}$")
    locality: Optional[str] = Field(None, max_length=255)


class PropertySpecifications(BaseModel):
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    carpet_area: Optional[float] = Field(None, gt=0)
    built_up_area: Optional[float] = Field(None, gt=0)
    floor_number: Optional[int] = None
    total_floors: Optional[int] = Field(None, ge=1)
    furnishing: Optional[Furnishing] = None
    facing: Optional[str] = Field(None, max_length=30)
    age_of_property: Optional[int] = Field(None, ge=0)
    possession_status: Optional[PossessionStatus] = None


class PropertyImage(BaseModel):
    url: str = Field(..., min_length=1, max_length=2000)
    caption: str = ""
    is_primary: bool = False


def ensure_primary_image(images: List[PropertyImage]) -> List[PropertyImage]:
    """Exactly one primary image; the first one wins when none is marked."""
    if not images:
        return images
    primary_index = next((i for i, img in enumerate(images) if img.is_primary), 0)
    return [
        img.model_copy(update={"is_primary": i == primary_index})
        for i, img in enumerate(images)
    ]


class PropertyBase(BaseModel):
    """Base property schema."""
    title: str = Field(..., min_length=5, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    listing_type: ListingType
    property_type: PropertyType = PropertyType.APARTMENT
    price: float = Field(..., gt=0)


class PropertyCreate(PropertyBase):
    """Schema for creating a new property."""
    location: PropertyLocation
    specifications: PropertySpecifications = PropertySpecifications()
    amenities: List[str] = []
    highlights: List[str] = []
    images: List[PropertyImage] = []

    @field_validator("images")
    @classmethod
    def single_primary(cls, v: List[PropertyImage]) -> List[PropertyImage]:
        return ensure_primary_image(v)


class PropertyUpdate(BaseModel):
    """Schema for updating property information."""
    title: Optional[str] = Field(None, min_length=5, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    listing_type: Optional[ListingType] = None
    property_type: Optional[PropertyType] = None
    price: Optional[float] = Field(None, gt=0)
    location: Optional[PropertyLocation] = None
    specifications: Optional[PropertySpecifications] = None
    amenities: Optional[List[str]] = None
    highlights: Optional[List[str]] = None
    images: Optional[List[PropertyImage]] = None
    status: Optional[PropertyStatus] = None

    @field_validator("images")
    @classmethod
    def single_primary(cls, v: Optional[List[PropertyImage]]) -> Optional[List[PropertyImage]]:
        return ensure_primary_image(v) if v is not None else v


class PropertyResponse(PropertyBase):
    """Property response schema."""
    id: int
    slug: str
    location: PropertyLocation
    specifications: PropertySpecifications
    amenities: List[str] = []
    highlights: List[str] = []
    images: List[PropertyImage] = []
    owner_id: int
    owner: Optional[OwnerSummary] = None
    status: str
    is_verified: bool
    is_featured: bool
    featured_until: Optional[datetime] = None
    views: int
    inquiry_count: int
    created_at: datetime
    updated_at: datetime


class PropertyDetailResponse(BaseModel):
    success: bool = True
    property: PropertyResponse


class PropertyListResponse(PaginatedResponse):
    """Paginated property list; shared by search, seller and admin views."""
    properties: List[PropertyResponse]


class PropertyMatchesResponse(BaseModel):
    """Unpaged property list (featured, similar, alert matches, favorites)."""
    success: bool = True
    count: int
    properties: List[PropertyResponse]


class StatusStat(BaseModel):
    status: str
    count: int
    total_views: int
    total_inquiries: int


class MyPropertiesResponse(PropertyListResponse):
    stats: List[StatusStat] = []


class CityStat(BaseModel):
    city: str
    count: int
    avg_price: float


class CityStatsResponse(BaseModel):
    success: bool = True
    cities: List[CityStat]


class FeaturePropertyRequest(BaseModel):
    days: Optional[int] = Field(None, ge=1, le=365)


class AdminStats(BaseModel):
    total_properties: int
    available_properties: int
    verified_properties: int
    featured_properties: int
    by_status: Dict[str, int]
    by_property_type: Dict[str, int]
    by_listing_type: Dict[str, int]


class AdminStatsResponse(BaseModel):
    success: bool = True
    stats: AdminStats
    recent_properties: List[PropertyResponse]
