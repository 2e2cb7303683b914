"""User schemas for request/response validation."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from urbanstay.models.user import UserRole
from urbanstay.schemas.common import PaginatedResponse


class UserBase(BaseModel):
    """Base user schema."""
    email: EmailStr
    full_name: str = Field(..., min_length=2, max_length=100)
    phone: Optional[str] = Field(None, pattern=r"^[0-9]{10}$")


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's own profile."""
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, pattern=r"^[0-9]{10}$")
    avatar: Optional[str] = Field(None, max_length=500)
    company_name: Optional[str] = Field(None, max_length=255)
    rera_number: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)


class UserRoleUpdate(BaseModel):
    """Schema for updating user role."""
    role: UserRole


class UserResponse(UserBase):
    """User response schema."""
    id: int
    role: str
    avatar: Optional[str] = None
    is_active: bool
    is_verified: bool
    company_name: Optional[str] = None
    rera_number: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class OwnerSummary(BaseModel):
    """Public contact card of a listing owner."""
    id: int
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    company_name: Optional[str] = None

    class Config:
        from_attributes = True


class UserDetailResponse(BaseModel):
    success: bool = True
    user: UserResponse


class UserListResponse(PaginatedResponse):
    """Paginated user list response."""
    users: List[UserResponse]
