"""Authentication schemas for request/response validation."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from urbanstay.schemas.user import UserResponse


class TokenPayload(BaseModel):
    """JWT token payload."""
    sub: int  # User ID
    email: str
    role: str
    exp: datetime


class Token(BaseModel):
    """Token response schema."""
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: Optional[UserResponse] = None


class LoginRequest(BaseModel):
    """Login request schema."""
    email: EmailStr
    password: str = Field(..., min_length=6)


class RegisterRequest(BaseModel):
    """User registration request schema."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=2, max_length=100)
    phone: Optional[str] = Field(None, pattern=r"^[0-9]{10}$")
    role: Literal["user", "seller"] = "user"
    company_name: Optional[str] = Field(None, max_length=255)
    rera_number: Optional[str] = Field(None, max_length=100)


class PasswordChangeRequest(BaseModel):
    """Password change request schema."""
    current_password: str
    new_password: str = Field(..., min_length=6)


class FavoriteToggleResponse(BaseModel):
    success: bool = True
    is_favorite: bool
    favorites: List[int]
