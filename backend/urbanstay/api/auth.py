"""Authentication API endpoints."""

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from urbanstay.api.properties import get_property_or_404, property_responses
from urbanstay.config import settings
from urbanstay.database import get_db
from urbanstay.models.property import Property
from urbanstay.models.user import Favorite, User, UserRole
from urbanstay.schemas.auth import (
    FavoriteToggleResponse,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    Token,
)
from urbanstay.schemas.common import MessageResponse
from urbanstay.schemas.property import PropertyMatchesResponse
from urbanstay.schemas.user import ProfileUpdate, UserDetailResponse, UserResponse
from urbanstay.utils.logging import get_logger
from urbanstay.utils.security import (
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)

router = APIRouter()
logger = get_logger("api.auth")


def issue_token(user: User) -> Token:
    access_token = create_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        expires_delta=timedelta(minutes=settings.jwt_expire_minutes),
    )
    return Token(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.jwt_expire_minutes * 60,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> Token:
    """Register a new buyer or seller account."""
    result = await db.execute(select(User).where(User.email == request.email))
    existing_user = result.scalar_one_or_none()

    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = User(
        email=request.email,
        hashed_password=get_password_hash(request.password),
        full_name=request.full_name,
        phone=request.phone,
        role=UserRole(request.role).value,
        company_name=request.company_name,
        rera_number=request.rera_number,
        is_active=True,
        is_verified=False,
    )

    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id, role=user.role)
    return issue_token(user)


@router.post("/login", response_model=Token)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> Token:
    """Authenticate user and return JWT token."""
    result = await db.execute(select(User).where(User.email == request.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(request.password, user.hashed_password):
        logger.warning("login_failed", email=request.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated",
        )

    user.last_login = datetime.now(timezone.utc)
    await db.flush()
    await db.refresh(user)

    return issue_token(user)


@router.get("/me", response_model=UserDetailResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> UserDetailResponse:
    """Get current authenticated user information."""
    return UserDetailResponse(user=UserResponse.model_validate(current_user))


@router.put("/profile", response_model=UserDetailResponse)
async def update_profile(
    request: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UserDetailResponse:
    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)

    await db.flush()
    await db.refresh(current_user)
    return UserDetailResponse(user=UserResponse.model_validate(current_user))


@router.put("/password", response_model=MessageResponse)
async def change_password(
    request: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Change the current user's password."""
    if not verify_password(request.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    current_user.hashed_password = get_password_hash(request.new_password)
    await db.flush()

    logger.info("password_changed", user_id=current_user.id)
    return MessageResponse(message="Password changed successfully")


@router.post("/refresh", response_model=Token)
async def refresh_token(
    current_user: User = Depends(get_current_user),
) -> Token:
    """Refresh the access token."""
    return issue_token(current_user)


async def favorite_ids(db: AsyncSession, user_id: int) -> list:
    result = await db.execute(
        select(Favorite.property_id)
        .where(Favorite.user_id == user_id)
        .order_by(Favorite.id)
    )
    return list(result.scalars().all())


@router.put("/favorites/{property_id}", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    property_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> FavoriteToggleResponse:
    """Add the property to favorites, or remove it when already there."""
    await get_property_or_404(db, property_id)

    result = await db.execute(
        select(Favorite).where(
            Favorite.user_id == current_user.id,
            Favorite.property_id == property_id,
        )
    )
    existing = result.scalar_one_or_none()

    if existing:
        await db.execute(delete(Favorite).where(Favorite.id == existing.id))
        is_favorite = False
    else:
        db.add(Favorite(user_id=current_user.id, property_id=property_id))
        is_favorite = True
    await db.flush()

    return FavoriteToggleResponse(
        is_favorite=is_favorite,
        favorites=await favorite_ids(db, current_user.id),
    )


@router.get("/favorites", response_model=PropertyMatchesResponse)
async def list_favorites(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PropertyMatchesResponse:
    result = await db.execute(
        select(Property)
        .join(Favorite, Favorite.property_id == Property.id)
        .options(selectinload(Property.owner))
        .where(Favorite.user_id == current_user.id)
        .order_by(Favorite.id.desc())
    )
    properties = list(result.scalars().all())
    return PropertyMatchesResponse(count=len(properties), properties=property_responses(properties))
