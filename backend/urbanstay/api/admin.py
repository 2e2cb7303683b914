"""Admin API endpoints for user and inventory management."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanstay.api.properties import list_all_properties
from urbanstay.config import settings
from urbanstay.database import get_db
from urbanstay.models.user import User, UserRole
from urbanstay.schemas.common import MessageResponse
from urbanstay.schemas.property import PropertyListResponse
from urbanstay.schemas.user import (
    UserDetailResponse,
    UserListResponse,
    UserResponse,
    UserRoleUpdate,
)
from urbanstay.services.pagination import PageArgs, clamp_page, page_args, paginate
from urbanstay.utils.logging import AuditLogger
from urbanstay.utils.security import require_admin

router = APIRouter()


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


@router.get("/users", response_model=UserListResponse)
async def list_users(
    paging: PageArgs = Depends(page_args),
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> UserListResponse:
    """List all users. Admin only."""
    query = select(User)

    if role:
        query = query.where(User.role == role.value)
    if is_active is not None:
        query = query.where(User.is_active == is_active)
    if search:
        search_term = f"%{search}%"
        query = query.where(
            or_(User.email.ilike(search_term), User.full_name.ilike(search_term))
        )
    query = query.order_by(User.created_at.desc(), User.id.desc())

    page, limit = clamp_page(
        paging.page, paging.limit or settings.admin_page_size, settings.max_page_size
    )
    result = await paginate(db, query, page, limit)
    return UserListResponse(
        **result.envelope("users", [UserResponse.model_validate(u) for u in result.items])
    )


@router.put("/users/{user_id}/role", response_model=UserDetailResponse)
async def update_user_role(
    user_id: int,
    request: UserRoleUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> UserDetailResponse:
    """Update user role. Admin only."""
    user = await get_user_or_404(db, user_id)

    if user.id == current_user.id and request.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot remove your own admin role",
        )

    AuditLogger(current_user.id, "user").log(
        "role_changed", user.id, old_role=user.role, new_role=request.role.value
    )
    user.role = request.role.value
    await db.flush()

    user = await get_user_or_404(db, user_id)
    return UserDetailResponse(user=UserResponse.model_validate(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def deactivate_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> MessageResponse:
    """Deactivate a user. Admin only. The account is kept for history."""
    user = await get_user_or_404(db, user_id)

    if user.id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot deactivate your own account",
        )

    user.is_active = False
    await db.flush()

    AuditLogger(current_user.id, "user").log("user_deactivated", user.id)
    return MessageResponse(message="User deactivated successfully")


@router.get("/properties", response_model=PropertyListResponse)
async def list_properties_admin(
    paging: PageArgs = Depends(page_args),
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    sort: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> PropertyListResponse:
    """Every listing regardless of status, same paging contract as search."""
    return await list_all_properties(
        db,
        page=paging.page,
        limit=paging.limit or settings.admin_page_size,
        status_filter=status_filter,
        search=search,
        sort=sort,
    )
