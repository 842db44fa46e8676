"""
Admin user management routes.
"""

from uuid import UUID
from fastapi import APIRouter, Depends, Query

from franchise_hub.api.dependencies.services import get_user_service
from franchise_hub.core.auth import AdminUser
from franchise_hub.schemas.user import AdminUserResponse, RoleUpdate, UserListResponse
from franchise_hub.services.user import UserService

router = APIRouter()


@router.get("/users", response_model=UserListResponse)
async def list_users(
    _: AdminUser,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    search: str | None = None,
    role: str | None = None,
    user_service: UserService = Depends(get_user_service),
):
    """List all users (admin only)."""
    users, total = await user_service.list_users(
        page=page,
        per_page=per_page,
        search=search,
        role=role,
    )
    return UserListResponse(
        users=[AdminUserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.patch("/users/{user_id}/role", response_model=AdminUserResponse)
async def change_role(
    user_id: UUID,
    data: RoleUpdate,
    _: AdminUser,
    user_service: UserService = Depends(get_user_service),
):
    """Change a user's role. Takes effect on their next login."""
    user = await user_service.change_role(user_id, data.role)
    return AdminUserResponse.model_validate(user)


@router.post("/users/{user_id}/unlock", response_model=AdminUserResponse)
async def unlock_user(
    user_id: UUID,
    _: AdminUser,
    user_service: UserService = Depends(get_user_service),
):
    """Clear a lockout before it expires."""
    user = await user_service.unlock(user_id)
    return AdminUserResponse.model_validate(user)
