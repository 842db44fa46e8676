"""
User schemas.
"""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, EmailStr, ConfigDict, field_validator

from franchise_hub.core.roles import ROLE_NAMES


class UserResponse(BaseModel):
    """User response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: EmailStr
    name: str
    role: str
    status: str
    is_active: bool
    profile_completed: bool
    phone: str | None = None
    nationality: str | None = None
    state: str | None = None
    city: str | None = None
    address: str | None = None
    avatar_url: str | None = None
    created_at: datetime
    last_login_at: datetime | None = None


class AdminUserResponse(UserResponse):
    """User as seen by admins, including lockout state."""
    failed_login_attempts: int
    last_failed_login_at: datetime | None = None
    locked_until: datetime | None = None


class UserListResponse(BaseModel):
    """Paginated user list response."""
    users: list[AdminUserResponse]
    total: int
    page: int
    per_page: int


class RoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        if v not in ROLE_NAMES:
            raise ValueError(f"Role must be one of: {', '.join(sorted(ROLE_NAMES))}")
        return v
