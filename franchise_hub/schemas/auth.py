"""
Authentication schemas.

Login and registration responses use the camelCase keys the web client
reads (accessToken, userData, userAbilityRules).
"""

import re
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from franchise_hub.core.config import settings

# lower, upper, digit and one of @$!%*#?&
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*#?&]).+$")


class CamelModel(BaseModel):
    """Serializes with camelCase aliases; accepts either form on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(BaseModel):
    """Login request."""
    email: EmailStr
    password: str = Field(min_length=6)
    remember: bool = False


class RegisterRequest(BaseModel):
    """Self-service registration request."""
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=settings.auth.password_min_length, max_length=128)
    password_confirmation: str
    role: str = "franchisor"
    phone: str | None = Field(None, max_length=30)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if not PASSWORD_PATTERN.match(v):
            raise ValueError(
                "Password must contain at least one lowercase letter, one uppercase "
                "letter, one number and one special character (@$!%*#?&)."
            )
        return v

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        if v not in settings.auth.self_registration_roles:
            allowed = ", ".join(settings.auth.self_registration_roles)
            raise ValueError(f"Role must be one of: {allowed}")
        return v

    @field_validator("password_confirmation")
    @classmethod
    def validate_confirmation(cls, v: str, info) -> str:
        # An invalid password is reported on its own field only
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("Password confirmation does not match.")
        return v


class AbilityRuleSchema(BaseModel):
    action: str
    subject: str


class UserData(CamelModel):
    """Profile summary returned alongside the token."""
    id: UUID
    full_name: str
    username: str
    avatar: str | None = None
    email: EmailStr
    role: str
    status: str
    nationality: str | None = None

    @classmethod
    def from_user(cls, user) -> "UserData":
        return cls(
            id=user.id,
            full_name=user.name,
            username=user.email,
            avatar=user.avatar_url,
            email=user.email,
            role=user.role,
            status=user.status,
            nationality=user.nationality,
        )


class LoginResponse(CamelModel):
    """Login/registration payload."""
    access_token: str
    token_type: str = "bearer"
    user_data: UserData
    user_ability_rules: list[AbilityRuleSchema]
    requires_franchise_registration: bool = False


class AbilitiesResponse(CamelModel):
    role: str
    user_ability_rules: list[AbilityRuleSchema]
    # "<action>:<Subject>" strings as the server-side policy engine sees them
    permissions: list[str]


class MessageResponse(BaseModel):
    message: str
