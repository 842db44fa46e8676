"""
Authentication routes.
"""

from fastapi import APIRouter, Depends, Request, status

from franchise_hub.api.dependencies.rate_limit import login_throttle, registration_throttle
from franchise_hub.api.dependencies.services import get_auth_service
from franchise_hub.api.middleware.request_id import client_ip
from franchise_hub.core.abilities import rules_for, serialize_rules
from franchise_hub.core.auth import Authorize
from franchise_hub.core.gates.dependencies import GatedUser
from franchise_hub.schemas.auth import (
    AbilitiesResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
)
from franchise_hub.schemas.user import UserResponse
from franchise_hub.services.auth import AuthService

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Login with email and password; returns the token and the role's ability rules."""
    await login_throttle.hit(request, f"{data.email.lower()}|{client_ip(request)}")
    result = await auth_service.login(
        email=data.email,
        password=data.password,
        remember=data.remember,
    )
    return result.to_payload()


@router.post(
    "/register",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(registration_throttle)],
)
async def register(
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Self-service sign-up for franchisors and brokers."""
    result = await auth_service.register(
        name=data.name,
        email=data.email,
        password=data.password,
        role=data.role,
        phone=data.phone,
    )
    return result.to_payload()


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: GatedUser,
    auth_service: AuthService = Depends(get_auth_service),
):
    await auth_service.logout(current_user)
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: GatedUser):
    """Get current user profile."""
    return UserResponse.model_validate(current_user)


@router.get("/abilities", response_model=AbilitiesResponse)
async def get_abilities(current_user: GatedUser, auth: Authorize):
    """Current rule set for the caller's role, for refreshing a stale client cache."""
    return {
        "role": current_user.role,
        "user_ability_rules": serialize_rules(rules_for(current_user.role)),
        "permissions": sorted(await auth.get_permissions()),
    }
