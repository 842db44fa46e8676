"""
Service dependencies.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_db
from franchise_hub.services.auth import AuthService
from franchise_hub.services.franchise import FranchiseService
from franchise_hub.services.onboarding import OnboardingService
from franchise_hub.services.user import UserService


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """Get user service instance."""
    return UserService(db)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Get auth service instance (for login/register)."""
    return AuthService(db)


async def get_onboarding_service(db: AsyncSession = Depends(get_db)) -> OnboardingService:
    return OnboardingService(db)


async def get_franchise_service(db: AsyncSession = Depends(get_db)) -> FranchiseService:
    return FranchiseService(db)
