"""
Onboarding service.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from franchise_hub.core.hooks.manager import hooks
from franchise_hub.core.roles import Role
from franchise_hub.models.user import User
from franchise_hub.schemas.onboarding import (
    OnboardingComplete,
    OnboardingStatus,
    OnboardingUser,
)

logger = structlog.get_logger()


class OnboardingService:

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def requires_onboarding(user: User) -> bool:
        return user.role == Role.FRANCHISEE.value and not user.profile_completed

    def status(self, user: User) -> OnboardingStatus:
        return OnboardingStatus(
            requires_onboarding=self.requires_onboarding(user),
            profile_completed=bool(user.profile_completed),
            user=OnboardingUser(
                name=user.name,
                email=user.email,
                phone=user.phone,
                nationality=user.nationality,
                state=user.state,
                city=user.city,
                address=user.address,
            ),
        )

    async def complete(self, user: User, data: OnboardingComplete) -> User:
        """Store the profile and open the rest of the app to the user."""
        for field, value in data.model_dump().items():
            setattr(user, field, value)
        user.profile_completed = True
        await self.db.flush()

        logger.info("Onboarding completed", user_id=str(user.id))
        await hooks.trigger("onboarding.completed", user=user)
        return user
