"""
User service.
"""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from franchise_hub.core.errors import NotFound
from franchise_hub.core.hooks.manager import hooks
from franchise_hub.models.user import User

logger = structlog.get_logger()


class UserService:
    """User management service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: UUID | str) -> User | None:
        """Get user by ID. Malformed ids resolve to None."""
        if isinstance(user_id, str):
            try:
                user_id = UUID(user_id)
            except ValueError:
                return None
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_404(self, user_id: UUID) -> User:
        user = await self.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    async def list_users(
        self,
        page: int = 1,
        per_page: int = 20,
        search: str | None = None,
        role: str | None = None,
    ) -> tuple[list[User], int]:
        """List users with pagination."""
        stmt = select(User)

        if search:
            stmt = stmt.where(
                User.email.ilike(f"%{search}%") |
                User.name.ilike(f"%{search}%")
            )
        if role:
            stmt = stmt.where(User.role == role)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = await self.db.scalar(count_stmt) or 0

        stmt = stmt.order_by(User.created_at).offset((page - 1) * per_page).limit(per_page)
        result = await self.db.execute(stmt)
        users = list(result.scalars().all())

        return users, total

    async def change_role(self, user_id: UUID, role: str) -> User:
        """The only path by which a user's role changes."""
        user = await self.get_or_404(user_id)
        previous = user.role
        if previous == role:
            return user

        user.role = role
        await self.db.flush()

        logger.info("Role changed", user_id=str(user.id), previous=previous, role=role)
        await hooks.trigger("user.role_changed", user=user, previous_role=previous)
        return user

    async def unlock(self, user_id: UUID) -> User:
        """Clear lockout state ahead of expiry."""
        user = await self.get_or_404(user_id)
        user.reset_failed_logins()
        await self.db.flush()

        logger.info("Account unlocked", user_id=str(user.id))
        await hooks.trigger("user.unlocked", user=user)
        return user
