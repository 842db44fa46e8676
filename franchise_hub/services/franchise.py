"""
Franchise service: registration plus the task and royalty views behind
the franchisor and franchisee dashboards.
"""

from decimal import Decimal
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from franchise_hub.core.errors import Conflict, NotFound
from franchise_hub.core.hooks.manager import hooks
from franchise_hub.models.franchise import Franchise, Royalty, Task
from franchise_hub.models.user import User
from franchise_hub.schemas.franchise import FranchiseCreate

logger = structlog.get_logger()

OUTSTANDING_ROYALTY_STATUSES = ("pending", "overdue")


class FranchiseService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_for_franchisor(self, franchisor_id: UUID) -> Franchise | None:
        stmt = select(Franchise).where(Franchise.franchisor_id == franchisor_id)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def get_for_franchisor_or_404(self, franchisor_id: UUID) -> Franchise:
        franchise = await self.get_for_franchisor(franchisor_id)
        if franchise is None:
            raise NotFound("No franchise registered")
        return franchise

    async def register(self, franchisor: User, data: FranchiseCreate) -> Franchise:
        """
        Create the franchisor's franchise.

        Raises:
            Conflict: the franchisor already has one
        """
        if await self.get_for_franchisor(franchisor.id):
            raise Conflict("Franchise already registered")

        franchise = Franchise(franchisor_id=franchisor.id, **data.model_dump())
        self.db.add(franchise)
        await self.db.flush()

        logger.info(
            "Franchise registered",
            franchise_id=str(franchise.id),
            franchisor_id=str(franchisor.id),
        )
        await hooks.trigger("franchise.registered", user=franchisor, franchise=franchise)
        return franchise

    # ============================================================
    # TASKS
    # ============================================================

    async def tasks_assigned_to(self, user_id: UUID) -> list[Task]:
        stmt = (
            select(Task)
            .where(Task.assigned_to_id == user_id)
            .order_by(Task.due_date.is_(None), Task.due_date, Task.created_at)
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def tasks_for_franchise(self, franchise_id: UUID) -> list[Task]:
        stmt = (
            select(Task)
            .where(Task.franchise_id == franchise_id)
            .order_by(Task.created_at)
        )
        return list((await self.db.execute(stmt)).scalars().all())

    # ============================================================
    # ROYALTIES
    # ============================================================

    async def royalties_for_franchise(self, franchise_id: UUID) -> list[Royalty]:
        stmt = (
            select(Royalty)
            .where(Royalty.franchise_id == franchise_id)
            .order_by(Royalty.period.desc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def royalties_for_franchisee(self, franchisee_id: UUID) -> list[Royalty]:
        stmt = (
            select(Royalty)
            .where(Royalty.franchisee_id == franchisee_id)
            .order_by(Royalty.period.desc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    @staticmethod
    def summarize(royalties: list[Royalty]) -> dict:
        total = sum((r.amount for r in royalties), Decimal("0"))
        outstanding = sum(
            (r.amount for r in royalties if r.status in OUTSTANDING_ROYALTY_STATUSES),
            Decimal("0"),
        )
        return {
            "royalties": royalties,
            "total_amount": total,
            "outstanding_amount": outstanding,
        }
