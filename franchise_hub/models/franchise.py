"""
Franchise, task and royalty models.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID
from sqlalchemy import String, Text, ForeignKey, Numeric, Date, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, StandardMixin


class Franchise(Base, StandardMixin):
    """
    A franchise brand owned by exactly one franchisor.

    A franchisor without a row here has not finished registration and is
    held at the registration gate.
    """

    __tablename__ = "franchises"

    franchisor_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    brand_name: Mapped[str] = mapped_column(String(255), nullable=False)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    royalty_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="active")

    def __repr__(self) -> str:
        return f"<Franchise {self.brand_name}>"


class Task(Base, StandardMixin):
    """Work item assigned to a user, optionally within a franchise."""

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending")
    priority: Mapped[str] = mapped_column(String(20), default="medium")
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    assigned_to_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    franchise_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("franchises.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Task {self.title} [{self.status}]>"


class Royalty(Base, StandardMixin):
    """Royalty owed by a franchisee to the franchise for one billing period."""

    __tablename__ = "royalties"

    franchise_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("franchises.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    franchisee_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    period: Mapped[str] = mapped_column(String(20), nullable=False)  # e.g. "2025-10"
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending, paid, overdue

    def __repr__(self) -> str:
        return f"<Royalty {self.period} {self.amount} [{self.status}]>"
