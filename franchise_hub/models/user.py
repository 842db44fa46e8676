"""
User model.
"""

from datetime import datetime, timedelta
from sqlalchemy import String, Boolean, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from franchise_hub.core.roles import Role
from franchise_hub.utils.timezone import utc_now, to_utc, seconds_until
from .base import Base, StandardMixin


class User(Base, StandardMixin):
    """User account model."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=Role.FRANCHISEE.value,
        index=True,
    )

    # Status
    status: Mapped[str] = mapped_column(String(20), default="active")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    profile_completed: Mapped[bool] = mapped_column(Boolean, default=False)

    # Profile
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Login tracking / lockout
    failed_login_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_failed_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    locked_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    # ============================================================
    # LOCKOUT
    # ============================================================

    def is_locked(self, now: datetime | None = None) -> bool:
        """True while locked_until lies in the future."""
        if self.locked_until is None:
            return False
        return to_utc(self.locked_until) > (now or utc_now())

    def remaining_lock_seconds(self, now: datetime | None = None) -> int:
        if self.locked_until is None:
            return 0
        return seconds_until(self.locked_until, now)

    def clear_expired_lock(self, now: datetime | None = None) -> bool:
        """
        Lift a lock whose window has passed.

        Expiry is only noticed here, at read time; there is no background
        job. Returns True when a lock was cleared.
        """
        if self.locked_until is None or self.is_locked(now):
            return False
        self.locked_until = None
        self.failed_login_attempts = 0
        return True

    def register_failed_login(
        self,
        max_attempts: int,
        lockout: timedelta,
        now: datetime | None = None,
    ) -> bool:
        """Count a failed attempt. Returns True if this attempt locked the account."""
        now = now or utc_now()
        self.failed_login_attempts = (self.failed_login_attempts or 0) + 1
        self.last_failed_login_at = now
        if self.failed_login_attempts >= max_attempts:
            self.locked_until = now + lockout
            return True
        return False

    def reset_failed_logins(self) -> None:
        self.failed_login_attempts = 0
        self.locked_until = None

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
