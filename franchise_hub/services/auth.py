"""
Authentication service.

Login policy:

- a known account with a wrong password gets its failure counter bumped;
  the Nth consecutive failure locks it for `lockout_minutes`
- while locked every attempt is refused with 429, even with the right
  password, and the counter is left alone
- an expired lock is lifted the next time the account is read
- a successful login resets the counter and returns the role's ability
  rules together with the token
"""

from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

import structlog
from passlib.context import CryptContext
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, exists

from franchise_hub.core.abilities import AbilityRuleSet, rules_for, serialize_rules
from franchise_hub.core.config import settings
from franchise_hub.core.errors import AccountLocked, Conflict, InvalidCredentials
from franchise_hub.core.hooks.manager import hooks
from franchise_hub.core.roles import Role
from franchise_hub.models.franchise import Franchise
from franchise_hub.models.user import User
from franchise_hub.schemas.auth import UserData
from franchise_hub.utils.timezone import utc_now

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass
class LoginResult:
    """Everything the client needs after a successful login."""
    user: User
    access_token: str
    rules: AbilityRuleSet
    requires_franchise_registration: bool = False
    token_type: str = "bearer"

    def to_payload(self) -> dict:
        return {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "user_data": UserData.from_user(self.user),
            "user_ability_rules": serialize_rules(self.rules),
            "requires_franchise_registration": self.requires_franchise_registration,
        }


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: UUID, remember: bool = False) -> str:
    """Create JWT access token; `remember` stretches it to days instead of minutes."""
    if remember:
        lifetime = timedelta(days=settings.auth.remember_token_expire_days)
    else:
        lifetime = timedelta(minutes=settings.auth.access_token_expire_minutes)

    payload = {
        "sub": str(user_id),
        "exp": utc_now() + lifetime,
        "type": "access",
    }
    return jwt.encode(
        payload,
        settings.auth.secret_key,
        algorithm=settings.auth.algorithm,
    )


async def has_franchise(db: AsyncSession, user_id: UUID) -> bool:
    """Whether a franchise row exists for this franchisor. Always hits the database."""
    stmt = select(exists().where(Franchise.franchisor_id == user_id))
    return bool(await db.scalar(stmt))


class AuthService:
    """Authentication service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email.lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _build_result(self, user: User, remember: bool = False) -> LoginResult:
        requires_registration = (
            user.role == Role.FRANCHISOR.value
            and not await has_franchise(self.db, user.id)
        )
        return LoginResult(
            user=user,
            access_token=create_access_token(user.id, remember=remember),
            rules=rules_for(user.role),
            requires_franchise_registration=requires_registration,
        )

    async def login(self, email: str, password: str, remember: bool = False) -> LoginResult:
        """
        Authenticate and issue a token.

        Raises:
            AccountLocked: lock window still open
            InvalidCredentials: unknown email, wrong password or inactive account
        """
        user = await self._get_by_email(email)
        if user is None:
            await hooks.trigger("auth.failed", email=email, user=None)
            raise InvalidCredentials()

        now = utc_now()
        if user.clear_expired_lock(now):
            logger.info("Lockout expired", user_id=str(user.id))

        if user.is_locked(now):
            raise AccountLocked(retry_after=user.remaining_lock_seconds(now))

        if not verify_password(password, user.password_hash):
            locked = user.register_failed_login(
                max_attempts=settings.auth.max_failed_login_attempts,
                lockout=timedelta(minutes=settings.auth.lockout_minutes),
                now=now,
            )
            # The session is rolled back on error, so the counter is committed here
            await self.db.commit()

            await hooks.trigger("auth.failed", email=email, user=user,
                                attempts=user.failed_login_attempts)
            if locked:
                logger.warning(
                    "Account locked",
                    user_id=str(user.id),
                    attempts=user.failed_login_attempts,
                    locked_until=user.locked_until.isoformat(),
                )
                await hooks.trigger("auth.locked", user=user, locked_until=user.locked_until)
            raise InvalidCredentials()

        if not user.is_active:
            raise InvalidCredentials()

        user.reset_failed_logins()
        user.last_login_at = now
        await self.db.flush()

        await hooks.trigger("auth.login", user=user)
        logger.info("Login succeeded", user_id=str(user.id), role=user.role)

        return await self._build_result(user, remember=remember)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: str,
        phone: str | None = None,
    ) -> LoginResult:
        """
        Create a self-service account and log it in.

        Raises:
            Conflict: email already registered
        """
        email = email.lower()
        if await self._get_by_email(email):
            raise Conflict("The email has already been taken.")

        user = User(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
            phone=phone,
            status="active",
            is_active=True,
            # Only franchisees go through profile onboarding
            profile_completed=role != Role.FRANCHISEE.value,
        )
        self.db.add(user)
        await self.db.flush()

        await hooks.trigger("user.created", user=user)
        logger.info("User registered", user_id=str(user.id), role=role)

        return await self._build_result(user)

    async def logout(self, user: User) -> None:
        """Logout user. Tokens are stateless; the hook is the extension point."""
        await hooks.trigger("auth.logout", user=user)
