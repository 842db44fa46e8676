"""
Pytest fixtures for testing.

Provides:
- Async database session (in-memory SQLite)
- Test client with the session wired into the app
- Factories for users and franchises
- Auth header helpers
"""

from datetime import datetime
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from franchise_hub.main import app
from franchise_hub.models.base import Base
from franchise_hub.models.franchise import Franchise
from franchise_hub.models.user import User
from franchise_hub.api.dependencies.database import get_db
from franchise_hub.core.hooks.manager import hooks
from franchise_hub.core.roles import Role
from franchise_hub.services.auth import create_access_token, hash_password


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

DEFAULT_PASSWORD = "Secret123!"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Database session shared by the test and the app under test."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client with database session override.
    """

    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clean_hooks():
    """Hooks registered by a test do not leak into the next one."""
    yield
    hooks.clear()


# ============ Factory Fixtures ============


class UserFactory:
    """Factory for creating test users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        name: str = "Test User",
        role: Role | str = Role.FRANCHISEE,
        profile_completed: bool = True,
        is_active: bool = True,
        failed_login_attempts: int = 0,
        locked_until: datetime | None = None,
    ) -> User:
        """Create a user in the database."""
        email = email or f"test-{uuid4().hex[:8]}@example.com"

        user = User(
            email=email.lower(),
            password_hash=hash_password(password),
            name=name,
            role=role.value if isinstance(role, Role) else role,
            status="active",
            is_active=is_active,
            profile_completed=profile_completed,
            failed_login_attempts=failed_login_attempts,
            locked_until=locked_until,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def create_franchise(self, franchisor: User, **overrides) -> Franchise:
        data = {
            "business_name": "Acme Holdings LLC",
            "brand_name": "Acme Coffee",
            "industry": "Food & Beverage",
        }
        data.update(overrides)
        franchise = Franchise(franchisor_id=franchisor.id, **data)
        self.db.add(franchise)
        await self.db.commit()
        await self.db.refresh(franchise)
        return franchise


@pytest_asyncio.fixture
async def user_factory(db: AsyncSession) -> UserFactory:
    """Fixture that provides UserFactory."""
    return UserFactory(db)


@pytest_asyncio.fixture
async def test_user(user_factory: UserFactory) -> User:
    """A franchisee who has finished onboarding."""
    return await user_factory.create()


@pytest_asyncio.fixture
async def admin_user(user_factory: UserFactory) -> User:
    return await user_factory.create(email="admin@example.com", role=Role.ADMIN)


@pytest_asyncio.fixture
async def franchisor(user_factory: UserFactory) -> User:
    """A franchisor with a registered franchise."""
    user = await user_factory.create(email="owner@example.com", role=Role.FRANCHISOR)
    await user_factory.create_franchise(user)
    return user


# ============ Auth Helpers ============


def get_auth_headers(user: User) -> dict[str, str]:
    """Helper to get auth headers for any user."""
    token = create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Fixture form of get_auth_headers for use inside tests."""
    return get_auth_headers


@pytest.fixture
def auth_headers(test_user: User) -> dict[str, str]:
    """Get auth headers for test user."""
    return get_auth_headers(test_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict[str, str]:
    """Get auth headers for admin user."""
    return get_auth_headers(admin_user)
