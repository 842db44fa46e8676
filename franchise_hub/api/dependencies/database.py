"""
Database dependencies.
"""

from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession

from franchise_hub.models.database import async_session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session.

    Committed when the request finishes, rolled back if it raises. Work
    that must persist through an error response (failed-login counters)
    commits explicitly before raising.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
