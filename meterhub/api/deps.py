"""
FastAPI dependency injection providers.

Provides database sessions, the startup Settings and the API-key check
for use with FastAPI's Depends() mechanism.

CHANGELOG:
- 2026-10-18: Add get_settings and require_api_key
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from meterhub.config import Settings
from meterhub.db.session import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session.

    Routes depend on this function (not on get_async_session directly) so
    tests can replace it through app.dependency_overrides.

    Yields:
        AsyncSession: An async SQLAlchemy session.
    """
    async for session in get_async_session():
        yield session


def get_settings(request: Request) -> Settings:
    """Return the Settings built during application startup."""
    return request.app.state.settings


async def require_api_key(request: Request) -> None:
    """Validate the bearer API key via BearerAuth on app.state.

    This thin wrapper exists so that FastAPI's Depends() mechanism
    can call the BearerAuth.verify method stored on app.state.auth.
    """
    await request.app.state.auth.verify(request)
