"""Database client: AsyncPG pool for the analytics sink.

Initialized once at startup (via lifespan), and only when
ANALYTICS_DATABASE_URL is set. Without it the service runs with no sink.
"""

import asyncpg

from app.config import settings

_pool: asyncpg.Pool | None = None


async def init_pool() -> asyncpg.Pool | None:
    """Create asyncpg pool if analytics is configured. Called once at startup."""
    global _pool
    if not settings.analytics_configured:
        return None
    _pool = await asyncpg.create_pool(
        dsn=settings.analytics_database_url,
        min_size=settings.db_pool_min,
        max_size=settings.db_pool_max,
    )
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool:
        await _pool.close()
        _pool = None


def get_pool() -> asyncpg.Pool | None:
    return _pool
