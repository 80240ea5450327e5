"""
forgeclaw_portal.db.session

Engine and session factory for the portal database.

Responsibilities:
- Build the async engine from `Settings.database_url` (aiosqlite by default).
- Build the request/session factory used by the API lifespan and the demo seed.
"""

from __future__ import annotations

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from forgeclaw_portal.settings import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    url = make_url(settings.database_url)
    # Pre-ping only matters for networked databases; SQLite files never go stale.
    return create_async_engine(
        url,
        echo=settings.db_echo,
        pool_pre_ping=url.get_backend_name() != "sqlite",
    )


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rows stay readable after commit: routers serialize them once the service has committed.
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


def migration_url(database_url: str) -> str:
    """
    Sync URL for Alembic. Only the bundled aiosqlite driver is swapped; any
    other backend must be configured with a driver Alembic can use directly.
    """

    url = make_url(database_url)
    if url.drivername == "sqlite+aiosqlite":
        url = url.set(drivername="sqlite")
    return url.render_as_string(hide_password=False)
