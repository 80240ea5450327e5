"""
forgeclaw_portal.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Seed the demo advisor account when running in demo mode.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from forgeclaw_portal.auth.passwords import hash_password
from forgeclaw_portal.db.base import Base
from forgeclaw_portal.db.models import UserRole
from forgeclaw_portal.db.repositories.users import UserRepo
from forgeclaw_portal.observability.logging import get_logger

log = get_logger(__name__)

DEMO_EMAIL = "demo@forgeclaw.com"
DEMO_PASSWORD = "demo123456"
DEMO_ADVISOR_ID = "advisor-demo-123"


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    Production relies on Alembic migrations.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_demo_user(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        users = UserRepo(session)
        if await users.get_by_email(DEMO_EMAIL) is not None:
            return
        await users.create(
            first_name="Demo",
            last_name="Advisor",
            email=DEMO_EMAIL,
            password_hash=hash_password(DEMO_PASSWORD),
            company="Demo Financial Advisors",
            role=UserRole.advisor,
            advisor_id=DEMO_ADVISOR_ID,
        )
        await session.commit()
    log.info("demo_user_seeded", email=DEMO_EMAIL)
