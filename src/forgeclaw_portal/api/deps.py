"""
forgeclaw_portal.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the Northflank client.
- Encapsulate app.state access patterns (settings/sessionmaker/http client/demo store).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from forgeclaw_portal.northflank.client import NorthflankClient
from forgeclaw_portal.northflank.demo import DemoNorthflankClient
from forgeclaw_portal.northflank.protocol import NorthflankApi
from forgeclaw_portal.settings import Settings


def settings_dep(request: Request) -> Settings:
    # Settings are bound in `create_app`, so tests can run apps with explicit settings.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit is owned by the service layer / routers.
    async with session_factory() as session:
        yield session


def northflank_dep(
    request: Request,
    settings: Settings = Depends(settings_dep),
) -> NorthflankApi:
    if settings.demo_mode:
        return DemoNorthflankClient(settings=settings, store=request.app.state.demo_store)
    return NorthflankClient(settings=settings, http=request.app.state.northflank_http)


# --- Module Notes -----------------------------------------------------------
# The http client and demo store are created once in the app lifespan; clients
# built here are cheap per-request wrappers around them.
