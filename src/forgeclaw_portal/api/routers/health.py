"""
forgeclaw_portal.api.routers.health

Probes for the platform load balancer and the portal frontend.

- `GET /health`: process is serving; carries the API version shown in the portal footer.
- `GET /readyz`: the database answers a trivial query.

Northflank reachability is not part of readiness; it has its own admin probe
(`GET /api/northflank/health`) so a vendor outage never takes the portal out of rotation.
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from forgeclaw_portal import __version__
from forgeclaw_portal.api.deps import db_session, settings_dep
from forgeclaw_portal.settings import Settings

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    return {
        "status": "ok",
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "version": __version__,
    }


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> dict[str, str]:
    await session.scalar(text("SELECT 1"))
    return {
        "status": "ready",
        "database": "ok",
        "northflank": "demo" if settings.demo_mode else "live",
    }
