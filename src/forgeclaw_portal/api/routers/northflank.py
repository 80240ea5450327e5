"""
forgeclaw_portal.api.routers.northflank

Platform operations endpoints (admin only).

Responsibilities:
- Template build status, history and manual build triggers.
- Fleet view of advisor instances with uptime/health enrichment.
- Instance restart and Northflank connectivity probe.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_404_NOT_FOUND, HTTP_503_SERVICE_UNAVAILABLE

from forgeclaw_portal.api.deps import db_session, northflank_dep, settings_dep
from forgeclaw_portal.auth.deps import require_roles
from forgeclaw_portal.auth.models import Principal
from forgeclaw_portal.northflank.errors import NorthflankError
from forgeclaw_portal.northflank.models import Build, TriggeredBuild
from forgeclaw_portal.northflank.protocol import NorthflankApi
from forgeclaw_portal.observability.logging import get_logger
from forgeclaw_portal.serialization import CamelModel
from forgeclaw_portal.services.platform import (
    EnrichedInstance,
    PlatformStats,
    enrich_instance,
    platform_stats,
    status_breakdown,
)
from forgeclaw_portal.services.provisioning_service import AdvisorProvisioningService
from forgeclaw_portal.settings import Settings

log = get_logger(__name__)

router = APIRouter(
    prefix="/api/northflank",
    tags=["northflank"],
    dependencies=[Depends(require_roles("admin"))],
)


def _now() -> str:
    return datetime.now(tz=UTC).isoformat()


class PlatformBuildInfo(CamelModel):
    status: str
    last_build: Build | None
    recent_builds: list[Build]


class PlatformStatusResponse(CamelModel):
    success: bool = True
    platform: PlatformBuildInfo
    advisors: PlatformStats
    timestamp: str


class BuildsResponse(CamelModel):
    success: bool = True
    current_status: str
    builds: list[Build]
    build_count: int


class TriggerBuildResponse(CamelModel):
    success: bool = True
    build: TriggeredBuild
    message: str = "Build triggered successfully"
    estimated_time: str = "10-20 minutes"


class InstancesResponse(CamelModel):
    success: bool = True
    instances: list[EnrichedInstance]
    total_count: int
    status_breakdown: dict[str, int]


class InstanceResponse(CamelModel):
    success: bool = True
    instance: EnrichedInstance


class RestartResponse(CamelModel):
    success: bool = True
    message: str = "Instance restart initiated"
    instance_id: str
    estimated_time: str = "2-3 minutes"


@router.get("/status", response_model=PlatformStatusResponse)
async def platform_status(client: NorthflankApi = Depends(northflank_dep)) -> PlatformStatusResponse:
    build_status = await client.get_build_status()
    instances = await client.list_advisor_instances()
    return PlatformStatusResponse(
        platform=PlatformBuildInfo(
            status=build_status.status,
            last_build=build_status.builds[0] if build_status.builds else None,
            recent_builds=build_status.builds,
        ),
        advisors=platform_stats(instances),
        timestamp=_now(),
    )


@router.get("/builds", response_model=BuildsResponse)
async def list_builds(client: NorthflankApi = Depends(northflank_dep)) -> BuildsResponse:
    build_status = await client.get_build_status()
    return BuildsResponse(
        current_status=build_status.status,
        builds=build_status.builds,
        build_count=len(build_status.builds),
    )


@router.post("/builds/trigger", response_model=TriggerBuildResponse)
async def trigger_build(
    principal: Principal = Depends(require_roles("admin")),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    client: NorthflankApi = Depends(northflank_dep),
) -> TriggerBuildResponse:
    svc = AdvisorProvisioningService(session=session, settings=settings, client=client)
    build = await svc.trigger_build(principal=principal)
    return TriggerBuildResponse(build=build)


@router.get("/instances", response_model=InstancesResponse)
async def list_instances(
    settings: Settings = Depends(settings_dep),
    client: NorthflankApi = Depends(northflank_dep),
) -> InstancesResponse:
    instances = await client.list_advisor_instances()
    return InstancesResponse(
        instances=[enrich_instance(i, settings) for i in instances],
        total_count=len(instances),
        status_breakdown=status_breakdown(instances),
    )


@router.get("/instances/{instance_id}", response_model=InstanceResponse)
async def get_instance(
    instance_id: str,
    settings: Settings = Depends(settings_dep),
    client: NorthflankApi = Depends(northflank_dep),
) -> InstanceResponse:
    instance = await client.get_advisor_instance(instance_id)
    if instance is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Instance not found")
    return InstanceResponse(instance=enrich_instance(instance, settings, with_metrics=True))


@router.post("/instances/{instance_id}/restart", response_model=RestartResponse)
async def restart_instance(
    instance_id: str,
    principal: Principal = Depends(require_roles("admin")),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    client: NorthflankApi = Depends(northflank_dep),
) -> RestartResponse:
    if await client.get_advisor_instance(instance_id) is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Instance not found")
    svc = AdvisorProvisioningService(session=session, settings=settings, client=client)
    await svc.restart(service_id=instance_id, principal=principal)
    return RestartResponse(instance_id=instance_id)


@router.get("/health")
async def northflank_health(client: NorthflankApi = Depends(northflank_dep)) -> Any:
    try:
        build_status = await client.get_build_status()
    except NorthflankError as e:
        log.warning("northflank_unhealthy", error=e.message)
        return JSONResponse(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "success": False,
                "message": "Northflank integration unhealthy",
                "apiConnectivity": False,
                "error": e.message,
                "lastAttempt": _now(),
            },
        )
    return {
        "success": True,
        "message": "Northflank integration healthy",
        "apiConnectivity": True,
        "lastApiCall": _now(),
        "currentBuildStatus": build_status.status,
    }
