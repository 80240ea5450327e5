"""
forgeclaw_portal.services.platform

Read-side helpers for the platform dashboard (`/api/northflank/*`).

Responsibilities:
- Uptime, health and access URL enrichment of advisor instances.
- Status counts across all instances.
- Placeholder views for data the portal does not collect yet (metrics, workspace files).
"""

from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from typing import Literal

from forgeclaw_portal.northflank.models import AdvisorInstance, InstanceStatus
from forgeclaw_portal.serialization import CamelModel
from forgeclaw_portal.settings import Settings

HealthStatus = Literal["healthy", "warning", "unhealthy"]


class InstanceMetrics(CamelModel):
    # Not collected until a Northflank metrics integration exists.
    cpu_usage: float | None = None
    memory_usage: float | None = None
    disk_usage: float | None = None
    request_count: int | None = None


class EnrichedInstance(AdvisorInstance):
    uptime: str
    health_status: HealthStatus
    access_url: str
    metrics: InstanceMetrics | None = None


class PlatformStats(CamelModel):
    total_advisors: int
    active_instances: int
    updating_instances: int
    failed_instances: int


class WorkspaceEntry(CamelModel):
    name: str
    type: Literal["file", "directory"]
    size: int | None
    modified: str


# Default workspace scaffold of a freshly provisioned advisor instance.
WORKSPACE_SCAFFOLD: tuple[WorkspaceEntry, ...] = (
    WorkspaceEntry(name="AGENTS.md", type="file", size=1024, modified="2026-02-21T10:00:00Z"),
    WorkspaceEntry(name="SOUL.md", type="file", size=2048, modified="2026-02-21T09:30:00Z"),
    WorkspaceEntry(name="USER.md", type="file", size=512, modified="2026-02-21T09:00:00Z"),
    WorkspaceEntry(name="memory/", type="directory", size=None, modified="2026-02-21T12:00:00Z"),
    WorkspaceEntry(name="projects/", type="directory", size=None, modified="2026-02-21T11:00:00Z"),
    WorkspaceEntry(name="reports/", type="directory", size=None, modified="2026-02-20T16:00:00Z"),
)


def calculate_uptime(created_at: datetime | None, now: datetime | None = None) -> str:
    if created_at is None:
        return "unknown"
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    now = now or datetime.now(tz=UTC)

    total_minutes = max(0, int((now - created_at).total_seconds() // 60))
    days, rem = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(rem, 60)

    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


_HEALTH_BY_STATUS: dict[str, HealthStatus] = {
    "running": "healthy",
    "updating": "warning",
    "stopped": "unhealthy",
    "failed": "unhealthy",
}


def health_status(status: str) -> HealthStatus:
    return _HEALTH_BY_STATUS.get(str(status), "warning")


def status_breakdown(instances: list[AdvisorInstance]) -> dict[str, int]:
    return dict(Counter(i.status.value for i in instances))


def platform_stats(instances: list[AdvisorInstance]) -> PlatformStats:
    counts = Counter(i.status for i in instances)
    return PlatformStats(
        total_advisors=len(instances),
        active_instances=counts[InstanceStatus.running],
        updating_instances=counts[InstanceStatus.updating],
        failed_instances=counts[InstanceStatus.failed],
    )


def enrich_instance(
    instance: AdvisorInstance,
    settings: Settings,
    *,
    with_metrics: bool = False,
    now: datetime | None = None,
) -> EnrichedInstance:
    return EnrichedInstance(
        **instance.model_dump(),
        uptime=calculate_uptime(instance.created_at, now),
        health_status=health_status(instance.status),
        access_url=f"https://{settings.advisor_domain(instance.subdomain)}",
        metrics=InstanceMetrics() if with_metrics else None,
    )


def workspace_listing(path: str = "/") -> list[WorkspaceEntry]:
    # TODO: read the live tree once advisor instances expose a file API; only the root is known.
    if path.strip("/") == "":
        return list(WORKSPACE_SCAFFOLD)
    return []
