"""
forgeclaw_portal.northflank.models

Types exchanged with the Northflank boundary.

Responsibilities:
- Advisor instance configuration (input to provisioning).
- Advisor instance / build views (output, serialized camelCase to the frontend).
- Mapping of Northflank service status onto the portal's four instance states.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from forgeclaw_portal.serialization import CamelModel


class InstanceStatus(enum.StrEnum):
    running = "running"
    stopped = "stopped"
    updating = "updating"
    failed = "failed"


@dataclass(frozen=True, slots=True)
class AdvisorInstanceConfig:
    advisor_id: str
    name: str
    subdomain: str
    email: str
    company: str
    # Customer-supplied credential; forwarded to the instance, never logged or stored.
    anthropic_api_key: str
    skills: tuple[str, ...]
    tier: str


class MonthlyUsage(CamelModel):
    tokens: int = 0
    cost: float = 0


class AdvisorInstance(CamelModel):
    id: str
    name: str
    subdomain: str
    status: InstanceStatus
    created_at: datetime | None = None
    last_activity: str = "Unknown"
    skills_enabled: list[str] = Field(default_factory=list)
    storage_used: int = 0
    monthly_usage: MonthlyUsage = Field(default_factory=MonthlyUsage)


class Build(CamelModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    status: str
    branch: str = ""
    sha: str = ""
    created_at: str | None = None
    concluded_at: str | None = None


@dataclass(frozen=True, slots=True)
class BuildStatus:
    status: str
    builds: list[Build]

    @property
    def is_ready(self) -> bool:
        return self.status == "SUCCESS"


class TriggeredBuild(CamelModel):
    build_id: str
    status: str


def map_service_status(status: dict[str, Any] | None) -> InstanceStatus:
    status = status or {}
    deployment_status = (status.get("deployment") or {}).get("status")
    build_status = (status.get("build") or {}).get("status")

    if build_status == "FAILURE":
        return InstanceStatus.failed
    if deployment_status == "IN_PROGRESS":
        return InstanceStatus.updating
    if deployment_status == "COMPLETED":
        return InstanceStatus.running
    if deployment_status == "FAILED":
        return InstanceStatus.failed
    return InstanceStatus.stopped
