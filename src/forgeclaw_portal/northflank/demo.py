"""
forgeclaw_portal.northflank.demo

In-memory stand-in for the Northflank API (enabled by `FORGECLAW_DEMO_MODE`).

Responsibilities:
- Answer every `NorthflankApi` call without network access or credentials.
- Keep created instances for the lifetime of the app so the dashboard flow works end to end.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import UTC, datetime

from forgeclaw_portal.northflank.client import ADVISOR_SERVICE_PREFIX, new_instance_view
from forgeclaw_portal.northflank.errors import NorthflankError
from forgeclaw_portal.northflank.models import (
    AdvisorInstance,
    AdvisorInstanceConfig,
    Build,
    BuildStatus,
    InstanceStatus,
    TriggeredBuild,
)
from forgeclaw_portal.observability.logging import get_logger
from forgeclaw_portal.settings import Settings

log = get_logger(__name__)


def _initial_builds() -> list[Build]:
    return [
        Build(
            id="demo-build-1",
            status="SUCCESS",
            branch="master",
            sha="0000000",
            created_at="2026-02-21T10:00:00Z",
            concluded_at="2026-02-21T10:14:00Z",
        )
    ]


@dataclass
class DemoStore:
    instances: dict[str, AdvisorInstance] = field(default_factory=dict)
    builds: list[Build] = field(default_factory=_initial_builds)
    _build_seq: itertools.count = field(default_factory=lambda: itertools.count(2))

    def next_build_id(self) -> str:
        return f"demo-build-{next(self._build_seq)}"


class DemoNorthflankClient:
    def __init__(self, *, settings: Settings, store: DemoStore) -> None:
        self._settings = settings
        self._store = store

    async def get_build_status(self) -> BuildStatus:
        # The template is always considered built so provisioning is never blocked.
        builds = sorted(self._store.builds, key=lambda b: b.created_at or "", reverse=True)
        return BuildStatus(status="SUCCESS", builds=builds[: self._settings.recent_builds_limit])

    async def trigger_build(self) -> TriggeredBuild:
        build = Build(
            id=self._store.next_build_id(),
            status="PENDING",
            branch=self._settings.northflank_build_branch,
            created_at=datetime.now(tz=UTC).isoformat(),
        )
        self._store.builds.append(build)
        log.info("demo_build_triggered", build_id=build.id)
        return TriggeredBuild(build_id=build.id, status=build.status)

    async def create_advisor_instance(self, config: AdvisorInstanceConfig) -> AdvisorInstance:
        service_id = f"{ADVISOR_SERVICE_PREFIX}{config.advisor_id}"
        created = new_instance_view(service_id, config)
        # Deployments "finish" instantly: later reads report the instance as running.
        self._store.instances[service_id] = created.model_copy(
            update={"status": InstanceStatus.running, "last_activity": "Unknown"}
        )
        log.info("demo_advisor_instance_created", service_id=service_id, tier=config.tier)
        return created

    async def update_advisor_skills(self, service_id: str, skills: list[str]) -> None:
        instance = self._require(service_id, "Failed to update advisor skills")
        self._store.instances[service_id] = instance.model_copy(
            update={"skills_enabled": list(skills)}
        )

    async def get_advisor_instance(self, service_id: str) -> AdvisorInstance | None:
        return self._store.instances.get(service_id)

    async def list_advisor_instances(self) -> list[AdvisorInstance]:
        return list(self._store.instances.values())

    async def delete_advisor_instance(self, service_id: str) -> None:
        self._require(service_id, "Failed to delete advisor instance")
        del self._store.instances[service_id]

    async def restart_advisor_instance(self, service_id: str) -> None:
        self._require(service_id, "Failed to restart instance")
        log.info("demo_advisor_instance_restarted", service_id=service_id)

    def _require(self, service_id: str, message: str) -> AdvisorInstance:
        instance = self._store.instances.get(service_id)
        if instance is None:
            raise NorthflankError(message)
        return instance
