"""
forgeclaw_portal.northflank.protocol

Interface shared by the live Northflank client and the demo client.
"""

from __future__ import annotations

from typing import Protocol

from forgeclaw_portal.northflank.models import (
    AdvisorInstance,
    AdvisorInstanceConfig,
    BuildStatus,
    TriggeredBuild,
)


class NorthflankApi(Protocol):
    async def get_build_status(self) -> BuildStatus: ...

    async def trigger_build(self) -> TriggeredBuild: ...

    async def create_advisor_instance(self, config: AdvisorInstanceConfig) -> AdvisorInstance: ...

    async def update_advisor_skills(self, service_id: str, skills: list[str]) -> None: ...

    async def get_advisor_instance(self, service_id: str) -> AdvisorInstance | None: ...

    async def list_advisor_instances(self) -> list[AdvisorInstance]: ...

    async def delete_advisor_instance(self, service_id: str) -> None: ...

    async def restart_advisor_instance(self, service_id: str) -> None: ...
