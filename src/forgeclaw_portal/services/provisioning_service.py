"""
forgeclaw_portal.services.provisioning_service

Advisor provisioning lifecycle (transaction + persistence owner).

Responsibilities:
- Validate subdomain availability and assemble the instance configuration.
- Call Northflank and mirror the result in the local `advisors` table.
- Link the caller's account to the new instance and append audit events.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from forgeclaw_portal.auth.models import Principal
from forgeclaw_portal.catalog.tiers import merge_skills
from forgeclaw_portal.db.repositories.advisors import AdvisorRepo
from forgeclaw_portal.db.repositories.audit import AuditRepo
from forgeclaw_portal.db.repositories.users import UserRepo
from forgeclaw_portal.northflank.client import ADVISOR_SERVICE_PREFIX
from forgeclaw_portal.northflank.errors import SubdomainTakenError
from forgeclaw_portal.northflank.models import AdvisorInstance, AdvisorInstanceConfig, TriggeredBuild
from forgeclaw_portal.northflank.protocol import NorthflankApi
from forgeclaw_portal.observability.logging import get_logger
from forgeclaw_portal.settings import Settings

log = get_logger(__name__)

ANONYMOUS = "anonymous"


@dataclass(frozen=True, slots=True)
class ProvisioningResult:
    instance: AdvisorInstance
    next_steps: list[str]


def _actor(principal: Principal | None) -> str:
    return principal.subject if principal is not None else ANONYMOUS


class AdvisorProvisioningService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        settings: Settings,
        client: NorthflankApi,
    ) -> None:
        self._session = session
        self._settings = settings
        self._client = client

        self._advisors = AdvisorRepo(session)
        self._users = UserRepo(session)
        self._audit = AuditRepo(session)

    async def ensure_subdomain_available(self, subdomain: str) -> None:
        taken = await self._advisors.get_by_subdomain(subdomain) is not None
        if not taken:
            existing = await self._client.get_advisor_instance(
                f"{ADVISOR_SERVICE_PREFIX}{subdomain}"
            )
            taken = existing is not None
        if taken:
            raise SubdomainTakenError(self._settings.advisor_domain(subdomain))

    async def create(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        company: str,
        subdomain: str,
        anthropic_api_key: str,
        tier: str,
        additional_skills: list[str],
        profile: dict[str, Any] | None = None,
        principal: Principal | None = None,
    ) -> ProvisioningResult:
        await self.ensure_subdomain_available(subdomain)

        config = AdvisorInstanceConfig(
            advisor_id=f"{subdomain}-{int(time.time() * 1000)}",
            name=f"{first_name} {last_name}",
            subdomain=subdomain,
            email=email,
            company=company,
            anthropic_api_key=anthropic_api_key,
            skills=tuple(merge_skills(tier, additional_skills)),
            tier=tier,
        )
        log.info(
            "advisor_create_requested",
            advisor_id=config.advisor_id,
            subdomain=subdomain,
            tier=tier,
        )

        instance = await self._client.create_advisor_instance(config)

        await self._advisors.create(
            service_id=instance.id,
            advisor_id=config.advisor_id,
            name=config.name,
            subdomain=subdomain,
            email=email,
            company=company,
            tier=tier,
            skills=list(config.skills),
            profile=profile,
        )
        user_id = principal.user_id if principal is not None else None
        if user_id is not None:
            await self._users.link_advisor(user_id, instance.id)
        await self._audit.add(
            subject_id=instance.id,
            actor=_actor(principal),
            event_type="ADVISOR_CREATED",
            details={"advisor_id": config.advisor_id, "subdomain": subdomain, "tier": tier},
        )
        await self._session.commit()

        log.info("advisor_created", service_id=instance.id)
        return ProvisioningResult(
            instance=instance,
            next_steps=[
                "Instance is being deployed (2-5 minutes)",
                "You will receive an email when ready",
                f"Access your AI at https://{self._settings.advisor_domain(subdomain)}",
            ],
        )

    async def update_skills(
        self, *, service_id: str, skills: list[str], principal: Principal
    ) -> list[str]:
        skills = list(dict.fromkeys(skills))
        await self._client.update_advisor_skills(service_id, skills)
        await self._advisors.set_skills(service_id, skills)
        await self._audit.add(
            subject_id=service_id,
            actor=_actor(principal),
            event_type="ADVISOR_SKILLS_UPDATED",
            details={"skills": skills},
        )
        await self._session.commit()
        return skills

    async def delete(self, *, service_id: str, principal: Principal) -> None:
        await self._client.delete_advisor_instance(service_id)
        await self._advisors.delete(service_id)
        await self._users.unlink_advisor(service_id)
        await self._audit.add(
            subject_id=service_id,
            actor=_actor(principal),
            event_type="ADVISOR_DELETED",
            details={},
        )
        await self._session.commit()

    async def restart(self, *, service_id: str, principal: Principal) -> None:
        await self._client.restart_advisor_instance(service_id)
        await self._audit.add(
            subject_id=service_id,
            actor=_actor(principal),
            event_type="ADVISOR_RESTARTED",
            details={},
        )
        await self._session.commit()

    async def trigger_build(self, *, principal: Principal) -> TriggeredBuild:
        build = await self._client.trigger_build()
        await self._audit.add(
            subject_id=self._settings.northflank_build_service_id,
            actor=_actor(principal),
            event_type="BUILD_TRIGGERED",
            details={"build_id": build.build_id},
        )
        await self._session.commit()
        return build


# --- Module Notes -----------------------------------------------------------
# Northflank is called before the local write: a vendor failure leaves no local
# record behind, and the request transaction is never committed.
