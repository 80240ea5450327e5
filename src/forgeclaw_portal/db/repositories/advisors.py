"""
forgeclaw_portal.db.repositories.advisors

Repository for `AdvisorRecord` entities (local mirror of provisioned Northflank services).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forgeclaw_portal.db.models import AdvisorRecord


class AdvisorRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        service_id: str,
        advisor_id: str,
        name: str,
        subdomain: str,
        email: str,
        company: str,
        tier: str,
        skills: list[str],
        profile: dict[str, Any] | None = None,
    ) -> AdvisorRecord:
        record = AdvisorRecord(
            service_id=service_id,
            advisor_id=advisor_id,
            name=name,
            subdomain=subdomain,
            email=email.lower(),
            company=company,
            tier=tier,
            skills=list(skills),
            profile=profile or {},
        )
        self._session.add(record)
        await self._session.flush()
        return record

    async def get(self, service_id: str) -> AdvisorRecord | None:
        return await self._session.get(AdvisorRecord, service_id)

    async def get_by_subdomain(self, subdomain: str) -> AdvisorRecord | None:
        stmt = select(AdvisorRecord).where(AdvisorRecord.subdomain == subdomain)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def set_skills(self, service_id: str, skills: list[str]) -> None:
        record = await self._session.get(AdvisorRecord, service_id)
        if record is None:
            return
        record.skills = list(skills)
        await self._session.flush()

    async def delete(self, service_id: str) -> None:
        record = await self._session.get(AdvisorRecord, service_id)
        if record is not None:
            await self._session.delete(record)
            await self._session.flush()
