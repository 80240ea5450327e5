"""
forgeclaw_portal.db.repositories.audit

Append-only provisioning trail, keyed by Northflank service id.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forgeclaw_portal.db.models import AuditEvent


class AuditRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        subject_id: str,
        actor: str,
        event_type: str,
        details: dict[str, Any],
    ) -> AuditEvent:
        event = AuditEvent(
            subject_id=subject_id, actor=actor, event_type=event_type, details=details
        )
        self._session.add(event)
        await self._session.flush()
        return event

    async def list_for_subject(self, subject_id: str, *, limit: int = 200) -> list[AuditEvent]:
        events = await self._session.scalars(
            select(AuditEvent)
            .filter_by(subject_id=subject_id)
            .order_by(AuditEvent.created_at.desc())
            .limit(limit)
        )
        return list(events)


# --- Module Notes -----------------------------------------------------------
# Build triggers are platform events; they are filed under the build service id.
