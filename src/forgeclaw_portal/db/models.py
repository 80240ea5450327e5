"""
forgeclaw_portal.db.models

Persistence schema for the portal.

Responsibilities:
- Define ORM models:
  - User: advisor account (portal login)
  - AdvisorRecord: local record of a provisioned Northflank advisor service
  - AuditEvent: append-only trail of provisioning actions
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Enum, Index, String, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from forgeclaw_portal.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps, matching what SQLite hands back.
    return datetime.now(UTC).replace(tzinfo=None)


class UserRole(enum.StrEnum):
    advisor = "advisor"
    admin = "admin"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    company: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), nullable=False, default=UserRole.advisor)

    # Northflank service id of the advisor instance this account owns, once provisioned.
    advisor_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(nullable=True, onupdate=_utcnow)


class AdvisorRecord(Base):
    __tablename__ = "advisors"

    service_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    advisor_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(101), nullable=False)
    subdomain: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    company: Mapped[str] = mapped_column(String(100), nullable=False)
    tier: Mapped[str] = mapped_column(String(32), nullable=False)
    skills: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Signup answers that are not sent to Northflank (practice type, AUM, custodian...).
    profile: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Northflank service id, or the build service id for platform events.
    subject_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    actor: Mapped[str] = mapped_column(String(320), nullable=False)  # user id / "anonymous"
    event_type: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)

    __table_args__ = (Index("ix_audit_subject_created", "subject_id", "created_at"),)
