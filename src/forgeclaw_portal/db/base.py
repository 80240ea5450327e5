"""
forgeclaw_portal.db.base

Declarative base for the portal tables (`users`, `advisors`, `audit_events`).
Alembic's `env.py` autogenerates against `Base.metadata`.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
