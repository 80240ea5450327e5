"""
forgeclaw_portal.auth.models

Caller identity carried by portal tokens.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

ADMIN_ROLE = "admin"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Decoded bearer token.

    `subject` is the account id for session tokens (an arbitrary string for dev
    tokens). `advisor_id` is the Northflank service id linked to the account
    when the token was issued; accounts that provision later get it on next login.
    """

    subject: str
    roles: frozenset[str]
    email: str | None = None
    advisor_id: str | None = None

    @property
    def user_id(self) -> uuid.UUID | None:
        # Dev tokens may carry arbitrary subjects; only account tokens carry a user id.
        try:
            return uuid.UUID(self.subject)
        except ValueError:
            return None

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles

    def holds_advisor(self, service_id: str) -> bool:
        return self.is_admin or self.advisor_id == service_id
