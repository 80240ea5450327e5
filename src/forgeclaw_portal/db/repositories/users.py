"""
forgeclaw_portal.db.repositories.users

Repository for advisor accounts.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forgeclaw_portal.db.models import User, UserRole


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        company: str,
        role: UserRole = UserRole.advisor,
        advisor_id: str | None = None,
    ) -> User:
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email.lower(),
            password_hash=password_hash,
            company=company,
            role=role,
            advisor_id=advisor_id,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: uuid.UUID) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        # Emails are stored lower-cased by `create`.
        stmt = select(User).where(User.email == email.lower())
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def link_advisor(self, user_id: uuid.UUID, advisor_id: str) -> None:
        user = await self._session.get(User, user_id)
        if user is None:
            return
        user.advisor_id = advisor_id
        await self._session.flush()

    async def unlink_advisor(self, advisor_id: str) -> None:
        stmt = select(User).where(User.advisor_id == advisor_id)
        for user in (await self._session.execute(stmt)).scalars():
            user.advisor_id = None
        await self._session.flush()
