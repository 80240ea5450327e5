"""
forgeclaw_portal.api.routers.auth

Advisor account endpoints.

Responsibilities:
- Register and log in advisor accounts (bcrypt password hashes, JWT sessions).
- Read and update the caller's profile.
- Acknowledge logout (tokens are stateless; the client discards them).
"""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ConfigDict, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
)

from forgeclaw_portal.api.deps import db_session, settings_dep
from forgeclaw_portal.auth.deps import get_principal
from forgeclaw_portal.auth.jwt import JwtConfig, issue_token
from forgeclaw_portal.auth.models import Principal
from forgeclaw_portal.auth.passwords import hash_password, verify_password
from forgeclaw_portal.db.models import User, UserRole
from forgeclaw_portal.db.repositories.users import UserRepo
from forgeclaw_portal.observability.logging import get_logger
from forgeclaw_portal.serialization import CamelModel
from forgeclaw_portal.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(CamelModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8)
    company: str = Field(min_length=1, max_length=100)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8)


class UpdateProfileRequest(CamelModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    company: str | None = Field(default=None, min_length=1, max_length=100)
    current_password: str | None = Field(default=None, min_length=8)
    new_password: str | None = Field(default=None, min_length=8)


class UserOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    company: str
    role: UserRole
    advisor_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class AuthResponse(CamelModel):
    success: bool = True
    message: str
    user: UserOut
    token: str
    expires_in: str


class UserResponse(CamelModel):
    success: bool = True
    message: str | None = None
    user: UserOut


def _session_response(user: User, settings: Settings, message: str) -> AuthResponse:
    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject=str(user.id),
        roles=[user.role.value],
        email=user.email,
        advisor_id=user.advisor_id,
    )
    return AuthResponse(
        message=message,
        user=UserOut.model_validate(user),
        token=token,
        expires_in=f"{settings.jwt_ttl_days} days",
    )


async def _current_user(principal: Principal, session: AsyncSession) -> User:
    try:
        user_id = uuid.UUID(principal.subject)
    except ValueError:
        user_id = None
    user = await UserRepo(session).get(user_id) if user_id is not None else None
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AuthResponse:
    users = UserRepo(session)
    if await users.get_by_email(body.email) is not None:
        raise HTTPException(
            status_code=HTTP_409_CONFLICT,
            detail="An account with this email address already exists",
        )

    admins = {e.lower() for e in settings.admin_emails}
    user = await users.create(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        password_hash=hash_password(body.password),
        company=body.company,
        role=UserRole.admin if body.email.lower() in admins else UserRole.advisor,
    )
    await session.commit()

    log.info("advisor_registered", user_id=str(user.id), company=body.company)
    return _session_response(user, settings, "Account created successfully")


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AuthResponse:
    user = await UserRepo(session).get_by_email(body.email)
    # Same answer for unknown email and wrong password.
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED, detail="Email or password is incorrect"
        )

    log.info("user_logged_in", user_id=str(user.id))
    return _session_response(user, settings, "Login successful")


@router.get("/me", response_model=UserResponse)
async def get_me(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> UserResponse:
    user = await _current_user(principal, session)
    return UserResponse(user=UserOut.model_validate(user))


@router.put("/me", response_model=UserResponse)
async def update_me(
    body: UpdateProfileRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> UserResponse:
    user = await _current_user(principal, session)

    if body.first_name:
        user.first_name = body.first_name
    if body.last_name:
        user.last_name = body.last_name
    if body.company:
        user.company = body.company

    if body.new_password:
        if not body.current_password or not verify_password(
            body.current_password, user.password_hash
        ):
            raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Invalid current password")
        user.password_hash = hash_password(body.new_password)

    await session.commit()
    await session.refresh(user)

    log.info("user_profile_updated", user_id=str(user.id))
    return UserResponse(message="Profile updated successfully", user=UserOut.model_validate(user))


@router.post("/logout")
async def logout(principal: Principal = Depends(get_principal)) -> dict[str, object]:
    log.info("user_logged_out", user_id=principal.subject)
    return {"success": True, "message": "Logged out successfully"}
