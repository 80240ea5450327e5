"""
forgeclaw_portal.api.routers.dev_auth

Operator/test token minting outside production.

Tokens minted here are not tied to an account: `subject` is free-form and the
`email` / `advisorId` claims are taken as given, so they can impersonate an
advisor owner or an admin. The route answers 404 when `env == "prod"`.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_404_NOT_FOUND

from forgeclaw_portal.api.deps import settings_dep
from forgeclaw_portal.auth.jwt import JwtConfig, issue_token
from forgeclaw_portal.observability.logging import get_logger
from forgeclaw_portal.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/api/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    subject: str = Field(min_length=1, max_length=256)
    roles: list[str] = Field(default_factory=list)
    email: str | None = None
    advisor_id: str | None = None
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(settings_dep),
) -> DevTokenResponse:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    ttl = timedelta(minutes=body.ttl_minutes)
    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject=body.subject,
        roles=body.roles,
        email=body.email,
        advisor_id=body.advisor_id,
        ttl=ttl,
    )
    log.info("dev_token_issued", subject=body.subject, roles=body.roles)
    return DevTokenResponse(access_token=token, expires_in=int(ttl.total_seconds()))
