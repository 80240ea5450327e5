"""
forgeclaw_portal.auth.deps

Bearer-token dependencies.

- `get_principal`: token required (401 without one).
- `get_optional_principal`: anonymous allowed; a token, if sent, must be valid.
- `require_roles(...)`: 403 unless the caller holds every role; admins always pass.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from forgeclaw_portal.api.deps import settings_dep
from forgeclaw_portal.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from forgeclaw_portal.auth.models import Principal
from forgeclaw_portal.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _principal_from_token(token: str, settings: Settings) -> Principal:
    try:
        claims = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=token)
    except JwtValidationError as e:
        raise _unauthorized(f"Invalid token: {e}") from e

    subject = str(claims.get("sub") or "")
    roles = claims.get("roles", [])
    if not subject:
        raise _unauthorized("Invalid token subject")
    if not isinstance(roles, list):
        raise _unauthorized("Invalid token roles")

    return Principal(
        subject=subject,
        roles=frozenset(map(str, roles)),
        email=claims.get("email"),
        advisor_id=claims.get("advisor_id"),
    )


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    if creds is None or not creds.credentials:
        raise _unauthorized("Missing bearer token")
    return _principal_from_token(creds.credentials, settings)


def get_optional_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Principal | None:
    if creds is None or not creds.credentials:
        return None
    return _principal_from_token(creds.credentials, settings)


def require_roles(*required: str):
    required_set = frozenset(required)

    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        if principal.is_admin or required_set <= principal.roles:
            return principal
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient role")

    return _dep
