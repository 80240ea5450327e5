"""
forgeclaw_portal.auth.jwt

Portal session tokens (PyJWT, HS256 by default).

Claims:
- registered: `iss`, `aud`, `sub`, `iat`, `exp` (all required on decode)
- `roles`: list of role names (`advisor`, `admin`)
- `email`, `advisor_id`: present only when known; ownership checks read them
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from forgeclaw_portal.settings import Settings

REQUIRED_CLAIMS = ["exp", "iat", "iss", "aud", "sub"]


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str
    ttl: timedelta = timedelta(days=7)
    leeway: timedelta = timedelta(seconds=30)

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
            ttl=timedelta(days=settings.jwt_ttl_days),
        )


class JwtValidationError(Exception):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    roles: list[str],
    email: str | None = None,
    advisor_id: str | None = None,
    ttl: timedelta | None = None,
) -> str:
    issued_at = datetime.now(tz=UTC)
    expires_at = issued_at + (ttl if ttl is not None else cfg.ttl)
    claims: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "roles": list(roles),
        "iat": issued_at,
        "exp": expires_at,
    }
    if email:
        claims["email"] = email
    if advisor_id:
        claims["advisor_id"] = advisor_id
    return jwt.encode(claims, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            audience=cfg.audience,
            issuer=cfg.issuer,
            leeway=cfg.leeway,
            options={"require": REQUIRED_CLAIMS},
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e
