"""
forgeclaw_portal.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, Northflank token).
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `FORGECLAW_`).
    Defaults are safe for local dev; prod must set the JWT secret and vendor token.
    """

    model_config = SettingsConfigDict(env_prefix="FORGECLAW_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and dev tokens.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "forgeclaw-portal-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3001
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "https://forgeclaw.com",
            "https://portal.forgeclaw.com",
            "https://forgeclaw-platform.vercel.app",
        ]
    )

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "forgeclaw-portal"
    jwt_audience: str = "forgeclaw-api"
    jwt_secret: str = Field(default="forgeclaw-dev-secret-change-in-production", repr=False)
    jwt_ttl_days: int = Field(default=7, ge=1)
    admin_emails: list[str] = Field(default_factory=list)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./forgeclaw.db"
    db_echo: bool = False

    # Northflank
    northflank_api_token: str = Field(default="", repr=False)
    northflank_base_url: str = "https://api.northflank.com/v1"
    northflank_project_id: str = "advisorclaw"
    northflank_build_service_id: str = "advisorclaw"
    northflank_build_branch: str = "master"
    northflank_timeout_seconds: float = 30.0
    recent_builds_limit: int = 5

    # Substitute in-memory fakes for every Northflank call.
    demo_mode: bool = False

    # Advisor instances
    base_domain: str = "forgeclaw.com"
    brand: str = "ForgeClaw"
    advisor_port: int = 18789

    def advisor_domain(self, subdomain: str) -> str:
        return f"{subdomain}.{self.base_domain}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars; the API reads settings from app.state instead.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every other module depends on this one; add fields here rather than reading
# os.environ elsewhere.
