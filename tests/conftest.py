"""
tests.conftest

Shared fixtures: a demo-mode app on a temporary SQLite file, driven in-process
through httpx's ASGI transport.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from forgeclaw_portal.api.app import create_app
from forgeclaw_portal.settings import Settings

ADMIN_EMAIL = "ops@forgeclaw.com"


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "env": "test",
        "demo_mode": True,
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'portal.db'}",
        "admin_emails": [ADMIN_EMAIL],
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings=settings)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    # httpx's ASGITransport does not run the lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c


async def bearer(
    client: httpx.AsyncClient,
    subject: str = "ops",
    roles: list[str] | None = None,
    **claims,
) -> dict[str, str]:
    r = await client.post(
        "/api/dev/token",
        json={"subject": subject, "roles": roles or [], **claims},
    )
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest_asyncio.fixture
async def admin_headers(client: httpx.AsyncClient) -> dict[str, str]:
    return await bearer(client, subject="ops", roles=["admin"])


def signup_payload(**overrides) -> dict:
    body = {
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane@doe-wealth.com",
        "company": "Doe Wealth Partners",
        "phone": "",
        "practiceType": "RIA",
        "aum": "100M-250M",
        "clientCount": "50-100",
        "primaryCustodian": "Schwab",
        "subdomain": "doe-wealth",
        "anthropicApiKey": "sk-ant-test-0123456789",
        "selectedPackage": "professional",
        "additionalSkills": ["crypto-analysis"],
        "dataRetention": "90",
    }
    body.update(overrides)
    return body
