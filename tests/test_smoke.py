"""
tests.test_smoke

Smoke tests: the app boots (tables created, demo data seeded) and serves its probes.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
import pytest
from conftest import make_settings

from forgeclaw_portal.api.app import create_app
from forgeclaw_portal.db.session import migration_url


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    r = await client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["version"] == "1.0.0"
    assert "timestamp" in body

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json() == {"status": "ready", "database": "ok", "northflank": "demo"}


@pytest.mark.asyncio
async def test_request_id_is_propagated(client: httpx.AsyncClient) -> None:
    r = await client.get("/health", headers={"x-request-id": "req-123"})
    assert r.headers["x-request-id"] == "req-123"

    r = await client.get("/health")
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_unknown_route_is_404(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/nope")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_dev_tokens_disabled_in_prod(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path, env="prod", demo_mode=False))
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.post("/api/dev/token", json={"subject": "ops", "roles": ["admin"]})
            assert r.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(("env", "warned"), [("dev", True), ("test", True), ("prod", False)])
async def test_open_dev_token_route_is_warned(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, env: str, warned: bool
) -> None:
    app = create_app(
        settings=make_settings(tmp_path, env=env, demo_mode=False, northflank_api_token="nf")
    )
    with caplog.at_level(logging.WARNING):
        async with app.router.lifespan_context(app):
            pass
    assert ("dev_token_route_enabled" in caplog.text) is warned


def test_migration_url() -> None:
    assert migration_url("sqlite+aiosqlite:///./forgeclaw.db") == "sqlite:///./forgeclaw.db"
    # other drivers are passed through unchanged
    assert (
        migration_url("postgresql+psycopg://portal:secret@db/portal")
        == "postgresql+psycopg://portal:secret@db/portal"
    )
