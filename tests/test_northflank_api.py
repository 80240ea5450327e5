"""
tests.test_northflank_api

Admin platform endpoints, on the demo client and against a failing Northflank API.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from conftest import bearer, make_settings, signup_payload

from forgeclaw_portal.api.app import create_app
from forgeclaw_portal.northflank.client import create_http_client


async def _provision(client: httpx.AsyncClient, subdomain: str = "doe-wealth") -> str:
    r = await client.post(
        "/api/advisors/create",
        json=signup_payload(subdomain=subdomain, email=f"owner@{subdomain}.com"),
    )
    assert r.status_code == 201, r.text
    return r.json()["advisor"]["id"]


@pytest.mark.asyncio
async def test_admin_only(client: httpx.AsyncClient) -> None:
    assert (await client.get("/api/northflank/status")).status_code == 401
    advisor = await bearer(client, subject="jane", email="jane@doe-wealth.com")
    for path in ("/status", "/builds", "/instances", "/health"):
        r = await client.get(f"/api/northflank{path}", headers=advisor)
        assert r.status_code == 403, path


@pytest.mark.asyncio
async def test_platform_status(client: httpx.AsyncClient, admin_headers: dict[str, str]) -> None:
    await _provision(client)

    r = await client.get("/api/northflank/status", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["platform"]["status"] == "SUCCESS"
    assert body["platform"]["lastBuild"]["id"] == "demo-build-1"
    assert body["advisors"] == {
        "totalAdvisors": 1,
        "activeInstances": 1,
        "updatingInstances": 0,
        "failedInstances": 0,
    }
    assert body["timestamp"]


@pytest.mark.asyncio
async def test_builds_and_trigger(client: httpx.AsyncClient, admin_headers: dict[str, str]) -> None:
    r = await client.get("/api/northflank/builds", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["currentStatus"] == "SUCCESS"
    assert r.json()["buildCount"] == 1

    r = await client.post("/api/northflank/builds/trigger", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["build"] == {"buildId": "demo-build-2", "status": "PENDING"}
    assert body["estimatedTime"] == "10-20 minutes"

    r = await client.get("/api/northflank/builds", headers=admin_headers)
    assert r.json()["buildCount"] == 2


@pytest.mark.asyncio
async def test_instances(client: httpx.AsyncClient, admin_headers: dict[str, str]) -> None:
    first = await _provision(client)
    await _provision(client, subdomain="smith-cap")

    r = await client.get("/api/northflank/instances", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["totalCount"] == 2
    assert body["statusBreakdown"] == {"running": 2}
    instance = next(i for i in body["instances"] if i["id"] == first)
    assert instance["healthStatus"] == "healthy"
    assert instance["accessUrl"] == "https://doe-wealth.forgeclaw.com"
    assert instance["uptime"].endswith("m")
    assert instance["metrics"] is None

    r = await client.get(f"/api/northflank/instances/{first}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["instance"]["metrics"] == {
        "cpuUsage": None,
        "memoryUsage": None,
        "diskUsage": None,
        "requestCount": None,
    }

    r = await client.get("/api/northflank/instances/advisor-nope", headers=admin_headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_restart(client: httpx.AsyncClient, admin_headers: dict[str, str]) -> None:
    service_id = await _provision(client)

    r = await client.post(f"/api/northflank/instances/{service_id}/restart", headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == {
        "success": True,
        "message": "Instance restart initiated",
        "instanceId": service_id,
        "estimatedTime": "2-3 minutes",
    }

    r = await client.get(f"/api/advisors/{service_id}/audit", headers=admin_headers)
    assert "ADVISOR_RESTARTED" in {e["eventType"] for e in r.json()}

    r = await client.post("/api/northflank/instances/advisor-nope/restart", headers=admin_headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_health_in_demo_mode(client: httpx.AsyncClient, admin_headers: dict[str, str]) -> None:
    r = await client.get("/api/northflank/health", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["apiConnectivity"] is True
    assert body["currentBuildStatus"] == "SUCCESS"


@pytest.mark.asyncio
async def test_vendor_outage(tmp_path: Path) -> None:
    settings = make_settings(tmp_path, demo_mode=False, northflank_api_token="nf-token")
    app = create_app(settings=settings)

    async with app.router.lifespan_context(app):
        await app.state.northflank_http.aclose()
        app.state.northflank_http = create_http_client(
            settings, transport=httpx.MockTransport(lambda request: httpx.Response(500))
        )
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            admin = await bearer(client, subject="ops", roles=["admin"])

            r = await client.get("/api/northflank/health", headers=admin)
            assert r.status_code == 503
            body = r.json()
            assert body["success"] is False
            assert body["apiConnectivity"] is False
            assert body["error"] == "Failed to fetch build status"

            r = await client.get("/api/northflank/status", headers=admin)
            assert r.status_code == 502
            assert r.json() == {
                "detail": "Failed to fetch build status",
                "error": "Failed to fetch build status",
            }

            r = await client.post("/api/advisors/create", json=signup_payload())
            assert r.status_code == 502
