"""
tests.test_northflank_client

NorthflankClient against a fake Northflank API (httpx.MockTransport).
"""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from forgeclaw_portal.northflank.client import (
    NorthflankClient,
    build_deployment_payload,
    create_http_client,
)
from forgeclaw_portal.northflank.errors import BuildNotReadyError, NorthflankError
from forgeclaw_portal.northflank.models import (
    AdvisorInstanceConfig,
    InstanceStatus,
    map_service_status,
)
from forgeclaw_portal.settings import Settings

PROJECT = "/v1/projects/advisorclaw"

Handler = Callable[[httpx.Request], httpx.Response]


def _settings() -> Settings:
    return Settings(env="test", northflank_api_token="nf-token")


def _client(handler: Handler, settings: Settings | None = None) -> NorthflankClient:
    settings = settings or _settings()
    http = create_http_client(settings, transport=httpx.MockTransport(handler))
    return NorthflankClient(settings=settings, http=http)


def _data(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json={"data": payload})


def _config(**overrides) -> AdvisorInstanceConfig:
    values = {
        "advisor_id": "doe-wealth-1760000000000",
        "name": "Jane Doe",
        "subdomain": "doe-wealth",
        "email": "jane@doe-wealth.com",
        "company": "Doe Wealth Partners",
        "anthropic_api_key": "sk-ant-test-0123456789",
        "skills": ("portfolio-analysis", "tax-planning"),
        "tier": "professional",
    }
    values.update(overrides)
    return AdvisorInstanceConfig(**values)


def _advisor_service(service_id: str, *, deployment: str = "COMPLETED") -> dict:
    return {
        "id": service_id,
        "name": service_id,
        "createdAt": "2026-02-21T10:00:00Z",
        "status": {"deployment": {"status": deployment}, "build": {"status": "SUCCESS"}},
        "runtimeEnvironment": [
            {"name": "ADVISOR_NAME", "value": "Jane Doe"},
            {"name": "CUSTOM_DOMAIN", "value": "doe-wealth.forgeclaw.com"},
            {"name": "SKILLS_ENABLED", "value": "portfolio-analysis,,tax-planning"},
        ],
    }


def test_status_mapping() -> None:
    assert map_service_status({"build": {"status": "FAILURE"}}) == InstanceStatus.failed
    assert (
        map_service_status(
            {"build": {"status": "FAILURE"}, "deployment": {"status": "COMPLETED"}}
        )
        == InstanceStatus.failed
    )
    assert map_service_status({"deployment": {"status": "IN_PROGRESS"}}) == InstanceStatus.updating
    assert map_service_status({"deployment": {"status": "COMPLETED"}}) == InstanceStatus.running
    assert map_service_status({"deployment": {"status": "FAILED"}}) == InstanceStatus.failed
    assert map_service_status({"deployment": {"status": "PAUSED"}}) == InstanceStatus.stopped
    assert map_service_status(None) == InstanceStatus.stopped


def test_deployment_payload() -> None:
    payload = build_deployment_payload(_config(), _settings())

    assert payload["name"] == "advisor-doe-wealth-1760000000000"
    assert payload["billing"] == {"deploymentPlan": "nf-compute-20"}
    assert payload["deployment"]["instances"] == 1
    assert payload["deployment"]["storage"]["ephemeralStorage"]["storageSize"] == 3072
    assert payload["internal"] == {"id": "advisorclaw", "branch": "master", "buildSHA": "latest"}

    env = {e["name"]: e["value"] for e in payload["runtimeEnvironment"]}
    assert env == {
        "ANTHROPIC_API_KEY": "sk-ant-test-0123456789",
        "ADVISOR_ID": "doe-wealth-1760000000000",
        "ADVISOR_NAME": "Jane Doe",
        "ADVISOR_EMAIL": "jane@doe-wealth.com",
        "ADVISOR_COMPANY": "Doe Wealth Partners",
        "SKILLS_ENABLED": "portfolio-analysis,tax-planning",
        "FA_MODE": "enabled",
        "BRAND": "ForgeClaw",
        "TIER": "professional",
        "CUSTOM_DOMAIN": "doe-wealth.forgeclaw.com",
    }


@pytest.mark.asyncio
async def test_build_status_limits_recent_builds() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == f"{PROJECT}/services/advisorclaw":
            return _data({"id": "advisorclaw", "status": {"build": {"status": "SUCCESS"}}})
        if request.url.path == f"{PROJECT}/services/advisorclaw/builds":
            return _data([{"id": f"b{i}", "status": "SUCCESS", "extra": 1} for i in range(8)])
        return httpx.Response(404)

    status = await _client(handler).get_build_status()

    assert status.status == "SUCCESS"
    assert status.is_ready
    assert [b.id for b in status.builds] == ["b0", "b1", "b2", "b3", "b4"]
    assert seen[0].headers["authorization"] == "Bearer nf-token"


@pytest.mark.asyncio
async def test_build_status_tolerates_missing_builds_listing() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/builds"):
            return httpx.Response(404)
        return _data({"id": "advisorclaw", "status": {}})

    status = await _client(handler).get_build_status()
    assert status.status == "UNKNOWN"
    assert status.builds == []


@pytest.mark.asyncio
async def test_build_status_failure_raises() -> None:
    client = _client(lambda request: httpx.Response(500))
    with pytest.raises(NorthflankError) as exc:
        await client.get_build_status()
    assert exc.value.message == "Failed to fetch build status"


@pytest.mark.asyncio
async def test_trigger_build() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == f"{PROJECT}/services/advisorclaw/build"
        assert json.loads(request.content) == {"branch": "master"}
        return _data({"id": "build-42", "status": "PENDING"})

    build = await _client(handler).trigger_build()
    assert build.build_id == "build-42"
    assert build.status == "PENDING"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [httpx.Response(200), _data({"status": "PENDING"}), httpx.Response(200, json=[])],
)
async def test_trigger_build_without_id_raises(response: httpx.Response) -> None:
    client = _client(lambda request: response)
    with pytest.raises(NorthflankError) as exc:
        await client.trigger_build()
    assert exc.value.message == "Failed to trigger build"


@pytest.mark.asyncio
async def test_create_advisor_instance_without_service_id_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and request.url.path == f"{PROJECT}/services/advisorclaw":
            return _data({"status": {"build": {"status": "SUCCESS"}}})
        if request.method == "GET":
            return _data([])
        if request.url.path == f"{PROJECT}/services/deployment":
            return httpx.Response(201)
        raise AssertionError(f"unexpected call {request.method} {request.url.path}")

    with pytest.raises(NorthflankError) as exc:
        await _client(handler).create_advisor_instance(_config())
    assert exc.value.message.startswith("Failed to create advisor instance")


@pytest.mark.asyncio
async def test_create_advisor_instance() -> None:
    posted: dict[str, dict] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if request.method == "GET" and path == f"{PROJECT}/services/advisorclaw":
            return _data({"status": {"build": {"status": "SUCCESS"}}})
        if request.method == "GET" and path.endswith("/builds"):
            return _data([])
        if request.method == "POST":
            posted[path] = json.loads(request.content)
            if path == f"{PROJECT}/services/deployment":
                return _data({"id": "advisor-doe-wealth-1760000000000"})
            if path == f"{PROJECT}/domains":
                return _data({"name": posted[path]["name"]})
        return httpx.Response(404)

    instance = await _client(handler).create_advisor_instance(_config())

    assert instance.id == "advisor-doe-wealth-1760000000000"
    assert instance.status == InstanceStatus.updating
    assert instance.last_activity == "Just created"
    assert instance.skills_enabled == ["portfolio-analysis", "tax-planning"]
    assert instance.monthly_usage.tokens == 0

    assert posted[f"{PROJECT}/services/deployment"]["name"] == "advisor-doe-wealth-1760000000000"
    assert posted[f"{PROJECT}/domains"] == {
        "name": "doe-wealth.forgeclaw.com",
        "type": "subdomain",
        "parentDomain": "forgeclaw.com",
        "serviceId": "advisor-doe-wealth-1760000000000",
        "port": 18789,
    }


@pytest.mark.asyncio
async def test_create_requires_successful_build() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            raise AssertionError("no deployment may be created")
        if request.url.path.endswith("/builds"):
            return _data([])
        return _data({"status": {"build": {"status": "RUNNING"}}})

    with pytest.raises(BuildNotReadyError) as exc:
        await _client(handler).create_advisor_instance(_config())
    assert exc.value.status == "RUNNING"


@pytest.mark.asyncio
async def test_create_survives_custom_domain_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/domains"):
            return httpx.Response(409, json={"error": "exists"})
        if path.endswith("/services/deployment"):
            return _data({"id": "advisor-x"})
        if path.endswith("/builds"):
            return _data([])
        return _data({"status": {"build": {"status": "SUCCESS"}}})

    instance = await _client(handler).create_advisor_instance(_config())
    assert instance.id == "advisor-x"


@pytest.mark.asyncio
async def test_create_failure_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/services/deployment"):
            return httpx.Response(400, json={"error": "bad plan"})
        if request.url.path.endswith("/builds"):
            return _data([])
        return _data({"status": {"build": {"status": "SUCCESS"}}})

    with pytest.raises(NorthflankError) as exc:
        await _client(handler).create_advisor_instance(_config())
    assert exc.value.message.startswith("Failed to create advisor instance")


@pytest.mark.asyncio
async def test_get_advisor_instance_reads_runtime_environment() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == f"{PROJECT}/services/advisor-doe"
        return _data(_advisor_service("advisor-doe", deployment="IN_PROGRESS"))

    instance = await _client(handler).get_advisor_instance("advisor-doe")

    assert instance is not None
    assert instance.name == "Jane Doe"
    assert instance.subdomain == "doe-wealth"
    assert instance.status == InstanceStatus.updating
    assert instance.skills_enabled == ["portfolio-analysis", "tax-planning"]
    assert instance.last_activity == "Unknown"
    assert instance.created_at is not None and instance.created_at.year == 2026


@pytest.mark.asyncio
async def test_get_missing_advisor_instance_is_none() -> None:
    client = _client(lambda request: httpx.Response(404, json={"error": "not found"}))
    assert await client.get_advisor_instance("advisor-missing") is None


@pytest.mark.asyncio
async def test_get_advisor_instance_error_raises() -> None:
    client = _client(lambda request: httpx.Response(503))
    with pytest.raises(NorthflankError):
        await client.get_advisor_instance("advisor-doe")


@pytest.mark.asyncio
async def test_list_only_includes_advisor_services() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == f"{PROJECT}/services":
            return _data(
                {
                    "services": [
                        {"id": "advisorclaw", "name": "advisorclaw"},
                        {"id": "advisor-a", "name": "advisor-a"},
                        {"id": "advisor-b", "name": "advisor-b"},
                        {"id": "advisor-gone", "name": "advisor-gone"},
                    ]
                }
            )
        if path == f"{PROJECT}/services/advisor-gone":
            return httpx.Response(404)
        service_id = path.rsplit("/", 1)[-1]
        return _data(_advisor_service(service_id))

    instances = await _client(handler).list_advisor_instances()
    assert [i.id for i in instances] == ["advisor-a", "advisor-b"]
    assert all(i.status == InstanceStatus.running for i in instances)


@pytest.mark.asyncio
async def test_update_delete_restart() -> None:
    calls: list[tuple[str, str, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path, request.content))
        return httpx.Response(200, json={"data": {}})

    client = _client(handler)
    await client.update_advisor_skills("advisor-a", ["market-data", "tax-planning"])
    await client.delete_advisor_instance("advisor-a")
    await client.restart_advisor_instance("advisor-a")

    method, path, content = calls[0]
    assert (method, path) == ("POST", f"{PROJECT}/services/advisor-a/deployment")
    assert json.loads(content) == {
        "runtimeEnvironment": [{"name": "SKILLS_ENABLED", "value": "market-data,tax-planning"}]
    }
    assert calls[1][:2] == ("DELETE", f"{PROJECT}/services/advisor-a")
    assert calls[2][:2] == ("POST", f"{PROJECT}/services/advisor-a/restart")


@pytest.mark.asyncio
async def test_transport_errors_are_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(NorthflankError) as exc:
        await client.delete_advisor_instance("advisor-a")
    assert exc.value.message == "Failed to delete advisor instance"
