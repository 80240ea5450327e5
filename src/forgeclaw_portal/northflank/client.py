"""
forgeclaw_portal.northflank.client

HTTP client for the Northflank REST API (https://api.northflank.com/v1).

Responsibilities:
- Build the shared `httpx.AsyncClient` (auth header, timeout, response logging).
- Translate `AdvisorInstanceConfig` into a deployment service + custom domain.
- Read services back into `AdvisorInstance` views.

Every call is a single request/response: there is no polling for deployment
completion and no retry. Failures surface as `NorthflankError` with a fixed,
caller-safe message; the underlying httpx error is chained and logged.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import httpx

from forgeclaw_portal.catalog.tiers import tier_profile
from forgeclaw_portal.northflank.errors import BuildNotReadyError, NorthflankError
from forgeclaw_portal.northflank.models import (
    AdvisorInstance,
    AdvisorInstanceConfig,
    Build,
    BuildStatus,
    InstanceStatus,
    TriggeredBuild,
    map_service_status,
)
from forgeclaw_portal.observability.logging import get_logger
from forgeclaw_portal.settings import Settings

log = get_logger(__name__)

ADVISOR_SERVICE_PREFIX = "advisor-"


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    if response.is_error:
        log.error(
            "northflank_api_error",
            method=request.method,
            url=request.url.path,
            status_code=response.status_code,
        )
    else:
        log.info(
            "northflank_api",
            method=request.method,
            url=request.url.path,
            status_code=response.status_code,
        )


def create_http_client(
    settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    # One pooled client per process; created on app startup and closed on shutdown.
    return httpx.AsyncClient(
        base_url=settings.northflank_base_url,
        headers={
            "Authorization": f"Bearer {settings.northflank_api_token}",
            "Content-Type": "application/json",
        },
        timeout=httpx.Timeout(settings.northflank_timeout_seconds),
        event_hooks={"response": [_log_response]},
        transport=transport,
    )


def env_var(name: str, value: str) -> dict[str, str]:
    return {"name": name, "value": value}


def build_deployment_payload(config: AdvisorInstanceConfig, settings: Settings) -> dict[str, Any]:
    """
    Northflank `services/deployment` body for one advisor.

    The instance image comes from the shared build service; everything
    advisor-specific (identity, skills, tier, domain) is passed as runtime
    environment variables.
    """

    profile = tier_profile(config.tier)
    return {
        "name": f"{ADVISOR_SERVICE_PREFIX}{config.advisor_id}",
        "billing": {"deploymentPlan": profile.deployment_plan},
        "deployment": {
            "instances": 1,
            "docker": {"configType": "default"},
            "storage": {"ephemeralStorage": {"storageSize": profile.storage_mb}},
        },
        "runtimeEnvironment": [
            env_var("ANTHROPIC_API_KEY", config.anthropic_api_key),
            env_var("ADVISOR_ID", config.advisor_id),
            env_var("ADVISOR_NAME", config.name),
            env_var("ADVISOR_EMAIL", config.email),
            env_var("ADVISOR_COMPANY", config.company),
            env_var("SKILLS_ENABLED", ",".join(config.skills)),
            env_var("FA_MODE", "enabled"),
            env_var("BRAND", settings.brand),
            env_var("TIER", config.tier),
            env_var("CUSTOM_DOMAIN", settings.advisor_domain(config.subdomain)),
        ],
        "internal": {
            "id": settings.northflank_build_service_id,
            "branch": settings.northflank_build_branch,
            "buildSHA": "latest",
        },
    }


def new_instance_view(service_id: str, config: AdvisorInstanceConfig) -> AdvisorInstance:
    return AdvisorInstance(
        id=service_id,
        name=config.name,
        subdomain=config.subdomain,
        status=InstanceStatus.updating,
        created_at=datetime.now(tz=UTC),
        last_activity="Just created",
        skills_enabled=list(config.skills),
    )


class NorthflankClient:
    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http
        self._project = f"/projects/{settings.northflank_project_id}"

    def _service_path(self, service_id: str) -> str:
        return f"{self._project}/services/{service_id}"

    async def _call(self, method: str, path: str, *, json: Any = None) -> Any:
        # Northflank wraps every payload as {"data": ...}.
        r = await self._http.request(method, path, json=json)
        r.raise_for_status()
        if not r.content:
            return None
        body = r.json()
        return body.get("data") if isinstance(body, dict) else None

    async def get_build_status(self) -> BuildStatus:
        build_path = self._service_path(self._settings.northflank_build_service_id)
        try:
            service = await self._call("GET", build_path) or {}
        except (httpx.HTTPError, ValueError) as e:
            log.error("build_status_failed", error=str(e))
            raise NorthflankError("Failed to fetch build status") from e

        status = ((service.get("status") or {}).get("build") or {}).get("status") or "UNKNOWN"

        # The builds listing is best-effort; the overall status above is authoritative.
        try:
            raw = await self._call("GET", f"{build_path}/builds")
        except (httpx.HTTPError, ValueError) as e:
            log.warning("build_list_unavailable", error=str(e))
            raw = []
        if isinstance(raw, dict):
            raw = raw.get("builds") or []
        builds = [Build.model_validate(b) for b in (raw or [])]

        return BuildStatus(status=status, builds=builds[: self._settings.recent_builds_limit])

    async def trigger_build(self) -> TriggeredBuild:
        build_path = self._service_path(self._settings.northflank_build_service_id)
        try:
            build = await self._call(
                "POST",
                f"{build_path}/build",
                json={"branch": self._settings.northflank_build_branch},
            )
        except (httpx.HTTPError, ValueError) as e:
            log.error("build_trigger_failed", error=str(e))
            raise NorthflankError("Failed to trigger build") from e

        if not isinstance(build, dict) or not build.get("id"):
            log.error("build_trigger_failed", error="response carried no build id")
            raise NorthflankError("Failed to trigger build")

        log.info("build_triggered", build_id=build["id"])
        return TriggeredBuild(build_id=build["id"], status=build.get("status", "PENDING"))

    async def create_advisor_instance(self, config: AdvisorInstanceConfig) -> AdvisorInstance:
        build_status = await self.get_build_status()
        if not build_status.is_ready:
            raise BuildNotReadyError(build_status.status)

        payload = build_deployment_payload(config, self._settings)
        try:
            service = await self._call("POST", f"{self._project}/services/deployment", json=payload)
        except (httpx.HTTPError, ValueError) as e:
            log.error("advisor_create_failed", advisor_id=config.advisor_id, error=str(e))
            raise NorthflankError(f"Failed to create advisor instance: {e}") from e

        if not isinstance(service, dict) or not service.get("id"):
            log.error(
                "advisor_create_failed",
                advisor_id=config.advisor_id,
                error="response carried no service id",
            )
            raise NorthflankError("Failed to create advisor instance: no service id returned")

        service_id = service["id"]
        log.info("advisor_instance_created", service_id=service_id, tier=config.tier)

        await self.create_custom_domain(config.subdomain, service_id)
        return new_instance_view(service_id, config)

    async def create_custom_domain(self, subdomain: str, service_id: str) -> bool:
        domain = self._settings.advisor_domain(subdomain)
        try:
            await self._call(
                "POST",
                f"{self._project}/domains",
                json={
                    "name": domain,
                    "type": "subdomain",
                    "parentDomain": self._settings.base_domain,
                    "serviceId": service_id,
                    "port": self._settings.advisor_port,
                },
            )
        except (httpx.HTTPError, ValueError) as e:
            # The instance stays reachable on its Northflank URL without the custom domain.
            log.warning("custom_domain_failed", domain=domain, error=str(e))
            return False

        log.info("custom_domain_created", domain=domain)
        return True

    async def update_advisor_skills(self, service_id: str, skills: list[str]) -> None:
        try:
            await self._call(
                "POST",
                f"{self._service_path(service_id)}/deployment",
                json={"runtimeEnvironment": [env_var("SKILLS_ENABLED", ",".join(skills))]},
            )
        except (httpx.HTTPError, ValueError) as e:
            log.error("advisor_skills_update_failed", service_id=service_id, error=str(e))
            raise NorthflankError("Failed to update advisor skills") from e

        log.info("advisor_skills_updated", service_id=service_id, skills=skills)

    async def get_advisor_instance(self, service_id: str) -> AdvisorInstance | None:
        try:
            service = await self._call("GET", self._service_path(service_id))
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            log.error("advisor_fetch_failed", service_id=service_id, error=str(e))
            raise NorthflankError("Failed to fetch advisor instance") from e
        except (httpx.HTTPError, ValueError) as e:
            log.error("advisor_fetch_failed", service_id=service_id, error=str(e))
            raise NorthflankError("Failed to fetch advisor instance") from e

        return self._instance_from_service(service)

    def _instance_from_service(self, service: dict[str, Any]) -> AdvisorInstance:
        env = {
            item.get("name"): item.get("value") or ""
            for item in service.get("runtimeEnvironment") or []
        }
        domain = env.get("CUSTOM_DOMAIN", "")
        return AdvisorInstance(
            id=service["id"],
            name=env.get("ADVISOR_NAME", ""),
            subdomain=domain.removesuffix(f".{self._settings.base_domain}"),
            status=map_service_status(service.get("status")),
            created_at=service.get("createdAt"),
            # Activity, storage and usage need Northflank metrics APIs; reported as zero/unknown.
            last_activity="Unknown",
            skills_enabled=[s for s in env.get("SKILLS_ENABLED", "").split(",") if s],
        )

    async def list_advisor_instances(self) -> list[AdvisorInstance]:
        try:
            data = await self._call("GET", f"{self._project}/services") or {}
        except (httpx.HTTPError, ValueError) as e:
            log.error("advisor_list_failed", error=str(e))
            raise NorthflankError("Failed to list advisor instances") from e

        advisor_ids = [
            s["id"]
            for s in data.get("services") or []
            if str(s.get("name", "")).startswith(ADVISOR_SERVICE_PREFIX)
        ]

        instances: list[AdvisorInstance] = []
        for service_id in advisor_ids:
            instance = await self.get_advisor_instance(service_id)
            if instance is not None:
                instances.append(instance)
        return instances

    async def delete_advisor_instance(self, service_id: str) -> None:
        try:
            await self._call("DELETE", self._service_path(service_id))
        except (httpx.HTTPError, ValueError) as e:
            log.error("advisor_delete_failed", service_id=service_id, error=str(e))
            raise NorthflankError("Failed to delete advisor instance") from e

        log.info("advisor_instance_deleted", service_id=service_id)

    async def restart_advisor_instance(self, service_id: str) -> None:
        try:
            await self._call("POST", f"{self._service_path(service_id)}/restart")
        except (httpx.HTTPError, ValueError) as e:
            log.error("advisor_restart_failed", service_id=service_id, error=str(e))
            raise NorthflankError("Failed to restart instance") from e

        log.info("advisor_instance_restarted", service_id=service_id)


# --- Module Notes -----------------------------------------------------------
# Northflank derives service ids from service names, so a provisioned advisor's
# id is `advisor-{advisorId}`.
