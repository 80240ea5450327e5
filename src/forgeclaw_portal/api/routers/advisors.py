"""
forgeclaw_portal.api.routers.advisors

Advisor instance endpoints used by the signup flow and the advisor dashboard.

Responsibilities:
- Public signup: provision a new advisor instance on Northflank.
- Owner/admin reads and changes (skills, deletion, workspace files, audit trail).
- Admin-only listing of every advisor instance.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND

from forgeclaw_portal.api.deps import db_session, northflank_dep, settings_dep
from forgeclaw_portal.auth.deps import get_optional_principal, get_principal, require_roles
from forgeclaw_portal.auth.models import Principal
from forgeclaw_portal.catalog.tiers import Tier
from forgeclaw_portal.db.repositories.audit import AuditRepo
from forgeclaw_portal.db.repositories.users import UserRepo
from forgeclaw_portal.northflank.models import AdvisorInstance
from forgeclaw_portal.northflank.protocol import NorthflankApi
from forgeclaw_portal.serialization import CamelModel
from forgeclaw_portal.services.platform import WorkspaceEntry, workspace_listing
from forgeclaw_portal.services.provisioning_service import AdvisorProvisioningService
from forgeclaw_portal.settings import Settings

router = APIRouter(prefix="/api/advisors", tags=["advisors"])


class CreateAdvisorRequest(CamelModel):
    # Basic info
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    company: str = Field(min_length=1, max_length=100)
    phone: str = ""

    # Practice info (kept on the local record only)
    practice_type: str = ""
    aum: str = ""
    client_count: str = ""
    primary_custodian: str = ""

    # Instance configuration
    subdomain: str = Field(min_length=3, max_length=30, pattern=r"^[a-z0-9-]+$")
    anthropic_api_key: str = Field(min_length=10, repr=False)
    selected_package: Tier
    additional_skills: list[str] = Field(default_factory=list)
    data_retention: str = ""

    def profile(self) -> dict[str, Any]:
        return self.model_dump(
            include={
                "phone",
                "practice_type",
                "aum",
                "client_count",
                "primary_custodian",
                "data_retention",
            }
        )


class CreateAdvisorResponse(CamelModel):
    success: bool = True
    advisor: AdvisorInstance
    message: str = "Advisor instance created successfully"
    next_steps: list[str]


class AdvisorResponse(CamelModel):
    success: bool = True
    advisor: AdvisorInstance


class AdvisorListResponse(CamelModel):
    success: bool = True
    advisors: list[AdvisorInstance]
    count: int


class UpdateSkillsRequest(CamelModel):
    skills: list[str]


class UpdateSkillsResponse(CamelModel):
    success: bool = True
    message: str = "Skills updated successfully"
    skills: list[str]


class FilesResponse(CamelModel):
    success: bool = True
    path: str
    files: list[WorkspaceEntry]
    advisor_id: str


async def authorize_advisor(
    advisor_id: str,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> Principal:
    """
    Owner or admin. Non-owners get the same 404 as a missing advisor.

    Ownership comes from the account link (`users.advisor_id`), never from the
    email claim: registration does not verify email addresses. The stored link
    also covers tokens issued before the account provisioned its instance.
    """

    if principal.holds_advisor(advisor_id):
        return principal
    user_id = principal.user_id
    if user_id is not None:
        user = await UserRepo(session).get(user_id)
        if user is not None and user.advisor_id == advisor_id:
            return principal
    raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Advisor not found")


def _service(
    session: AsyncSession, settings: Settings, client: NorthflankApi
) -> AdvisorProvisioningService:
    return AdvisorProvisioningService(session=session, settings=settings, client=client)


async def _require_instance(client: NorthflankApi, advisor_id: str) -> AdvisorInstance:
    instance = await client.get_advisor_instance(advisor_id)
    if instance is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Advisor not found")
    return instance


@router.post("", response_model=CreateAdvisorResponse, status_code=HTTP_201_CREATED)
@router.post(
    "/create",
    response_model=CreateAdvisorResponse,
    status_code=HTTP_201_CREATED,
    include_in_schema=False,
)
async def create_advisor(
    body: CreateAdvisorRequest,
    principal: Principal | None = Depends(get_optional_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    client: NorthflankApi = Depends(northflank_dep),
) -> CreateAdvisorResponse:
    # Public: the signup wizard posts here before the visitor has an account.
    result = await _service(session, settings, client).create(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        company=body.company,
        subdomain=body.subdomain,
        anthropic_api_key=body.anthropic_api_key,
        tier=body.selected_package.value,
        additional_skills=body.additional_skills,
        profile=body.profile(),
        principal=principal,
    )
    return CreateAdvisorResponse(advisor=result.instance, next_steps=result.next_steps)


@router.get(
    "",
    response_model=AdvisorListResponse,
    dependencies=[Depends(require_roles("admin"))],
)
async def list_advisors(client: NorthflankApi = Depends(northflank_dep)) -> AdvisorListResponse:
    instances = await client.list_advisor_instances()
    return AdvisorListResponse(advisors=instances, count=len(instances))


@router.get(
    "/{advisor_id}",
    response_model=AdvisorResponse,
    dependencies=[Depends(authorize_advisor)],
)
async def get_advisor(
    advisor_id: str,
    client: NorthflankApi = Depends(northflank_dep),
) -> AdvisorResponse:
    return AdvisorResponse(advisor=await _require_instance(client, advisor_id))


@router.put("/{advisor_id}/skills", response_model=UpdateSkillsResponse)
async def update_advisor_skills(
    advisor_id: str,
    body: UpdateSkillsRequest,
    principal: Principal = Depends(authorize_advisor),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    client: NorthflankApi = Depends(northflank_dep),
) -> UpdateSkillsResponse:
    await _require_instance(client, advisor_id)
    skills = await _service(session, settings, client).update_skills(
        service_id=advisor_id, skills=body.skills, principal=principal
    )
    return UpdateSkillsResponse(skills=skills)


@router.delete("/{advisor_id}")
async def delete_advisor(
    advisor_id: str,
    principal: Principal = Depends(authorize_advisor),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    client: NorthflankApi = Depends(northflank_dep),
) -> dict[str, Any]:
    await _require_instance(client, advisor_id)
    await _service(session, settings, client).delete(service_id=advisor_id, principal=principal)
    return {"success": True, "message": "Advisor instance deleted successfully"}


@router.get(
    "/{advisor_id}/files",
    response_model=FilesResponse,
    dependencies=[Depends(authorize_advisor)],
)
async def list_advisor_files(advisor_id: str, path: str = "/") -> FilesResponse:
    return FilesResponse(path=path, files=workspace_listing(path), advisor_id=advisor_id)


@router.get("/{advisor_id}/audit", dependencies=[Depends(authorize_advisor)])
async def list_advisor_audit(
    advisor_id: str,
    session: AsyncSession = Depends(db_session),
) -> list[dict[str, Any]]:
    events = await AuditRepo(session).list_for_subject(advisor_id)
    return [
        {
            "id": str(e.id),
            "eventType": e.event_type,
            "actor": e.actor,
            "details": e.details,
            "createdAt": e.created_at.isoformat(),
        }
        for e in events
    ]
