"""
forgeclaw_portal.api.routers.skills

Public skills catalog endpoints (static data, no auth).
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from starlette.status import HTTP_404_NOT_FOUND

from forgeclaw_portal.catalog.skills import (
    CategorySummary,
    PackageSummary,
    ProviderSummary,
    Skill,
    categories,
    filter_skills,
    get_skill,
    group_by_category,
    package_summary,
    providers,
)
from forgeclaw_portal.catalog.tiers import Tier
from forgeclaw_portal.serialization import CamelModel

router = APIRouter(prefix="/api/skills", tags=["skills"])


class SkillFilters(CamelModel):
    category: str | None = None
    tier: str | None = None
    tag: str | None = None
    search: str | None = None
    enabled: bool | None = None


class SkillListResponse(CamelModel):
    success: bool = True
    skills: list[Skill]
    # Keys are catalog category names, so they are not camelCased.
    skills_by_category: dict[str, list[Skill]]
    total_count: int
    filters: SkillFilters


class SkillResponse(CamelModel):
    success: bool = True
    skill: Skill


class PackageResponse(PackageSummary):
    success: bool = True


class CategoriesResponse(CamelModel):
    success: bool = True
    categories: list[CategorySummary]


class ProvidersResponse(CamelModel):
    success: bool = True
    providers: list[ProviderSummary]


@router.get("", response_model=SkillListResponse)
async def list_skills(
    category: str | None = None,
    tier: str | None = None,
    tag: str | None = None,
    search: str | None = None,
    enabled: bool | None = None,
) -> SkillListResponse:
    skills = filter_skills(category=category, tier=tier, tag=tag, search=search, enabled=enabled)
    return SkillListResponse(
        skills=skills,
        skills_by_category=group_by_category(skills),
        total_count=len(skills),
        filters=SkillFilters(
            category=category, tier=tier, tag=tag, search=search, enabled=enabled
        ),
    )


# Fixed paths are declared before `/{skill_id}` so they are not captured by it.
@router.get("/packages/{tier}", response_model=PackageResponse)
async def get_package(tier: Tier) -> PackageResponse:
    return PackageResponse(**package_summary(tier).model_dump())


@router.get("/meta/categories", response_model=CategoriesResponse)
async def list_categories() -> CategoriesResponse:
    return CategoriesResponse(categories=categories())


@router.get("/meta/providers", response_model=ProvidersResponse)
async def list_providers() -> ProvidersResponse:
    return ProvidersResponse(providers=providers())


@router.get("/{skill_id}", response_model=SkillResponse)
async def get_skill_details(skill_id: str) -> SkillResponse:
    skill = get_skill(skill_id)
    if skill is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Skill not found")
    return SkillResponse(skill=skill)
