"""
forgeclaw_portal.catalog.tiers

Pricing tiers and what each one provisions.

A tier decides three things for an advisor instance:
- the Northflank deployment plan and ephemeral storage size,
- the skill ids written to `SKILLS_ENABLED` at creation time,
- the monthly package price shown in the catalog.

Unknown tier strings resolve to `core`, so a bad value never provisions more
than the entry package.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Tier(enum.StrEnum):
    core = "core"
    professional = "professional"
    enterprise = "enterprise"


@dataclass(frozen=True, slots=True)
class TierProfile:
    tier: Tier
    monthly_price: int
    deployment_plan: str
    storage_mb: int
    skills: tuple[str, ...]


_CORE_SKILLS = (
    "portfolio-analysis",
    "risk-assessment",
    "market-data",
    "basic-reporting",
    "compliance-templates",
)

_PROFESSIONAL_SKILLS = (
    "portfolio-analysis",
    "risk-assessment",
    "market-data",
    "advanced-reporting",
    "compliance-templates",
    "tax-planning",
    "performance-attribution",
    "crm-integration",
)

_ENTERPRISE_SKILLS = _PROFESSIONAL_SKILLS + (
    "esg-screening",
    "alternative-investments",
    "multi-custodian",
    "api-access",
    "white-label-reports",
)

TIER_PROFILES: dict[Tier, TierProfile] = {
    Tier.core: TierProfile(
        tier=Tier.core,
        monthly_price=0,
        deployment_plan="nf-compute-10",
        storage_mb=2048,
        skills=_CORE_SKILLS,
    ),
    Tier.professional: TierProfile(
        tier=Tier.professional,
        monthly_price=49,
        deployment_plan="nf-compute-20",
        storage_mb=3072,
        skills=_PROFESSIONAL_SKILLS,
    ),
    Tier.enterprise: TierProfile(
        tier=Tier.enterprise,
        monthly_price=149,
        deployment_plan="nf-compute-50",
        storage_mb=5120,
        skills=_ENTERPRISE_SKILLS,
    ),
}


def tier_profile(tier: str) -> TierProfile:
    try:
        return TIER_PROFILES[Tier(tier)]
    except ValueError:
        return TIER_PROFILES[Tier.core]


def tier_skills(tier: str) -> list[str]:
    return list(tier_profile(tier).skills)


def merge_skills(tier: str, additional: list[str]) -> list[str]:
    """Tier skills followed by add-ons, first occurrence wins."""
    return list(dict.fromkeys([*tier_skills(tier), *additional]))
