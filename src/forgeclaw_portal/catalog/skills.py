"""
forgeclaw_portal.catalog.skills

Skills catalog served by `/api/skills`.

Responsibilities:
- Hold the static catalog (core, professional, enterprise and add-on skills).
- Filtering, grouping and package/category/provider summaries.
"""

from __future__ import annotations

from pydantic import ConfigDict, Field

from forgeclaw_portal.catalog.tiers import Tier, tier_profile
from forgeclaw_portal.serialization import CamelModel


class Skill(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    category: str
    # One of the tier names, or "addon" for separately priced skills.
    tier: str
    price: int = 0
    features: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    provider: str = "ForgeClaw"
    version: str = "1.0.0"
    enabled: bool = False


class PackageSummary(CamelModel):
    tier: Tier
    skills: list[Skill]
    skill_count: int
    monthly_price: int
    total_value: int
    savings: int


class CategorySummary(CamelModel):
    name: str
    count: int
    skills: list[str]


class ProviderSummary(CamelModel):
    name: str
    skill_count: int


SKILLS_CATALOG: tuple[Skill, ...] = (
    # Core (included in every package)
    Skill(
        id="portfolio-analysis",
        name="Portfolio Analysis",
        description=(
            "Comprehensive portfolio analysis with asset allocation, performance metrics, "
            "and rebalancing recommendations"
        ),
        category="Core",
        tier="core",
        features=[
            "Asset allocation analysis",
            "Performance attribution",
            "Risk metrics (Sharpe, Sortino, VaR)",
            "Rebalancing recommendations",
            "Benchmark comparison",
        ],
        tags=["portfolio", "analysis", "performance"],
        enabled=True,
    ),
    Skill(
        id="risk-assessment",
        name="Risk Assessment",
        description="Client risk tolerance analysis and portfolio risk scoring",
        category="Core",
        tier="core",
        features=[
            "Risk tolerance questionnaires",
            "Portfolio risk scoring",
            "Stress testing scenarios",
            "Correlation analysis",
            "Value at Risk calculations",
        ],
        tags=["risk", "assessment", "tolerance"],
        enabled=True,
    ),
    Skill(
        id="market-data",
        name="Market Data Pro",
        description="Real-time market data, quotes, and technical analysis",
        category="Core",
        tier="core",
        features=[
            "Real-time stock quotes",
            "Technical indicators (RSI, MACD, Bollinger)",
            "Chart generation",
            "News integration",
            "Earnings data",
        ],
        tags=["market", "data", "quotes", "technical"],
        provider="Finnhub",
        version="2.1.0",
        enabled=True,
    ),
    Skill(
        id="basic-reporting",
        name="Basic Reporting",
        description="Generate standard client reports and presentations",
        category="Core",
        tier="core",
        features=[
            "Performance reports",
            "Asset allocation summaries",
            "Basic client presentations",
            "PDF generation",
        ],
        tags=["reporting", "client", "presentations"],
        enabled=True,
    ),
    Skill(
        id="compliance-templates",
        name="Compliance Templates",
        description="SEC/FINRA compliance documentation and templates",
        category="Core",
        tier="core",
        features=[
            "Form ADV templates",
            "Disclosure templates",
            "Trade documentation",
            "Audit trail maintenance",
        ],
        tags=["compliance", "SEC", "FINRA", "documentation"],
        enabled=True,
    ),
    # Professional ($49/month package)
    Skill(
        id="tax-planning",
        name="Advanced Tax Planning",
        description="Tax optimization strategies and planning tools",
        category="Professional",
        tier="professional",
        features=[
            "Tax-loss harvesting optimization",
            "Roth conversion analysis",
            "Capital gains planning",
            "Tax-efficient withdrawal strategies",
            "Estate tax planning",
        ],
        tags=["tax", "planning", "optimization", "harvesting"],
        version="1.2.0",
    ),
    Skill(
        id="performance-attribution",
        name="Performance Attribution",
        description="Advanced performance analysis and attribution",
        category="Professional",
        tier="professional",
        features=[
            "Security-level attribution",
            "Sector/style attribution",
            "Alpha/beta decomposition",
            "Risk-adjusted returns",
            "Custom benchmark analysis",
        ],
        tags=["performance", "attribution", "analysis", "alpha"],
        version="1.1.0",
    ),
    Skill(
        id="crm-integration",
        name="CRM Integration",
        description="Integrate with popular CRM platforms",
        category="Professional",
        tier="professional",
        features=[
            "Client data synchronization",
            "Meeting notes integration",
            "Follow-up reminders",
            "Workflow automation",
            "Salesforce/HubSpot support",
        ],
        tags=["CRM", "integration", "workflow", "automation"],
    ),
    # Enterprise ($149/month package)
    Skill(
        id="esg-screening",
        name="ESG Screening & Analysis",
        description="Environmental, Social, Governance analysis and screening",
        category="Enterprise",
        tier="enterprise",
        features=[
            "ESG score analysis",
            "Impact investing research",
            "Sustainable portfolio construction",
            "ESG reporting",
            "Carbon footprint analysis",
        ],
        tags=["ESG", "sustainability", "impact", "screening"],
    ),
    Skill(
        id="alternative-investments",
        name="Alternative Investment Tools",
        description="Analysis tools for alternative investments",
        category="Enterprise",
        tier="enterprise",
        features=[
            "Private equity analysis",
            "Real estate investment evaluation",
            "Commodities research",
            "Hedge fund due diligence",
            "Crypto asset analysis",
        ],
        tags=["alternatives", "private-equity", "real-estate", "crypto"],
    ),
    # Add-ons (priced separately, never part of a package)
    Skill(
        id="crypto-analysis",
        name="Crypto Analysis Suite",
        description="Comprehensive cryptocurrency analysis and portfolio tools",
        category="Add-on",
        tier="addon",
        price=29,
        features=[
            "Crypto portfolio analysis",
            "DeFi yield farming analysis",
            "NFT valuation tools",
            "Blockchain transaction analysis",
            "Regulatory compliance tracking",
        ],
        tags=["crypto", "defi", "nft", "blockchain"],
        provider="BankrBot",
        version="2.0.0",
    ),
    Skill(
        id="advanced-charting",
        name="Advanced Charting Pro",
        description="Professional-grade charting and visualization tools",
        category="Add-on",
        tier="addon",
        price=19,
        features=[
            "Custom chart creation",
            "Interactive dashboards",
            "Advanced technical indicators",
            "3D visualizations",
            "Export to PowerPoint/PDF",
        ],
        tags=["charting", "visualization", "dashboard", "technical"],
        provider="TradingView",
        version="3.2.0",
    ),
)

# Which catalog tiers each package includes.
_PACKAGE_CONTENTS: dict[Tier, frozenset[str]] = {
    Tier.core: frozenset({"core"}),
    Tier.professional: frozenset({"core", "professional"}),
    Tier.enterprise: frozenset({"core", "professional", "enterprise"}),
}


def get_skill(skill_id: str) -> Skill | None:
    return next((s for s in SKILLS_CATALOG if s.id == skill_id), None)


def filter_skills(
    *,
    category: str | None = None,
    tier: str | None = None,
    tag: str | None = None,
    search: str | None = None,
    enabled: bool | None = None,
) -> list[Skill]:
    skills = list(SKILLS_CATALOG)

    if category:
        skills = [s for s in skills if s.category.lower() == category.lower()]
    if tier:
        skills = [s for s in skills if s.tier == tier]
    if tag:
        needle = tag.lower()
        skills = [s for s in skills if any(needle in t.lower() for t in s.tags)]
    if search:
        term = search.lower()
        skills = [
            s
            for s in skills
            if term in s.name.lower()
            or term in s.description.lower()
            or any(term in t.lower() for t in s.tags)
        ]
    if enabled is not None:
        skills = [s for s in skills if s.enabled is enabled]

    return skills


def group_by_category(skills: list[Skill]) -> dict[str, list[Skill]]:
    grouped: dict[str, list[Skill]] = {}
    for skill in skills:
        grouped.setdefault(skill.category, []).append(skill)
    return grouped


def package_skills(tier: Tier) -> list[Skill]:
    included = _PACKAGE_CONTENTS[tier]
    return [s for s in SKILLS_CATALOG if s.tier in included]


def package_summary(tier: Tier) -> PackageSummary:
    skills = package_skills(tier)
    monthly_price = tier_profile(tier).monthly_price
    total_value = sum(s.price for s in skills)
    return PackageSummary(
        tier=tier,
        skills=skills,
        skill_count=len(skills),
        monthly_price=monthly_price,
        total_value=total_value,
        savings=max(0, total_value - monthly_price),
    )


def categories() -> list[CategorySummary]:
    grouped = group_by_category(list(SKILLS_CATALOG))
    return [
        CategorySummary(name=name, count=len(skills), skills=[s.id for s in skills])
        for name, skills in grouped.items()
    ]


def providers() -> list[ProviderSummary]:
    counts: dict[str, int] = {}
    for skill in SKILLS_CATALOG:
        counts[skill.provider] = counts.get(skill.provider, 0) + 1
    return [ProviderSummary(name=name, skill_count=n) for name, n in counts.items()]
