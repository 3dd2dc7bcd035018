"""Dashboard sections, portfolio health and payload composition.

Each section is computed independently and captured as a
:class:`SectionResult`. A failed section does not abort the dashboard; its
block is left empty and a warning names the section instead.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Generic, TypeVar

from advisor_engine.schemas.dashboard import (
    DashboardData,
    DashboardEducation,
    DashboardMarket,
    DashboardOverview,
    DashboardProfile,
    DashboardRecommendations,
    PortfolioHealth,
    RecommendationCategories,
    SectionWarning,
)
from advisor_engine.schemas.education import EducationalContent
from advisor_engine.schemas.market import MarketCondition, MarketInsight
from advisor_engine.schemas.portfolio import PortfolioAnalysis
from advisor_engine.schemas.profile import FinancialProfile
from advisor_engine.schemas.recommendations import FinancialRecommendation, Priority, RecommendationType

logger = logging.getLogger(__name__)

T = TypeVar("T")

OVERVIEW_LIMIT = 3


@dataclass(frozen=True)
class SectionResult(Generic[T]):
    """Outcome of one dashboard section: a value, or the reason it is missing."""

    name: str
    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def run_section(name: str, func: Callable[..., T], *args: object) -> SectionResult[T]:
    """Run a synchronous computation in a worker thread and capture its outcome."""

    try:
        value = await asyncio.to_thread(func, *args)
    except Exception as exc:  # noqa: BLE001 - a failed section degrades the dashboard
        logger.warning("Dashboard section %s failed: %s", name, exc, exc_info=True)
        return SectionResult(name=name, error=str(exc) or exc.__class__.__name__)
    return SectionResult(name=name, value=value)


def skipped_section(name: str, dependencies: list[SectionResult]) -> SectionResult:
    missing = ", ".join(dep.name for dep in dependencies if not dep.ok)
    logger.warning("Dashboard section %s skipped; unavailable inputs: %s", name, missing)
    return SectionResult(name=name, error=f"Skipped because {missing} could not be computed")


def portfolio_health_score(analysis: PortfolioAnalysis) -> int:
    """Weighted blend of diversification, risk, Sharpe ratio and benchmark beat.

    The result is not re-clamped: a very low risk score or a negative Sharpe
    ratio can push it outside 0-100.
    """

    raw = (
        analysis.diversification_score * 30
        + max(0.0, 10 - analysis.risk_score) * 20
        + min(analysis.sharpe_ratio * 10, 30)
        + (20 if analysis.performance_vs_benchmark > 0 else 0)
    )
    return int(math.floor(raw + 0.5))


def portfolio_health(analysis: PortfolioAnalysis) -> PortfolioHealth:
    return PortfolioHealth(
        score=portfolio_health_score(analysis),
        risk_level=analysis.risk_score,
        diversification=analysis.diversification_score,
        performance=analysis.performance_vs_benchmark,
    )


def _count(recommendations: list[FinancialRecommendation], kind: RecommendationType) -> int:
    return sum(1 for rec in recommendations if rec.type == kind)


def summarise_recommendations(recommendations: list[FinancialRecommendation]) -> DashboardRecommendations:
    urgent = [rec for rec in recommendations if rec.priority in (Priority.HIGH, Priority.CRITICAL)]
    return DashboardRecommendations(
        total=len(recommendations),
        high_priority=urgent[:OVERVIEW_LIMIT],
        categories=RecommendationCategories(
            investment=_count(recommendations, RecommendationType.INVESTMENT),
            rebalance=_count(recommendations, RecommendationType.PORTFOLIO_REBALANCE),
            risk=_count(recommendations, RecommendationType.RISK_ADJUSTMENT),
            diversification=_count(recommendations, RecommendationType.DIVERSIFICATION),
        ),
    )


def compose_dashboard(
    user_id: int,
    *,
    profile: SectionResult[FinancialProfile],
    portfolio: SectionResult[PortfolioAnalysis],
    market: SectionResult[MarketCondition],
    insights: SectionResult[list[MarketInsight]],
    recommendations: SectionResult[list[FinancialRecommendation]],
    education: SectionResult[list[EducationalContent]],
    generated_at: datetime,
) -> DashboardData:
    sections = (profile, portfolio, market, insights, recommendations, education)
    warnings = [
        SectionWarning(section=section.name, message=section.error or "")
        for section in sections
        if not section.ok
    ]

    overview = None
    if portfolio.ok and portfolio.value is not None:
        analysis = portfolio.value
        overview = DashboardOverview(
            portfolio_value=analysis.current_value,
            total_return=analysis.total_return,
            annualized_return=analysis.annualized_return,
            portfolio_health=portfolio_health(analysis),
        )

    profile_block = None
    if profile.ok and profile.value is not None:
        p = profile.value
        profile_block = DashboardProfile(
            risk_tolerance=p.risk_tolerance,
            experience=p.experience,
            time_horizon=p.time_horizon,
            investment_goals=list(p.investment_goals),
        )

    education_block = None
    if education.ok and education.value is not None:
        education_block = DashboardEducation(
            recommended_content=education.value[:OVERVIEW_LIMIT],
            total_content=len(education.value),
        )

    return DashboardData(
        user_id=user_id,
        overview=overview,
        recommendations=(
            summarise_recommendations(recommendations.value)
            if recommendations.ok and recommendations.value is not None
            else None
        ),
        profile=profile_block,
        market=DashboardMarket(
            conditions=market.value if market.ok else None,
            key_insights=insights.value[:OVERVIEW_LIMIT] if insights.ok and insights.value is not None else None,
        ),
        education=education_block,
        warnings=warnings,
        generated_at=generated_at,
    )


__all__ = [
    "SectionResult",
    "compose_dashboard",
    "portfolio_health",
    "portfolio_health_score",
    "run_section",
    "skipped_section",
    "summarise_recommendations",
]
