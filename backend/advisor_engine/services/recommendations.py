"""Rule-based recommendation generation and ranking.

Each rule inspects the profile, the portfolio analysis and the market snapshot
independently and yields at most one recommendation. Results are concatenated
in rule order and then ranked by ``priority weight x confidence``; the sort is
stable so equal scores keep rule order.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable
from uuid import UUID, uuid4

from advisor_engine.schemas.market import MarketCondition, Trend
from advisor_engine.schemas.portfolio import PortfolioAnalysis
from advisor_engine.schemas.profile import FinancialProfile, RiskTolerance
from advisor_engine.schemas.recommendations import FinancialRecommendation, Priority, RecommendationType

logger = logging.getLogger(__name__)

IdFactory = Callable[[], UUID]

PRIORITY_WEIGHT: dict[Priority, int] = {
    Priority.CRITICAL: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}

DIVERSIFICATION_THRESHOLD = 0.6
BENCHMARK_DRIFT_THRESHOLD = 3.0
RISK_GAP_THRESHOLD = 1.5
OPPORTUNITY_CONFIDENCE_THRESHOLD = 0.8
TAX_GAIN_THRESHOLD = 1000.0


def priority_weight(priority: Priority) -> int:
    return PRIORITY_WEIGHT[priority]


def ranking_score(recommendation: FinancialRecommendation) -> float:
    return priority_weight(recommendation.priority) * recommendation.confidence


def target_risk_level(profile: FinancialProfile) -> int:
    """Risk level (1-10) appropriate for the profile's tolerance, horizon and age."""

    risk = 5
    if profile.risk_tolerance == RiskTolerance.CONSERVATIVE:
        risk -= 2
    elif profile.risk_tolerance == RiskTolerance.AGGRESSIVE:
        risk += 2

    if profile.time_horizon < 6:
        risk -= 1
    elif profile.time_horizon > 24:
        risk += 1

    # younger investors have more capacity to absorb drawdowns
    if profile.age < 30:
        risk += 1
    elif profile.age > 50:
        risk -= 1

    return max(1, min(10, risk))


def _make_id(slug: str, id_factory: IdFactory) -> str:
    return f"{slug}-{id_factory().hex}"


def diversification_rule(
    profile: FinancialProfile,
    analysis: PortfolioAnalysis,
    market: MarketCondition,
    id_factory: IdFactory,
) -> FinancialRecommendation | None:
    if analysis.diversification_score >= DIVERSIFICATION_THRESHOLD:
        return None
    return FinancialRecommendation(
        id=_make_id("diversify", id_factory),
        type=RecommendationType.DIVERSIFICATION,
        title="Improve Portfolio Diversification",
        description=(
            "Your portfolio shows concentration risk. Consider spreading investments "
            "across different plans and risk levels."
        ),
        priority=Priority.HIGH,
        expected_return=2.5,
        risk_level=3,
        timeframe="1-3 months",
        action_items=[
            "Allocate 25% to conservative plans",
            "Add medium-risk growth investments",
            "Consider international exposure",
            "Reduce concentration in single plan",
        ],
        reasoning=(
            f"Current diversification score: {analysis.diversification_score * 100:.1f}%. "
            "Optimal diversification reduces risk while maintaining returns."
        ),
        confidence=0.85,
        potential_gains=analysis.current_value * 0.15,
        potential_losses=analysis.current_value * 0.05,
        market_factors=list(market.factors[:2]),
    )


def rebalance_rule(
    profile: FinancialProfile,
    analysis: PortfolioAnalysis,
    market: MarketCondition,
    id_factory: IdFactory,
) -> FinancialRecommendation | None:
    if abs(analysis.performance_vs_benchmark) <= BENCHMARK_DRIFT_THRESHOLD:
        return None
    return FinancialRecommendation(
        id=_make_id("rebalance", id_factory),
        type=RecommendationType.PORTFOLIO_REBALANCE,
        title="Portfolio Rebalancing Required",
        description=(
            "Your portfolio allocation has drifted from optimal targets. Rebalancing "
            "can improve risk-adjusted returns."
        ),
        priority=Priority.MEDIUM,
        expected_return=1.8,
        risk_level=2,
        timeframe="2-4 weeks",
        action_items=[
            "Sell overweight positions",
            "Increase allocation to underweight assets",
            "Maintain target risk level",
            "Consider tax implications",
        ],
        reasoning=(
            f"Performance vs benchmark: {analysis.performance_vs_benchmark:.1f}%. "
            "Rebalancing helps maintain optimal risk/return profile."
        ),
        confidence=0.78,
        potential_gains=analysis.current_value * 0.08,
        potential_losses=analysis.current_value * 0.02,
        market_factors=["Portfolio drift from target allocation", "Market timing opportunities"],
    )


def risk_adjustment_rule(
    profile: FinancialProfile,
    analysis: PortfolioAnalysis,
    market: MarketCondition,
    id_factory: IdFactory,
) -> FinancialRecommendation | None:
    target = target_risk_level(profile)
    if abs(analysis.risk_score - target) <= RISK_GAP_THRESHOLD:
        return None

    over_risked = analysis.risk_score > target
    if over_risked:
        title = "Reduce Portfolio Risk"
        direction = "Consider reducing"
        action_items = [
            "Move funds to conservative plans",
            "Reduce position sizes",
            "Add defensive investments",
            "Set stop-loss levels",
        ]
    else:
        title = "Optimize Risk Exposure"
        direction = "You could increase"
        action_items = [
            "Gradually increase growth allocation",
            "Add higher-yield investments",
            "Maintain diversification",
            "Monitor risk metrics",
        ]

    return FinancialRecommendation(
        id=_make_id("risk-adjust", id_factory),
        type=RecommendationType.RISK_ADJUSTMENT,
        title=title,
        description=(
            f"Your current portfolio risk level ({analysis.risk_score:.1f}/10) doesn't align "
            f"with your profile. {direction} risk exposure."
        ),
        priority=Priority.HIGH if over_risked else Priority.MEDIUM,
        expected_return=-0.5 if over_risked else 2.2,
        risk_level=-2 if over_risked else 1,
        timeframe="3-6 weeks",
        action_items=action_items,
        reasoning=(
            f"Target risk level: {target:.1f}/10 based on your {profile.risk_tolerance.value} "
            f"profile and {profile.time_horizon}-month horizon."
        ),
        confidence=0.82,
        potential_gains=analysis.current_value * (0.03 if over_risked else 0.12),
        potential_losses=analysis.current_value * (0.08 if over_risked else 0.05),
        market_factors=["Risk tolerance alignment", "Time horizon considerations"],
    )


def market_opportunity_rule(
    profile: FinancialProfile,
    analysis: PortfolioAnalysis,
    market: MarketCondition,
    id_factory: IdFactory,
) -> FinancialRecommendation | None:
    if market.trend != Trend.BULLISH or market.confidence <= OPPORTUNITY_CONFIDENCE_THRESHOLD:
        return None
    return FinancialRecommendation(
        id=_make_id("market-opportunity", id_factory),
        type=RecommendationType.INVESTMENT,
        title="Capitalize on Bullish Market Trend",
        description=(
            "Current market conditions favor growth investments. Consider increasing "
            "allocation to higher-yield plans."
        ),
        priority=Priority.MEDIUM,
        expected_return=4.2,
        risk_level=4,
        timeframe="1-2 months",
        action_items=[
            "Increase allocation to growth plans",
            "Consider premium investment tiers",
            "Take advantage of market momentum",
            "Monitor for trend reversal signals",
        ],
        reasoning=(
            f"Strong bullish trend with {market.confidence * 100:.0f}% confidence. "
            "Market factors support growth strategies."
        ),
        confidence=market.confidence,
        # sized against idle savings rather than the invested portfolio
        potential_gains=profile.current_savings * 0.20,
        potential_losses=profile.current_savings * 0.08,
        market_factors=list(market.factors),
    )


def tax_optimization_rule(
    profile: FinancialProfile,
    analysis: PortfolioAnalysis,
    market: MarketCondition,
    id_factory: IdFactory,
) -> FinancialRecommendation | None:
    if analysis.total_return <= TAX_GAIN_THRESHOLD:
        return None
    return FinancialRecommendation(
        id=_make_id("tax-optimize", id_factory),
        type=RecommendationType.PORTFOLIO_REBALANCE,
        title="Optimize Tax Efficiency",
        description=(
            "Your portfolio gains can be optimized for tax efficiency. Consider strategic "
            "rebalancing and timing."
        ),
        priority=Priority.LOW,
        expected_return=1.2,
        risk_level=1,
        timeframe="6-12 months",
        action_items=[
            "Harvest tax losses where applicable",
            "Consider long-term holding strategies",
            "Optimize withdrawal timing",
            "Review tax-advantaged options",
        ],
        reasoning=(
            f"Current unrealized gains: ${analysis.total_return:.2f}. "
            "Tax-efficient strategies can improve after-tax returns."
        ),
        confidence=0.70,
        potential_gains=analysis.total_return * 0.15,
        potential_losses=0.0,
        market_factors=["Tax regulation considerations", "Timing optimization opportunities"],
    )


Rule = Callable[
    [FinancialProfile, PortfolioAnalysis, MarketCondition, IdFactory],
    FinancialRecommendation | None,
]

RULES: tuple[Rule, ...] = (
    diversification_rule,
    rebalance_rule,
    risk_adjustment_rule,
    market_opportunity_rule,
    tax_optimization_rule,
)


def rank_recommendations(recommendations: Iterable[FinancialRecommendation]) -> list[FinancialRecommendation]:
    """Sort by priority weight x confidence, highest first, keeping ties in input order."""

    return sorted(recommendations, key=ranking_score, reverse=True)


def generate_recommendations(
    profile: FinancialProfile,
    analysis: PortfolioAnalysis,
    market: MarketCondition,
    *,
    id_factory: IdFactory = uuid4,
    rules: Iterable[Rule] = RULES,
) -> list[FinancialRecommendation]:
    fired = []
    for rule in rules:
        recommendation = rule(profile, analysis, market, id_factory)
        if recommendation is not None:
            fired.append(recommendation)
    logger.info(
        "Generated %d recommendations for user %s: %s",
        len(fired),
        profile.user_id,
        ", ".join(rec.id.rsplit("-", 1)[0] for rec in fired) or "none",
    )
    return rank_recommendations(fired)


__all__ = [
    "PRIORITY_WEIGHT",
    "RULES",
    "diversification_rule",
    "generate_recommendations",
    "market_opportunity_rule",
    "priority_weight",
    "rank_recommendations",
    "ranking_score",
    "rebalance_rule",
    "risk_adjustment_rule",
    "target_risk_level",
    "tax_optimization_rule",
]
