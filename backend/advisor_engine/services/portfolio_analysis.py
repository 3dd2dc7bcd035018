"""Portfolio return, volatility, risk and diversification metrics.

All functions are pure and operate on records that were already fetched:
holdings (investments joined with their plan) and the valuation history,
which arrives most recent first.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from advisor_engine.schemas.portfolio import Performer, PortfolioAnalysis
from advisor_engine.services.records import PlanHolding, PortfolioSnapshot

BENCHMARK_RETURN_PCT = 8.0
RISK_FREE_RATE_PCT = 2.0
PERIODS_PER_YEAR = 12
DEFAULT_APY = 10.0
DIVERSIFICATION_FACTOR = 0.6
MIN_RISK_SCORE = 1.0
MAX_RISK_SCORE = 10.0
TOP_PERFORMER_COUNT = 3
UNDER_PERFORMER_COUNT = 2


def annualized_return(history: Sequence[PortfolioSnapshot]) -> float:
    """Compound growth between the oldest and newest snapshot, as a percent."""

    if len(history) < 2:
        return 0.0
    latest = history[0].total_value
    earliest = history[-1].total_value
    if earliest <= 0 or latest < 0:
        return 0.0
    return float(((latest / earliest) ** (PERIODS_PER_YEAR / len(history)) - 1) * 100)


def period_returns(history: Sequence[PortfolioSnapshot]) -> np.ndarray:
    values = np.array([snapshot.total_value for snapshot in history], dtype=float)
    if values.size < 2:
        return np.empty(0)
    current, previous = values[:-1], values[1:]
    valid = previous != 0
    return (current[valid] - previous[valid]) / previous[valid]


def annualized_volatility(history: Sequence[PortfolioSnapshot]) -> float:
    """Population standard deviation of period returns, annualised, in percent."""

    returns = period_returns(history)
    if returns.size == 0:
        return 0.0
    return float(np.std(returns) * np.sqrt(PERIODS_PER_YEAR) * 100)


def sharpe_ratio(annualized_return_pct: float, volatility_pct: float) -> float:
    if volatility_pct <= 0:
        return 0.0
    return (annualized_return_pct - RISK_FREE_RATE_PCT) / volatility_pct


def diversification_score(holdings: Sequence[PlanHolding]) -> float:
    unique_plans = len({holding.investment.plan_id for holding in holdings})
    score = unique_plans / max(len(holdings) * DIVERSIFICATION_FACTOR, 1)
    return min(max(score, 0.0), 1.0)


def _holding_apy(holding: PlanHolding) -> float:
    if holding.plan is not None and holding.plan.apy_rate is not None:
        return holding.plan.apy_rate
    if holding.investment.expected_return is not None:
        return holding.investment.expected_return
    return DEFAULT_APY


def risk_score(holdings: Sequence[PlanHolding]) -> float:
    """Scale the mean plan yield onto 1-10; an empty portfolio scores the minimum."""

    if not holdings:
        return MIN_RISK_SCORE
    average_apy = sum(_holding_apy(holding) for holding in holdings) / len(holdings)
    return min(max(average_apy / 3, MIN_RISK_SCORE), MAX_RISK_SCORE)


def _performers(holdings: Sequence[PlanHolding]) -> list[Performer]:
    performers = []
    for holding in holdings:
        investment = holding.investment
        ret = investment.current_returns / investment.amount * 100 if investment.amount else 0.0
        performers.append(
            Performer(
                name=holding.plan.name if holding.plan is not None else "Investment",
                return_pct=ret,
                weight=investment.amount,
            )
        )
    return performers


def top_performers(holdings: Sequence[PlanHolding], limit: int = TOP_PERFORMER_COUNT) -> list[Performer]:
    return sorted(_performers(holdings), key=lambda p: p.return_pct, reverse=True)[:limit]


def under_performers(holdings: Sequence[PlanHolding], limit: int = UNDER_PERFORMER_COUNT) -> list[Performer]:
    return sorted(_performers(holdings), key=lambda p: p.return_pct)[:limit]


def analyze_portfolio(
    holdings: Sequence[PlanHolding], history: Sequence[PortfolioSnapshot]
) -> PortfolioAnalysis:
    invested = sum(holding.investment.amount for holding in holdings)
    current_value = sum(
        holding.investment.amount + holding.investment.current_returns for holding in holdings
    )
    annual = annualized_return(history)
    volatility = annualized_volatility(history)
    return PortfolioAnalysis(
        current_value=current_value,
        total_return=current_value - invested,
        annualized_return=annual,
        volatility=volatility,
        sharpe_ratio=sharpe_ratio(annual, volatility),
        diversification_score=diversification_score(holdings),
        risk_score=risk_score(holdings),
        performance_vs_benchmark=annual - BENCHMARK_RETURN_PCT,
        top_performers=top_performers(holdings),
        under_performers=under_performers(holdings),
    )


__all__ = [
    "BENCHMARK_RETURN_PCT",
    "RISK_FREE_RATE_PCT",
    "analyze_portfolio",
    "annualized_return",
    "annualized_volatility",
    "diversification_score",
    "period_returns",
    "risk_score",
    "sharpe_ratio",
    "top_performers",
    "under_performers",
]
