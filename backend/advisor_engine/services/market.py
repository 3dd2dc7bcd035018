"""Market condition snapshots and the curated insight catalog.

Market data is synthesised rather than fetched. Providers implement the
:class:`MarketDataProvider` protocol so a live feed can replace the simulated
one without touching the recommendation rules.
"""

from __future__ import annotations

import threading
from typing import Protocol, Sequence

import numpy as np

from advisor_engine.schemas.market import (
    Impact,
    InsightCategory,
    InsightTimeframe,
    MarketCondition,
    MarketInsight,
    Trend,
    VolatilityLevel,
)

BULLISH_THRESHOLD = 0.3
BEARISH_THRESHOLD = -0.3
LOW_VOLATILITY_THRESHOLD = 0.4
MEDIUM_VOLATILITY_THRESHOLD = 0.7
CONFIDENCE_RANGE = (0.75, 0.95)
# The simulated feed never produces volatility scores at the extremes.
VOLATILITY_SCORE_RANGE = (0.2, 0.8)

MARKET_FACTORS: tuple[str, ...] = (
    "Economic growth indicators showing steady expansion",
    "Inflation rates stabilizing within target range",
    "Central bank policy supporting liquidity",
    "Geopolitical tensions creating selective volatility",
    "Technology sector showing strong fundamentals",
)

MARKET_INSIGHTS: tuple[MarketInsight, ...] = (
    MarketInsight(
        category=InsightCategory.TREND,
        title="Emerging Market Opportunities",
        description=(
            "Technology and green energy sectors showing strong growth potential "
            "with favorable regulatory environments."
        ),
        impact=Impact.POSITIVE,
        severity=7,
        timeframe=InsightTimeframe.MEDIUM_TERM,
        affected_sectors=["Technology", "Renewable Energy", "Infrastructure"],
        recommendation=(
            "Consider increasing allocation to growth-oriented investment plans "
            "that benefit from these trends."
        ),
    ),
    MarketInsight(
        category=InsightCategory.RISK,
        title="Inflation Pressure Monitoring",
        description=(
            "Rising inflation expectations may impact fixed-income investments "
            "and require portfolio adjustments."
        ),
        impact=Impact.NEGATIVE,
        severity=5,
        timeframe=InsightTimeframe.SHORT_TERM,
        affected_sectors=["Fixed Income", "Consumer Goods", "Utilities"],
        recommendation="Maintain exposure to inflation-protected assets and consider reducing duration risk.",
    ),
    MarketInsight(
        category=InsightCategory.OPPORTUNITY,
        title="Volatility Creates Entry Points",
        description=(
            "Market volatility has created attractive entry points for long-term "
            "investors with appropriate risk tolerance."
        ),
        impact=Impact.POSITIVE,
        severity=6,
        timeframe=InsightTimeframe.IMMEDIATE,
        affected_sectors=["Equities", "Growth Investments", "Alternative Assets"],
        recommendation=(
            "Dollar-cost averaging into quality investments during volatile "
            "periods can enhance long-term returns."
        ),
    ),
    MarketInsight(
        category=InsightCategory.ECONOMIC,
        title="Interest Rate Environment",
        description=(
            "Central bank policy shifts are creating new dynamics in yield curves "
            "and investment returns."
        ),
        impact=Impact.NEUTRAL,
        severity=8,
        timeframe=InsightTimeframe.LONG_TERM,
        affected_sectors=["Banking", "Real Estate", "Bonds"],
        recommendation="Monitor interest rate sensitivity in portfolio and adjust duration exposure accordingly.",
    ),
)


def classify_trend(score: float) -> Trend:
    if score > BULLISH_THRESHOLD:
        return Trend.BULLISH
    if score < BEARISH_THRESHOLD:
        return Trend.BEARISH
    return Trend.NEUTRAL


def classify_volatility(score: float) -> VolatilityLevel:
    if score < LOW_VOLATILITY_THRESHOLD:
        return VolatilityLevel.LOW
    if score < MEDIUM_VOLATILITY_THRESHOLD:
        return VolatilityLevel.MEDIUM
    return VolatilityLevel.HIGH


class MarketDataProvider(Protocol):
    """Pluggable source of market conditions and insights."""

    def current_conditions(self) -> MarketCondition:
        ...

    def insights(self) -> list[MarketInsight]:
        ...


class RandomMarketDataProvider:
    """Simulated market feed drawing fresh scores on every call.

    Pass ``seed`` for reproducible sequences. Draws are serialised with a lock
    because numpy generators are not safe to share between threads.
    """

    def __init__(self, seed: int | None = None, *, rng: np.random.Generator | None = None):
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._lock = threading.Lock()

    def current_conditions(self) -> MarketCondition:
        with self._lock:
            volatility_score = float(self._rng.uniform(*VOLATILITY_SCORE_RANGE))
            trend_score = float(self._rng.uniform(-1.0, 1.0))
            confidence = float(self._rng.uniform(*CONFIDENCE_RANGE))
        return MarketCondition(
            trend=classify_trend(trend_score),
            volatility=classify_volatility(volatility_score),
            confidence=confidence,
            factors=list(MARKET_FACTORS),
        )

    def insights(self) -> list[MarketInsight]:
        return list(MARKET_INSIGHTS)


class StaticMarketDataProvider:
    """Deterministic provider returning a fixed snapshot."""

    def __init__(
        self,
        condition: MarketCondition | None = None,
        insights: Sequence[MarketInsight] | None = None,
    ):
        self._condition = condition or MarketCondition(
            trend=Trend.NEUTRAL,
            volatility=VolatilityLevel.MEDIUM,
            confidence=0.85,
            factors=list(MARKET_FACTORS),
        )
        self._insights = list(MARKET_INSIGHTS if insights is None else insights)

    def current_conditions(self) -> MarketCondition:
        return self._condition

    def insights(self) -> list[MarketInsight]:
        return list(self._insights)


__all__ = [
    "MARKET_FACTORS",
    "MARKET_INSIGHTS",
    "MarketDataProvider",
    "RandomMarketDataProvider",
    "StaticMarketDataProvider",
    "classify_trend",
    "classify_volatility",
]
