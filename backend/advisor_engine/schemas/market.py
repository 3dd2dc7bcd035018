"""Market snapshot and curated insight schemas."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Trend(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class VolatilityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class InsightCategory(str, Enum):
    TREND = "trend"
    OPPORTUNITY = "opportunity"
    RISK = "risk"
    ECONOMIC = "economic"


class Impact(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class InsightTimeframe(str, Enum):
    IMMEDIATE = "immediate"
    SHORT_TERM = "short_term"
    MEDIUM_TERM = "medium_term"
    LONG_TERM = "long_term"


class MarketCondition(BaseModel):
    model_config = ConfigDict(frozen=True)

    trend: Trend
    volatility: VolatilityLevel
    confidence: float = Field(..., ge=0.75, le=0.95)
    factors: list[str]


class MarketInsight(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: InsightCategory
    title: str
    description: str
    impact: Impact
    severity: int = Field(..., ge=1, le=10)
    timeframe: InsightTimeframe
    affected_sectors: list[str]
    recommendation: str


__all__ = [
    "Impact",
    "InsightCategory",
    "InsightTimeframe",
    "MarketCondition",
    "MarketInsight",
    "Trend",
    "VolatilityLevel",
]
