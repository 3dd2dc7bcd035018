"""Schemas for ranked financial recommendations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecommendationType(str, Enum):
    INVESTMENT = "investment"
    PORTFOLIO_REBALANCE = "portfolio_rebalance"
    RISK_ADJUSTMENT = "risk_adjustment"
    DIVERSIFICATION = "diversification"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FinancialRecommendation(BaseModel):
    """An actionable suggestion with its quantified expected impact."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: RecommendationType
    title: str
    description: str
    priority: Priority
    expected_return: float = Field(..., description="Signed percent")
    risk_level: float = Field(..., description="Signed change in risk exposure")
    timeframe: str
    action_items: list[str]
    reasoning: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    potential_gains: float
    potential_losses: float
    market_factors: list[str]


__all__ = ["FinancialRecommendation", "Priority", "RecommendationType"]
