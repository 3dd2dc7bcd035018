"""Portfolio performance analysis schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Performer(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    return_pct: float = Field(..., alias="return", description="Current returns as a percentage of the invested amount")
    weight: float = Field(..., description="Invested amount")


class PortfolioAnalysis(BaseModel):
    """Returns, risk and diversification metrics for a user's holdings."""

    model_config = ConfigDict(frozen=True)

    current_value: float
    total_return: float
    annualized_return: float = Field(..., description="Percent")
    volatility: float = Field(..., description="Annualised percent")
    sharpe_ratio: float
    diversification_score: float = Field(..., ge=0.0, le=1.0)
    risk_score: float = Field(..., ge=1.0, le=10.0)
    performance_vs_benchmark: float = Field(..., description="Annualised return minus the benchmark, percent")
    top_performers: list[Performer]
    under_performers: list[Performer]


__all__ = ["Performer", "PortfolioAnalysis"]
