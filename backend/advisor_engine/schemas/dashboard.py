"""Aggregated dashboard payload schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .education import EducationalContent
from .market import MarketCondition, MarketInsight
from .profile import Experience, RiskTolerance
from .recommendations import FinancialRecommendation


class PortfolioHealth(BaseModel):
    score: int
    risk_level: float
    diversification: float
    performance: float


class DashboardOverview(BaseModel):
    portfolio_value: float
    total_return: float
    annualized_return: float
    portfolio_health: PortfolioHealth


class RecommendationCategories(BaseModel):
    investment: int = 0
    rebalance: int = 0
    risk: int = 0
    diversification: int = 0


class DashboardRecommendations(BaseModel):
    total: int
    high_priority: list[FinancialRecommendation]
    categories: RecommendationCategories


class DashboardProfile(BaseModel):
    risk_tolerance: RiskTolerance
    experience: Experience
    time_horizon: int
    investment_goals: list[str]


class DashboardMarket(BaseModel):
    conditions: MarketCondition | None = None
    key_insights: list[MarketInsight] | None = None


class DashboardEducation(BaseModel):
    recommended_content: list[EducationalContent]
    total_content: int


class SectionWarning(BaseModel):
    """A dashboard section that failed or was skipped."""

    section: str
    message: str


class DashboardData(BaseModel):
    """Dashboard body; blocks are null when their section degraded."""

    user_id: int
    overview: DashboardOverview | None = None
    recommendations: DashboardRecommendations | None = None
    profile: DashboardProfile | None = None
    market: DashboardMarket
    education: DashboardEducation | None = None
    warnings: list[SectionWarning] = Field(default_factory=list)
    generated_at: datetime


__all__ = [
    "DashboardData",
    "DashboardEducation",
    "DashboardMarket",
    "DashboardOverview",
    "DashboardProfile",
    "DashboardRecommendations",
    "PortfolioHealth",
    "RecommendationCategories",
    "SectionWarning",
]
