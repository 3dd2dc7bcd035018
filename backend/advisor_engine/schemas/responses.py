"""Success envelopes returned by the HTTP surface."""

from __future__ import annotations

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

from .dashboard import DashboardData
from .education import EducationalContent
from .market import MarketCondition, MarketInsight
from .portfolio import PortfolioAnalysis
from .profile import Experience, FinancialProfile, RiskTolerance
from .recommendations import FinancialRecommendation

DataT = TypeVar("DataT", bound=BaseModel)


class Envelope(BaseModel, Generic[DataT]):
    success: bool = True
    data: DataT


class RecommendationsData(BaseModel):
    user_id: int
    recommendations: list[FinancialRecommendation]
    generated_at: datetime
    total_recommendations: int
    high_priority_count: int


class ProfileData(BaseModel):
    profile: FinancialProfile
    analyzed_at: datetime


class PortfolioData(BaseModel):
    analysis: PortfolioAnalysis
    analyzed_at: datetime


class MarketConditionsData(BaseModel):
    conditions: MarketCondition
    insights: list[MarketInsight]
    analyzed_at: datetime


class MarketInsightsData(BaseModel):
    insights: list[MarketInsight]
    count: int
    generated_at: datetime


class EducationData(BaseModel):
    content: list[EducationalContent]
    user_experience: Experience
    risk_tolerance: RiskTolerance
    generated_at: datetime


class RecommendationDetailData(BaseModel):
    recommendation: FinancialRecommendation
    retrieved_at: datetime


class AcceptanceData(BaseModel):
    message: str
    user_id: int
    recommendation_id: str
    accepted_at: datetime


class ErrorResponse(BaseModel):
    error: str
    message: str


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime


__all__ = [
    "AcceptanceData",
    "DashboardData",
    "EducationData",
    "Envelope",
    "ErrorResponse",
    "HealthResponse",
    "MarketConditionsData",
    "MarketInsightsData",
    "PortfolioData",
    "ProfileData",
    "RecommendationDetailData",
    "RecommendationsData",
]
