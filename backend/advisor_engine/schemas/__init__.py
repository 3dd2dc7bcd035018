"""Pydantic schema exports."""

from .dashboard import (
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
from .education import Difficulty, EducationalContent
from .market import (
    Impact,
    InsightCategory,
    InsightTimeframe,
    MarketCondition,
    MarketInsight,
    Trend,
    VolatilityLevel,
)
from .portfolio import Performer, PortfolioAnalysis
from .profile import Experience, FinancialProfile, RiskTolerance
from .recommendations import FinancialRecommendation, Priority, RecommendationType
from .responses import (
    AcceptanceData,
    EducationData,
    Envelope,
    ErrorResponse,
    HealthResponse,
    MarketConditionsData,
    MarketInsightsData,
    PortfolioData,
    ProfileData,
    RecommendationDetailData,
    RecommendationsData,
)

__all__ = [
    "AcceptanceData",
    "DashboardData",
    "DashboardEducation",
    "DashboardMarket",
    "DashboardOverview",
    "DashboardProfile",
    "DashboardRecommendations",
    "Difficulty",
    "EducationData",
    "EducationalContent",
    "Envelope",
    "ErrorResponse",
    "Experience",
    "FinancialProfile",
    "FinancialRecommendation",
    "HealthResponse",
    "Impact",
    "InsightCategory",
    "InsightTimeframe",
    "MarketCondition",
    "MarketConditionsData",
    "MarketInsight",
    "MarketInsightsData",
    "Performer",
    "PortfolioAnalysis",
    "PortfolioData",
    "PortfolioHealth",
    "Priority",
    "ProfileData",
    "RecommendationCategories",
    "RecommendationDetailData",
    "RecommendationType",
    "RecommendationsData",
    "RiskTolerance",
    "SectionWarning",
    "Trend",
    "VolatilityLevel",
]
