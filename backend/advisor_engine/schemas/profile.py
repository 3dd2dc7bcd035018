"""Schemas describing a user's derived financial profile."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RiskTolerance(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class Experience(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class FinancialProfile(BaseModel):
    """Per-request profile derived from holdings and transaction history."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    risk_tolerance: RiskTolerance
    investment_goals: list[str]
    time_horizon: int = Field(..., ge=1, description="Average holding horizon in months")
    monthly_income: float
    monthly_expenses: float
    current_savings: float
    age: int
    experience: Experience


__all__ = ["Experience", "FinancialProfile", "RiskTolerance"]
