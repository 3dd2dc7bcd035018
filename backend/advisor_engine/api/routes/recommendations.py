"""Recommendation listing, lookup and acceptance endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from advisor_engine.api.dependencies.engine import failure_label, get_engine, parse_user_id
from advisor_engine.schemas import (
    AcceptanceData,
    Envelope,
    Priority,
    RecommendationDetailData,
    RecommendationsData,
)
from advisor_engine.services.engine import FinancialEngine

router = APIRouter()


@router.get(
    "/recommendations/{user_id}",
    response_model=Envelope[RecommendationsData],
    dependencies=[failure_label("Failed to generate recommendations")],
)
async def get_recommendations(
    user: int = Depends(parse_user_id),
    engine: FinancialEngine = Depends(get_engine),
) -> Envelope[RecommendationsData]:
    recommendations = await engine.recommendations(user)
    urgent = sum(1 for rec in recommendations if rec.priority in (Priority.HIGH, Priority.CRITICAL))
    return Envelope[RecommendationsData](
        data=RecommendationsData(
            user_id=user,
            recommendations=recommendations,
            generated_at=datetime.now(timezone.utc),
            total_recommendations=len(recommendations),
            high_priority_count=urgent,
        )
    )


@router.get(
    "/recommendation/{user_id}/{recommendation_id}",
    response_model=Envelope[RecommendationDetailData],
    dependencies=[failure_label("Failed to get recommendation details")],
)
async def get_recommendation(
    recommendation_id: str,
    user: int = Depends(parse_user_id),
    engine: FinancialEngine = Depends(get_engine),
) -> Envelope[RecommendationDetailData]:
    recommendation = await engine.find_recommendation(user, recommendation_id)
    return Envelope[RecommendationDetailData](
        data=RecommendationDetailData(recommendation=recommendation, retrieved_at=datetime.now(timezone.utc))
    )


@router.post(
    "/recommendation/{user_id}/{recommendation_id}/accept",
    response_model=Envelope[AcceptanceData],
    dependencies=[failure_label("Failed to accept recommendation")],
)
async def accept_recommendation(
    recommendation_id: str,
    user: int = Depends(parse_user_id),
    engine: FinancialEngine = Depends(get_engine),
) -> Envelope[AcceptanceData]:
    acceptance = await engine.accept_recommendation(user, recommendation_id)
    return Envelope[AcceptanceData](
        data=AcceptanceData(
            message="Recommendation accepted and implementation initiated",
            user_id=acceptance.user_id,
            recommendation_id=acceptance.recommendation_id,
            accepted_at=acceptance.accepted_at,
        )
    )


__all__ = ["router"]
