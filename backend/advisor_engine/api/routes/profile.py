"""Per-user profile, portfolio analysis and education endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from advisor_engine.api.dependencies.engine import failure_label, get_engine, parse_user_id
from advisor_engine.schemas import EducationData, Envelope, PortfolioData, ProfileData
from advisor_engine.services.engine import FinancialEngine

router = APIRouter()


@router.get(
    "/profile/{user_id}",
    response_model=Envelope[ProfileData],
    dependencies=[failure_label("Failed to build financial profile")],
)
async def get_profile(
    user: int = Depends(parse_user_id),
    engine: FinancialEngine = Depends(get_engine),
) -> Envelope[ProfileData]:
    profile = await engine.build_profile(user)
    return Envelope[ProfileData](data=ProfileData(profile=profile, analyzed_at=datetime.now(timezone.utc)))


@router.get(
    "/portfolio/{user_id}",
    response_model=Envelope[PortfolioData],
    dependencies=[failure_label("Failed to analyze portfolio")],
)
async def get_portfolio(
    user: int = Depends(parse_user_id),
    engine: FinancialEngine = Depends(get_engine),
) -> Envelope[PortfolioData]:
    analysis = await engine.analyze_portfolio(user)
    return Envelope[PortfolioData](data=PortfolioData(analysis=analysis, analyzed_at=datetime.now(timezone.utc)))


@router.get(
    "/education/{user_id}",
    response_model=Envelope[EducationData],
    dependencies=[failure_label("Failed to generate educational content")],
)
async def get_education(
    user: int = Depends(parse_user_id),
    engine: FinancialEngine = Depends(get_engine),
) -> Envelope[EducationData]:
    profile, content = await engine.education(user)
    return Envelope[EducationData](
        data=EducationData(
            content=content,
            user_experience=profile.experience,
            risk_tolerance=profile.risk_tolerance,
            generated_at=datetime.now(timezone.utc),
        )
    )


__all__ = ["router"]
