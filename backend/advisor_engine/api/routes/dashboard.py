"""Aggregated financial dashboard endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from advisor_engine.api.dependencies.engine import failure_label, get_engine, parse_user_id
from advisor_engine.schemas import DashboardData, Envelope
from advisor_engine.services.engine import FinancialEngine

router = APIRouter()


@router.get(
    "/dashboard/{user_id}",
    response_model=Envelope[DashboardData],
    dependencies=[failure_label("Failed to generate financial dashboard")],
)
async def get_dashboard(
    user: int = Depends(parse_user_id),
    engine: FinancialEngine = Depends(get_engine),
) -> Envelope[DashboardData]:
    """Profile, portfolio, market, recommendations and education in one payload.

    Sections that fail are reported under ``warnings`` instead of failing the
    whole request.
    """

    return Envelope[DashboardData](data=await engine.dashboard(user))


__all__ = ["router"]
