"""Market condition and insight endpoints."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from advisor_engine.api.dependencies.engine import failure_label, get_engine
from advisor_engine.schemas import Envelope, MarketConditionsData, MarketInsightsData
from advisor_engine.services.engine import FinancialEngine

router = APIRouter()


@router.get(
    "/market-conditions",
    response_model=Envelope[MarketConditionsData],
    dependencies=[failure_label("Failed to get market conditions")],
)
async def get_market_conditions(engine: FinancialEngine = Depends(get_engine)) -> Envelope[MarketConditionsData]:
    conditions, insights = await asyncio.gather(engine.market_conditions(), engine.market_insights())
    return Envelope[MarketConditionsData](
        data=MarketConditionsData(conditions=conditions, insights=insights, analyzed_at=datetime.now(timezone.utc))
    )


@router.get(
    "/market-insights",
    response_model=Envelope[MarketInsightsData],
    dependencies=[failure_label("Failed to generate market insights")],
)
async def get_market_insights(engine: FinancialEngine = Depends(get_engine)) -> Envelope[MarketInsightsData]:
    insights = await engine.market_insights()
    return Envelope[MarketInsightsData](
        data=MarketInsightsData(insights=insights, count=len(insights), generated_at=datetime.now(timezone.utc))
    )


__all__ = ["router"]
