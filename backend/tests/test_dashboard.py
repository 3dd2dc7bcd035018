"""Dashboard aggregation and degradation tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from advisor_engine.config import EngineSettings
from advisor_engine.core.errors import NotFoundError, UpstreamFailure
from advisor_engine.schemas.recommendations import Priority
from advisor_engine.services.dashboard import (
    SectionResult,
    compose_dashboard,
    portfolio_health_score,
    run_section,
    summarise_recommendations,
)
from advisor_engine.services.engine import FinancialEngine
from advisor_engine.services.market import MARKET_INSIGHTS, StaticMarketDataProvider
from advisor_engine.services.recommendations import generate_recommendations

from factories import demo_source, make_analysis, make_market, make_profile


class OfflineMarket(StaticMarketDataProvider):
    def current_conditions(self):
        raise RuntimeError("feed offline")


class BrokenHoldings:
    """Record source whose holdings query fails after the user lookup succeeds."""

    def __init__(self):
        self._inner = demo_source()

    def __getattr__(self, name):
        return getattr(self._inner, name)

    async def list_holdings(self, user_id: int):
        raise UpstreamFailure("Could not load holdings for user 1")


def _engine(settings: EngineSettings, records=None, market=None) -> FinancialEngine:
    return FinancialEngine(
        records or demo_source(),
        market or StaticMarketDataProvider(),
        settings=settings,
    )


def test_health_score_blends_components():
    analysis = make_analysis(
        diversification_score=0.5,
        risk_score=8.0,
        sharpe_ratio=1.0,
        performance_vs_benchmark=2.0,
    )

    assert portfolio_health_score(analysis) == 85


def test_health_score_rounds_half_up():
    analysis = make_analysis(diversification_score=0.0, risk_score=10.0, sharpe_ratio=1.25, performance_vs_benchmark=0.0)

    assert portfolio_health_score(analysis) == 13


def test_health_score_caps_sharpe_contribution_but_not_total():
    analysis = make_analysis(diversification_score=1.0, risk_score=1.0, sharpe_ratio=9.0, performance_vs_benchmark=1.0)

    # 30 + 180 + 30 + 20; the total is not re-clamped
    assert portfolio_health_score(analysis) == 260


def test_health_score_can_go_negative():
    analysis = make_analysis(diversification_score=0.0, risk_score=10.0, sharpe_ratio=-2.0, performance_vs_benchmark=-1.0)

    assert portfolio_health_score(analysis) == -20


def test_summary_keeps_top_three_urgent_and_counts_categories():
    profile = make_profile()
    analysis = make_analysis(diversification_score=0.3, performance_vs_benchmark=6.0, total_return=5_000.0)
    recs = generate_recommendations(profile, analysis, make_market())
    urgent = [recs[0].model_copy(update={"id": f"urgent-{i}", "priority": Priority.CRITICAL}) for i in range(4)]

    summary = summarise_recommendations(urgent + recs)

    assert summary.total == 7
    assert [rec.id for rec in summary.high_priority] == ["urgent-0", "urgent-1", "urgent-2"]
    assert summary.categories.diversification == 5
    assert summary.categories.rebalance == 2
    assert summary.categories.investment == 0
    assert summary.categories.risk == 0


async def test_run_section_captures_failures():
    def explode():
        raise ValueError("bad input")

    ok = await run_section("double", lambda x: x * 2, 21)
    failed = await run_section("explode", explode)

    assert ok.ok and ok.value == 42
    assert not failed.ok
    assert failed.value is None
    assert failed.error == "bad input"


def test_compose_reports_every_failed_section():
    generated_at = datetime(2024, 6, 1, tzinfo=timezone.utc)
    missing = SectionResult(name="portfolio", error="boom")

    payload = compose_dashboard(
        9,
        profile=SectionResult(name="profile", value=make_profile(user_id=9)),
        portfolio=missing,
        market=SectionResult(name="market_conditions", value=make_market()),
        insights=SectionResult(name="market_insights", value=list(MARKET_INSIGHTS)),
        recommendations=SectionResult(name="recommendations", error="Skipped because portfolio could not be computed"),
        education=SectionResult(name="education", value=[]),
        generated_at=generated_at,
    )

    assert payload.overview is None
    assert payload.recommendations is None
    assert payload.profile is not None
    assert payload.market.conditions is not None
    assert len(payload.market.key_insights) == 3
    assert payload.education.total_content == 0
    assert [w.section for w in payload.warnings] == ["portfolio", "recommendations"]
    assert payload.generated_at == generated_at


async def test_dashboard_with_all_sections(settings: EngineSettings):
    payload = await _engine(settings).dashboard(1)

    assert payload.user_id == 1
    assert payload.warnings == []
    assert payload.overview.portfolio_value == pytest.approx(13_400)
    assert payload.overview.total_return == pytest.approx(1_400)
    assert payload.profile.time_horizon == 10
    assert payload.recommendations.total == 2
    assert payload.recommendations.high_priority == []
    assert payload.recommendations.categories.rebalance == 2
    assert payload.market.conditions.trend.value == "neutral"
    assert len(payload.market.key_insights) == 3
    assert payload.education.total_content == 2


async def test_dashboard_degrades_when_market_feed_fails(settings: EngineSettings):
    payload = await _engine(settings, market=OfflineMarket()).dashboard(1)

    sections = {w.section: w.message for w in payload.warnings}
    assert sections["market_conditions"] == "feed offline"
    assert "market_conditions" in sections["recommendations"]
    assert payload.recommendations is None
    assert payload.market.conditions is None
    assert payload.market.key_insights is not None
    assert payload.overview is not None
    assert payload.education is not None


async def test_dashboard_for_unknown_user_is_not_found(settings: EngineSettings):
    with pytest.raises(NotFoundError):
        await _engine(settings).dashboard(404)


async def test_dashboard_fails_when_records_cannot_load(settings: EngineSettings):
    with pytest.raises(UpstreamFailure):
        await _engine(settings, records=BrokenHoldings()).dashboard(1)
