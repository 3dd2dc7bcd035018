"""Recommendation rule and ranking tests."""

from __future__ import annotations

import random

import pytest

from advisor_engine.schemas.market import Trend
from advisor_engine.schemas.profile import RiskTolerance
from advisor_engine.schemas.recommendations import FinancialRecommendation, Priority, RecommendationType
from advisor_engine.services.portfolio_analysis import analyze_portfolio
from advisor_engine.services.recommendations import (
    generate_recommendations,
    rank_recommendations,
    ranking_score,
    target_risk_level,
)

from factories import SequentialIds, make_analysis, make_history, make_holding, make_market, make_profile


def _by_slug(recommendations: list[FinancialRecommendation]) -> dict[str, FinancialRecommendation]:
    return {rec.id.rsplit("-", 1)[0]: rec for rec in recommendations}


def test_quiet_portfolio_yields_no_recommendations():
    assert generate_recommendations(make_profile(), make_analysis(), make_market()) == []


def test_rebalance_fires_when_benchmark_gap_exceeds_threshold():
    analysis = make_analysis(annualized_return=12.0, performance_vs_benchmark=4.0)

    recs = _by_slug(generate_recommendations(make_profile(), analysis, make_market()))

    rebalance = recs["rebalance"]
    assert rebalance.type == RecommendationType.PORTFOLIO_REBALANCE
    assert rebalance.expected_return == 1.8
    assert rebalance.priority == Priority.MEDIUM
    assert rebalance.potential_gains == pytest.approx(800.0)
    assert "4.0%" in rebalance.reasoning


def test_rebalance_gap_of_exactly_three_does_not_fire():
    analysis = make_analysis(performance_vs_benchmark=-3.0)

    assert generate_recommendations(make_profile(), analysis, make_market()) == []


def test_target_risk_for_cautious_older_investor():
    profile = make_profile(risk_tolerance=RiskTolerance.CONSERVATIVE, time_horizon=3, age=60)

    assert target_risk_level(profile) == 1


def test_target_risk_for_aggressive_young_investor():
    profile = make_profile(risk_tolerance=RiskTolerance.AGGRESSIVE, time_horizon=36, age=25)

    assert target_risk_level(profile) == 9


def test_tax_optimization_uses_share_of_gains():
    analysis = make_analysis(total_return=1_500.0)

    tax = _by_slug(generate_recommendations(make_profile(), analysis, make_market()))["tax-optimize"]

    assert tax.potential_gains == pytest.approx(225.0)
    assert tax.potential_losses == 0.0
    assert tax.priority == Priority.LOW
    assert tax.type == RecommendationType.PORTFOLIO_REBALANCE


def test_over_risked_portfolio_gets_reduction_advice():
    profile = make_profile(risk_tolerance=RiskTolerance.CONSERVATIVE, time_horizon=3, age=60)
    analysis = make_analysis(risk_score=6.0)

    risk = _by_slug(generate_recommendations(profile, analysis, make_market()))["risk-adjust"]

    assert risk.title == "Reduce Portfolio Risk"
    assert risk.priority == Priority.HIGH
    assert risk.expected_return == -0.5
    assert risk.risk_level == -2


def test_under_risked_portfolio_gets_growth_advice():
    profile = make_profile(risk_tolerance=RiskTolerance.AGGRESSIVE, time_horizon=36, age=25)
    analysis = make_analysis(risk_score=5.0)

    risk = _by_slug(generate_recommendations(profile, analysis, make_market()))["risk-adjust"]

    assert risk.title == "Optimize Risk Exposure"
    assert risk.priority == Priority.MEDIUM
    assert risk.expected_return == 2.2
    assert risk.risk_level == 1


def test_market_opportunity_needs_confident_bullish_market():
    profile = make_profile(current_savings=5_000.0)

    assert generate_recommendations(profile, make_analysis(), make_market(Trend.BULLISH, 0.8)) == []
    assert generate_recommendations(profile, make_analysis(), make_market(Trend.BEARISH, 0.95)) == []

    (opportunity,) = generate_recommendations(profile, make_analysis(), make_market(Trend.BULLISH, 0.9))
    assert opportunity.type == RecommendationType.INVESTMENT
    assert opportunity.confidence == 0.9
    assert opportunity.potential_gains == pytest.approx(1_000.0)
    assert opportunity.market_factors == ["Factor one", "Factor two", "Factor three"]


def test_diversification_uses_first_two_market_factors():
    analysis = make_analysis(diversification_score=0.5)

    (diversify,) = generate_recommendations(make_profile(), analysis, make_market())

    assert diversify.type == RecommendationType.DIVERSIFICATION
    assert diversify.market_factors == ["Factor one", "Factor two"]
    assert "50.0%" in diversify.reasoning


def test_recommendations_ranked_by_weighted_confidence():
    profile = make_profile(risk_tolerance=RiskTolerance.CONSERVATIVE, time_horizon=3, age=60)
    analysis = make_analysis(
        diversification_score=0.4,
        performance_vs_benchmark=5.0,
        risk_score=6.0,
        total_return=2_000.0,
    )

    recs = generate_recommendations(profile, analysis, make_market(Trend.BULLISH, 0.9))

    assert [rec.id.rsplit("-", 1)[0] for rec in recs] == [
        "diversify",
        "risk-adjust",
        "market-opportunity",
        "rebalance",
        "tax-optimize",
    ]
    scores = [ranking_score(rec) for rec in recs]
    assert scores == sorted(scores, reverse=True)


def test_ranking_keeps_rule_order_for_ties():
    template = generate_recommendations(make_profile(), make_analysis(diversification_score=0.1), make_market())[0]
    first = template.model_copy(update={"id": "first"})
    second = template.model_copy(update={"id": "second"})
    low = template.model_copy(update={"id": "low", "priority": Priority.LOW})

    assert [rec.id for rec in rank_recommendations([low, first, second])] == ["first", "second", "low"]


def test_ids_are_unique_and_prefixed():
    analysis = make_analysis(diversification_score=0.4, performance_vs_benchmark=5.0, total_return=2_000.0)

    recs = generate_recommendations(make_profile(), analysis, make_market(), id_factory=SequentialIds())

    assert len({rec.id for rec in recs}) == len(recs)
    assert _by_slug(recs)["diversify"].id == "diversify-00000000000000000000000000000001"

    again = generate_recommendations(make_profile(), analysis, make_market())
    assert not {rec.id for rec in recs} & {rec.id for rec in again}


def test_diversification_present_iff_score_below_threshold():
    rng = random.Random(2024)
    for _ in range(150):
        count = rng.randint(0, 10)
        holdings = [
            make_holding(i, plan_id=rng.randint(1, 5), amount=rng.uniform(100, 5_000))
            for i in range(count)
        ]
        analysis = analyze_portfolio(holdings, make_history([1_000, 1_000]))

        recs = generate_recommendations(make_profile(), analysis, make_market())
        has_diversification = any(rec.type == RecommendationType.DIVERSIFICATION for rec in recs)

        assert has_diversification == (analysis.diversification_score < 0.6)


def test_target_risk_always_within_scale():
    rng = random.Random(99)
    for _ in range(300):
        profile = make_profile(
            risk_tolerance=rng.choice(list(RiskTolerance)),
            time_horizon=rng.randint(1, 120),
            age=rng.randint(18, 90),
        )
        assert 1 <= target_risk_level(profile) <= 10


def test_ranking_never_increases_across_random_inputs():
    rng = random.Random(7)
    for _ in range(200):
        profile = make_profile(
            risk_tolerance=rng.choice(list(RiskTolerance)),
            time_horizon=rng.randint(1, 120),
            age=rng.randint(18, 90),
            current_savings=rng.uniform(0, 50_000),
        )
        analysis = make_analysis(
            diversification_score=rng.uniform(0, 1),
            performance_vs_benchmark=rng.uniform(-15, 15),
            risk_score=rng.uniform(1, 10),
            total_return=rng.uniform(-2_000, 5_000),
        )
        market = make_market(rng.choice(list(Trend)), rng.uniform(0.75, 0.95))

        scores = [ranking_score(rec) for rec in generate_recommendations(profile, analysis, market)]

        assert all(earlier >= later for earlier, later in zip(scores, scores[1:]))
