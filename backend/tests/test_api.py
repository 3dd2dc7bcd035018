"""HTTP surface tests."""

from __future__ import annotations

from uuid import UUID

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from advisor_engine.api.dependencies.engine import MAX_USER_ID
from advisor_engine.config import EngineSettings
from advisor_engine.core.errors import UpstreamFailure, register_error_handlers
from advisor_engine.main import create_app
from advisor_engine.services.engine import FinancialEngine
from advisor_engine.services.market import StaticMarketDataProvider

from factories import demo_source

PREFIX = "/api/ai/financial"
FIXED_ID = UUID(int=7)


class ExplodingMarket(StaticMarketDataProvider):
    def current_conditions(self):
        raise RuntimeError("simulated outage")


class UnreachableRecords:
    async def get_user(self, user_id: int):
        raise UpstreamFailure(f"Could not load user for user {user_id}")


def _app(settings: EngineSettings, records=None, market=None):
    engine = FinancialEngine(
        records or demo_source(),
        market or StaticMarketDataProvider(),
        settings=settings,
        id_factory=lambda: FIXED_ID,
    )
    return create_app(engine, settings=settings)


def _client(app, *, raise_app_exceptions: bool = True) -> AsyncClient:
    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    return AsyncClient(transport=transport, base_url="http://test")


async def test_health(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_recommendations_envelope(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        response = await client.get(f"{PREFIX}/recommendations/1")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    data = payload["data"]
    assert data["user_id"] == 1
    assert data["total_recommendations"] == len(data["recommendations"]) == 2
    assert data["high_priority_count"] == 0
    assert [rec["id"] for rec in data["recommendations"]] == [
        f"rebalance-{FIXED_ID.hex}",
        f"tax-optimize-{FIXED_ID.hex}",
    ]
    first = data["recommendations"][0]
    assert first["type"] == "portfolio_rebalance"
    assert first["priority"] == "medium"
    assert "generated_at" in data


async def test_invalid_user_id_is_rejected(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        for user_id in ("abc", "0", "-3", "1.5"):
            response = await client.get(f"{PREFIX}/profile/{user_id}")
            assert response.status_code == 400
            assert response.json() == {"error": "Invalid user ID", "message": "User ID must be a valid number"}


async def test_user_id_beyond_key_range_is_rejected(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        at_limit = await client.get(f"{PREFIX}/profile/{MAX_USER_ID}")
        too_big = await client.get(f"{PREFIX}/profile/{MAX_USER_ID + 1}")
        huge = await client.get(f"{PREFIX}/dashboard/99999999999999999999")

    assert at_limit.status_code == 404
    for response in (too_big, huge):
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid user ID"


async def test_missing_user_id_is_rejected(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        for path in ("profile/", "portfolio", "recommendations/", "recommendation/", "education", "dashboard/"):
            response = await client.get(f"{PREFIX}/{path}")
            assert response.status_code == 400, path
            assert response.json() == {"error": "Invalid user ID", "message": "User ID must be a valid number"}


async def test_routing_errors_use_error_envelope(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        unknown = await client.get(f"{PREFIX}/nowhere/1")
        wrong_method = await client.delete(f"{PREFIX}/profile/1")

    assert unknown.status_code == 404
    assert unknown.json() == {"error": "Not Found", "message": "Not Found"}
    assert wrong_method.status_code == 405
    assert set(wrong_method.json()) == {"error", "message"}
    assert wrong_method.json()["error"] == "Method Not Allowed"


async def test_unknown_user_is_not_found(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        response = await client.get(f"{PREFIX}/recommendations/99")

    assert response.status_code == 404
    assert response.json()["error"] == "User not found"


async def test_profile_and_portfolio(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        profile = await client.get(f"{PREFIX}/profile/1")
        portfolio = await client.get(f"{PREFIX}/portfolio/1")

    assert profile.status_code == 200
    body = profile.json()["data"]["profile"]
    assert body["risk_tolerance"] == "moderate"
    assert body["experience"] == "beginner"
    assert body["investment_goals"] == ["capital_growth"]
    assert body["age"] == 35

    assert portfolio.status_code == 200
    analysis = portfolio.json()["data"]["analysis"]
    assert analysis["current_value"] == 13_400
    assert 0 <= analysis["diversification_score"] <= 1
    assert 1 <= analysis["risk_score"] <= 10
    top = analysis["top_performers"][0]
    assert set(top) == {"name", "return", "weight"}
    assert top["name"] == "Premium Plan"


async def test_empty_account_has_defaults(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        response = await client.get(f"{PREFIX}/portfolio/2")

    analysis = response.json()["data"]["analysis"]
    assert analysis["current_value"] == 0
    assert analysis["risk_score"] == 1
    assert analysis["top_performers"] == []


async def test_market_endpoints(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        conditions = await client.get(f"{PREFIX}/market-conditions")
        insights = await client.get(f"{PREFIX}/market-insights")

    assert conditions.status_code == 200
    data = conditions.json()["data"]
    assert data["conditions"]["trend"] == "neutral"
    assert len(data["insights"]) == 4

    assert insights.status_code == 200
    assert insights.json()["data"]["count"] == 4


async def test_education(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        response = await client.get(f"{PREFIX}/education/1")

    data = response.json()["data"]
    assert data["user_experience"] == "beginner"
    assert data["risk_tolerance"] == "moderate"
    assert [item["title"] for item in data["content"]] == [
        "Understanding Investment Risk",
        "Market Timing vs. Time in Market",
    ]


async def test_recommendation_detail_and_missing_id(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        found = await client.get(f"{PREFIX}/recommendation/1/rebalance-{FIXED_ID.hex}")
        missing = await client.get(f"{PREFIX}/recommendation/1/diversify-{FIXED_ID.hex}")

    assert found.status_code == 200
    assert found.json()["data"]["recommendation"]["title"] == "Portfolio Rebalancing Required"

    assert missing.status_code == 404
    assert missing.json()["error"] == "Recommendation not found"


async def test_accept_recommendation_acknowledges(settings: EngineSettings):
    async with _client(_app(settings)) as client:
        response = await client.post(f"{PREFIX}/recommendation/1/anything-goes/accept")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["message"] == "Recommendation accepted and implementation initiated"
    assert data["user_id"] == 1
    assert data["recommendation_id"] == "anything-goes"
    assert "accepted_at" in data


async def test_dashboard_reports_warnings_instead_of_failing(settings: EngineSettings):
    async with _client(_app(settings, market=ExplodingMarket())) as client:
        response = await client.get(f"{PREFIX}/dashboard/1")

    assert response.status_code == 200
    data = response.json()["data"]
    assert {w["section"] for w in data["warnings"]} == {"market_conditions", "recommendations"}
    assert data["recommendations"] is None
    assert data["overview"]["portfolio_value"] == 13_400


async def test_upstream_failure_maps_to_bad_gateway(settings: EngineSettings):
    async with _client(_app(settings, records=UnreachableRecords())) as client:
        response = await client.get(f"{PREFIX}/profile/1")

    assert response.status_code == 502
    assert response.json()["error"] == "Upstream failure"


async def test_unexpected_error_returns_envelope(settings: EngineSettings):
    app = _app(settings, market=ExplodingMarket())
    async with _client(app, raise_app_exceptions=False) as client:
        response = await client.get(f"{PREFIX}/market-conditions")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to get market conditions", "message": "simulated outage"}


async def test_unexpected_error_label_names_the_operation(settings: EngineSettings):
    app = _app(settings, market=ExplodingMarket())
    async with _client(app, raise_app_exceptions=False) as client:
        insights = await client.get(f"{PREFIX}/market-insights")
        recommendations = await client.get(f"{PREFIX}/recommendations/1")

    # insights do not consult current conditions, so only recommendations fail
    assert insights.status_code == 200
    assert recommendations.status_code == 500
    assert recommendations.json() == {"error": "Failed to generate recommendations", "message": "simulated outage"}


async def test_request_validation_errors_use_error_envelope():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/items")
    async def list_items(limit: int) -> dict:
        return {"limit": limit}

    async with _client(app) as client:
        response = await client.get("/items", params={"limit": "many"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid input"
    assert "limit" in body["message"]
