"""Stateless recommendation engine service.

``FinancialEngine`` loads the records it needs from an injected
:class:`RecordSource`, then hands them to the pure analysis functions. It holds
no per-user state, so one instance serves concurrent requests.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID, uuid4

from advisor_engine.config import EngineSettings, get_settings
from advisor_engine.core.errors import NotFoundError
from advisor_engine.core.telemetry import get_instruments, get_tracer
from advisor_engine.schemas.dashboard import DashboardData
from advisor_engine.schemas.education import EducationalContent
from advisor_engine.schemas.market import MarketCondition, MarketInsight
from advisor_engine.schemas.portfolio import PortfolioAnalysis
from advisor_engine.schemas.profile import FinancialProfile
from advisor_engine.schemas.recommendations import FinancialRecommendation
from advisor_engine.services.dashboard import SectionResult, compose_dashboard, run_section, skipped_section
from advisor_engine.services.education import select_educational_content
from advisor_engine.services.market import MarketDataProvider
from advisor_engine.services.portfolio_analysis import analyze_portfolio
from advisor_engine.services.profile import build_profile
from advisor_engine.services.recommendations import generate_recommendations
from advisor_engine.services.records import (
    InvestmentRecord,
    PlanHolding,
    PortfolioSnapshot,
    RecordSource,
    TransactionRecord,
    UserRecord,
)

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)
instruments = get_instruments()


@dataclass(frozen=True)
class UserRecords:
    """Everything the engine reads for one user, loaded in a single pass."""

    user: UserRecord
    holdings: list[PlanHolding]
    transactions: list[TransactionRecord]
    history: list[PortfolioSnapshot]

    @property
    def investments(self) -> list[InvestmentRecord]:
        return [holding.investment for holding in self.holdings]


@dataclass(frozen=True)
class Acceptance:
    user_id: int
    recommendation_id: str
    accepted_at: datetime


def _now() -> datetime:
    return datetime.now(timezone.utc)


class FinancialEngine:
    def __init__(
        self,
        records: RecordSource,
        market: MarketDataProvider,
        *,
        settings: EngineSettings | None = None,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self._records = records
        self._market = market
        self._settings = settings or get_settings()
        self._id_factory = id_factory

    # Record loading

    async def _require_user(self, user_id: int) -> UserRecord:
        user = await self._records.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found", error="User not found")
        return user

    async def load_user_records(self, user_id: int) -> UserRecords:
        user = await self._require_user(user_id)
        holdings, transactions, history = await asyncio.gather(
            self._records.list_holdings(user_id),
            self._records.list_recent_transactions(user_id, self._settings.transaction_history_limit),
            self._records.list_portfolio_history(user_id, self._settings.portfolio_history_limit),
        )
        return UserRecords(user=user, holdings=holdings, transactions=transactions, history=history)

    def _profile_from(self, records: UserRecords) -> FinancialProfile:
        return build_profile(
            records.user,
            records.investments,
            records.transactions,
            age=self._settings.default_age,
        )

    # Public operations

    async def build_profile(self, user_id: int) -> FinancialProfile:
        with tracer.start_as_current_span("engine.build_profile"):
            user = await self._require_user(user_id)
            investments, transactions = await asyncio.gather(
                self._records.list_investments(user_id),
                self._records.list_recent_transactions(user_id, self._settings.transaction_history_limit),
            )
            return build_profile(user, investments, transactions, age=self._settings.default_age)

    async def analyze_portfolio(self, user_id: int) -> PortfolioAnalysis:
        with tracer.start_as_current_span("engine.analyze_portfolio"):
            await self._require_user(user_id)
            holdings, history = await asyncio.gather(
                self._records.list_holdings(user_id),
                self._records.list_portfolio_history(user_id, self._settings.portfolio_history_limit),
            )
            return analyze_portfolio(holdings, history)

    async def market_conditions(self) -> MarketCondition:
        with tracer.start_as_current_span("engine.market_conditions"):
            return self._market.current_conditions()

    async def market_insights(self) -> list[MarketInsight]:
        with tracer.start_as_current_span("engine.market_insights"):
            return self._market.insights()

    async def recommendations(self, user_id: int) -> list[FinancialRecommendation]:
        with tracer.start_as_current_span("engine.recommendations") as span:
            span.set_attribute("enduser.id", str(user_id))
            records = await self.load_user_records(user_id)
            profile = self._profile_from(records)
            analysis = analyze_portfolio(records.holdings, records.history)
            market = self._market.current_conditions()
            recs = generate_recommendations(profile, analysis, market, id_factory=self._id_factory)
            span.set_attribute("recommendations.count", len(recs))
            instruments.record_recommendations(recs)
            return recs

    async def education(self, user_id: int) -> tuple[FinancialProfile, list[EducationalContent]]:
        with tracer.start_as_current_span("engine.education"):
            profile = await self.build_profile(user_id)
            return profile, select_educational_content(profile)

    async def find_recommendation(self, user_id: int, recommendation_id: str) -> FinancialRecommendation:
        """Look ``recommendation_id`` up in a freshly generated set.

        Recommendations are not stored and ids are unique per generation, so an
        id from an earlier response is not expected to match.
        """

        with tracer.start_as_current_span("engine.find_recommendation"):
            for recommendation in await self.recommendations(user_id):
                if recommendation.id == recommendation_id:
                    return recommendation
        raise NotFoundError(
            f"Recommendation {recommendation_id} not found for user {user_id}",
            error="Recommendation not found",
        )

    async def accept_recommendation(self, user_id: int, recommendation_id: str) -> Acceptance:
        # Acknowledgement only: acceptance has no defined side effect yet.
        accepted = Acceptance(user_id=user_id, recommendation_id=recommendation_id, accepted_at=_now())
        logger.info("User %s accepted recommendation %s", user_id, recommendation_id)
        return accepted

    async def dashboard(self, user_id: int) -> DashboardData:
        with tracer.start_as_current_span("engine.dashboard") as span:
            span.set_attribute("enduser.id", str(user_id))
            records = await self.load_user_records(user_id)

            profile, portfolio, market, insights = await asyncio.gather(
                run_section("profile", self._profile_from, records),
                run_section("portfolio", analyze_portfolio, records.holdings, records.history),
                run_section("market_conditions", self._market.current_conditions),
                run_section("market_insights", self._market.insights),
            )

            if profile.ok and portfolio.ok and market.ok:
                recommendations_task = run_section(
                    "recommendations",
                    self._recommend,
                    profile.value,
                    portfolio.value,
                    market.value,
                )
            else:
                recommendations_task = _resolved(
                    skipped_section("recommendations", [profile, portfolio, market])
                )
            if profile.ok:
                education_task = run_section("education", select_educational_content, profile.value)
            else:
                education_task = _resolved(skipped_section("education", [profile]))

            recommendations, education = await asyncio.gather(recommendations_task, education_task)

            payload = compose_dashboard(
                user_id,
                profile=profile,
                portfolio=portfolio,
                market=market,
                insights=insights,
                recommendations=recommendations,
                education=education,
                generated_at=_now(),
            )
            span.set_attribute("dashboard.warnings", len(payload.warnings))
            for warning in payload.warnings:
                instruments.record_degraded(warning.section)
            return payload

    def _recommend(
        self,
        profile: FinancialProfile,
        analysis: PortfolioAnalysis,
        market: MarketCondition,
    ) -> list[FinancialRecommendation]:
        recs = generate_recommendations(profile, analysis, market, id_factory=self._id_factory)
        instruments.record_recommendations(recs)
        return recs


async def _resolved(section: SectionResult) -> SectionResult:
    return section


__all__ = ["Acceptance", "FinancialEngine", "UserRecords"]
