"""Read-only platform records and the sources that load them.

The engine never writes to the platform store. Records are normalised into
frozen dataclasses at this boundary (decimals become floats) so the analysis
functions stay free of ORM and database concerns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Protocol, Sequence

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError

from advisor_engine.core.errors import UpstreamFailure
from advisor_engine.db.session import Database
from advisor_engine.models import Investment, InvestmentPlan, PortfolioHistory, Transaction, TransactionType, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRecord:
    id: int
    balance: float


@dataclass(frozen=True)
class InvestmentPlanRecord:
    id: int
    name: str
    apy_rate: float | None


@dataclass(frozen=True)
class InvestmentRecord:
    id: int
    user_id: int
    plan_id: int
    amount: float
    current_returns: float
    start_date: datetime
    end_date: datetime
    expected_return: float | None = None


@dataclass(frozen=True)
class TransactionRecord:
    id: int
    user_id: int
    type: str
    amount: float
    created_at: datetime


@dataclass(frozen=True)
class PortfolioSnapshot:
    date: datetime
    total_value: float


@dataclass(frozen=True)
class PlanHolding:
    """An investment joined with its plan; ``plan`` is None when the join misses."""

    investment: InvestmentRecord
    plan: InvestmentPlanRecord | None = None


class RecordSource(Protocol):
    """Pluggable provider of the records the engine consumes."""

    async def get_user(self, user_id: int) -> UserRecord | None:
        ...

    async def list_investments(self, user_id: int) -> list[InvestmentRecord]:
        ...

    async def list_holdings(self, user_id: int) -> list[PlanHolding]:
        ...

    async def list_recent_transactions(self, user_id: int, limit: int) -> list[TransactionRecord]:
        """Most recent first."""
        ...

    async def list_portfolio_history(self, user_id: int, limit: int) -> list[PortfolioSnapshot]:
        """Most recent first."""
        ...


class InMemoryRecordSource:
    """Simple record source for tests, demos and seeding."""

    def __init__(
        self,
        *,
        users: Iterable[UserRecord] = (),
        plans: Iterable[InvestmentPlanRecord] = (),
        investments: Iterable[InvestmentRecord] = (),
        transactions: Iterable[TransactionRecord] = (),
        history: dict[int, Sequence[PortfolioSnapshot]] | None = None,
    ):
        self._users = {user.id: user for user in users}
        self._plans = {plan.id: plan for plan in plans}
        self._investments = list(investments)
        self._transactions = list(transactions)
        self._history = {user_id: list(series) for user_id, series in (history or {}).items()}

    async def get_user(self, user_id: int) -> UserRecord | None:
        return self._users.get(user_id)

    async def list_investments(self, user_id: int) -> list[InvestmentRecord]:
        return [inv for inv in self._investments if inv.user_id == user_id]

    async def list_holdings(self, user_id: int) -> list[PlanHolding]:
        return [
            PlanHolding(investment=inv, plan=self._plans.get(inv.plan_id))
            for inv in self._investments
            if inv.user_id == user_id
        ]

    async def list_recent_transactions(self, user_id: int, limit: int) -> list[TransactionRecord]:
        rows = [tx for tx in self._transactions if tx.user_id == user_id]
        rows.sort(key=lambda tx: tx.created_at, reverse=True)
        return rows[:limit]

    async def list_portfolio_history(self, user_id: int, limit: int) -> list[PortfolioSnapshot]:
        rows = sorted(self._history.get(user_id, []), key=lambda s: s.date, reverse=True)
        return rows[:limit]


def _to_float(value: object, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)  # type: ignore[arg-type]


def _investment_record(row: Investment) -> InvestmentRecord:
    return InvestmentRecord(
        id=row.id,
        user_id=row.user_id,
        plan_id=row.plan_id,
        amount=_to_float(row.amount),
        current_returns=_to_float(row.current_returns),
        start_date=row.start_date,
        end_date=row.end_date,
        expected_return=None if row.expected_return is None else float(row.expected_return),
    )


def _plan_record(row: InvestmentPlan) -> InvestmentPlanRecord:
    return InvestmentPlanRecord(
        id=row.id,
        name=row.name,
        apy_rate=None if row.apy_rate is None else float(row.apy_rate),
    )


class SqlRecordSource:
    """Record source backed by the platform's relational store."""

    def __init__(self, database: Database):
        self._database = database

    async def get_user(self, user_id: int) -> UserRecord | None:
        try:
            async with self._database.session() as session:
                row = await session.get(User, user_id)
        except SQLAlchemyError as exc:
            raise self._failure("user", user_id, exc) from exc
        if row is None:
            return None
        return UserRecord(id=row.id, balance=_to_float(row.balance))

    async def list_investments(self, user_id: int) -> list[InvestmentRecord]:
        stmt = select(Investment).where(Investment.user_id == user_id).order_by(Investment.id)
        try:
            async with self._database.session() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            raise self._failure("investments", user_id, exc) from exc
        return [_investment_record(row) for row in rows]

    async def list_holdings(self, user_id: int) -> list[PlanHolding]:
        stmt = (
            select(Investment, InvestmentPlan)
            .outerjoin(InvestmentPlan, Investment.plan_id == InvestmentPlan.id)
            .where(Investment.user_id == user_id)
            .order_by(Investment.id)
        )
        try:
            async with self._database.session() as session:
                rows = (await session.execute(stmt)).all()
        except SQLAlchemyError as exc:
            raise self._failure("holdings", user_id, exc) from exc
        return [
            PlanHolding(
                investment=_investment_record(investment),
                plan=_plan_record(plan) if plan is not None else None,
            )
            for investment, plan in rows
        ]

    async def list_recent_transactions(self, user_id: int, limit: int) -> list[TransactionRecord]:
        stmt = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(desc(Transaction.created_at))
            .limit(limit)
        )
        try:
            async with self._database.session() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            raise self._failure("transactions", user_id, exc) from exc
        return [
            TransactionRecord(
                id=row.id,
                user_id=row.user_id,
                type=row.type,
                amount=_to_float(row.amount),
                created_at=row.created_at,
            )
            for row in rows
        ]

    async def list_portfolio_history(self, user_id: int, limit: int) -> list[PortfolioSnapshot]:
        stmt = (
            select(PortfolioHistory)
            .where(PortfolioHistory.user_id == user_id)
            .order_by(desc(PortfolioHistory.date))
            .limit(limit)
        )
        try:
            async with self._database.session() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            raise self._failure("portfolio history", user_id, exc) from exc
        return [PortfolioSnapshot(date=row.date, total_value=_to_float(row.total_value)) for row in rows]

    @staticmethod
    def _failure(what: str, user_id: int, exc: SQLAlchemyError) -> UpstreamFailure:
        logger.exception("Failed to load %s for user %s", what, user_id)
        return UpstreamFailure(f"Could not load {what} for user {user_id}")


__all__ = [
    "InMemoryRecordSource",
    "InvestmentPlanRecord",
    "InvestmentRecord",
    "PlanHolding",
    "PortfolioSnapshot",
    "RecordSource",
    "SqlRecordSource",
    "TransactionRecord",
    "TransactionType",
    "UserRecord",
]
