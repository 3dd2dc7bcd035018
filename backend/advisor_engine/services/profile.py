"""Derive a financial profile from a user's investments and transactions."""

from __future__ import annotations

import math
from typing import Sequence

from advisor_engine.schemas.profile import Experience, FinancialProfile, RiskTolerance
from advisor_engine.services.records import InvestmentRecord, TransactionRecord, TransactionType, UserRecord

CONSERVATIVE_RATIO = 0.2
MODERATE_RATIO = 0.5
WEALTH_BUILDING_AMOUNT = 10_000
DIVERSIFICATION_GOAL_COUNT = 5
DEFAULT_TIME_HORIZON_MONTHS = 12
DAYS_PER_MONTH = 30
CASHFLOW_WINDOW = 6


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def classify_risk_tolerance(
    investments: Sequence[InvestmentRecord], transactions: Sequence[TransactionRecord]
) -> RiskTolerance:
    """Compare average investment size with the total deposited.

    Without deposits (or without investments) there is no meaningful ratio and
    the user is treated as conservative.
    """

    deposited = sum(tx.amount for tx in transactions if tx.type == TransactionType.DEPOSIT)
    if deposited <= 0 or not investments:
        return RiskTolerance.CONSERVATIVE
    ratio = _mean([inv.amount for inv in investments]) / deposited
    if ratio < CONSERVATIVE_RATIO:
        return RiskTolerance.CONSERVATIVE
    if ratio < MODERATE_RATIO:
        return RiskTolerance.MODERATE
    return RiskTolerance.AGGRESSIVE


def assess_experience(
    investments: Sequence[InvestmentRecord], transactions: Sequence[TransactionRecord]
) -> Experience:
    transaction_count = len(transactions)
    distinct_plans = len({inv.plan_id for inv in investments})
    if transaction_count < 10 or distinct_plans < 2:
        return Experience.BEGINNER
    if transaction_count < 25 or distinct_plans < 4:
        return Experience.INTERMEDIATE
    return Experience.EXPERT


def extract_investment_goals(investments: Sequence[InvestmentRecord]) -> list[str]:
    goals = ["capital_growth"]
    if any(inv.amount > WEALTH_BUILDING_AMOUNT for inv in investments):
        goals.append("wealth_building")
    if len(investments) > DIVERSIFICATION_GOAL_COUNT:
        goals.append("diversification")
    return goals


def average_time_horizon(investments: Sequence[InvestmentRecord]) -> int:
    """Mean holding period in whole months (each investment counts as at least one)."""

    if not investments:
        return DEFAULT_TIME_HORIZON_MONTHS
    durations = []
    for inv in investments:
        days = (inv.end_date - inv.start_date).total_seconds() / 86_400
        durations.append(max(1, math.floor(days / DAYS_PER_MONTH)))
    return _round_half_up(_mean(durations)) or DEFAULT_TIME_HORIZON_MONTHS


def estimate_monthly_cashflow(transactions: Sequence[TransactionRecord], kind: TransactionType | str) -> float:
    # transactions arrive newest first, so the head of the filtered list is the recent window
    recent = [tx.amount for tx in transactions if tx.type == kind][:CASHFLOW_WINDOW]
    return _mean(recent)


def build_profile(
    user: UserRecord,
    investments: Sequence[InvestmentRecord],
    transactions: Sequence[TransactionRecord],
    *,
    age: int,
) -> FinancialProfile:
    """Build the profile for ``user`` from already-fetched records.

    ``transactions`` must be ordered most recent first. ``age`` is supplied by
    configuration because the platform does not record it.
    """

    return FinancialProfile(
        user_id=user.id,
        risk_tolerance=classify_risk_tolerance(investments, transactions),
        investment_goals=extract_investment_goals(investments),
        time_horizon=average_time_horizon(investments),
        monthly_income=estimate_monthly_cashflow(transactions, TransactionType.DEPOSIT),
        monthly_expenses=estimate_monthly_cashflow(transactions, TransactionType.WITHDRAWAL),
        current_savings=user.balance,
        age=age,
        experience=assess_experience(investments, transactions),
    )


__all__ = [
    "assess_experience",
    "average_time_horizon",
    "build_profile",
    "classify_risk_tolerance",
    "estimate_monthly_cashflow",
    "extract_investment_goals",
]
