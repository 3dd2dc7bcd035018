"""Pick educational content for a profile."""

from __future__ import annotations

from advisor_engine.schemas.education import Difficulty, EducationalContent
from advisor_engine.schemas.profile import Experience, FinancialProfile, RiskTolerance

RISK_BASICS = EducationalContent(
    title="Understanding Investment Risk",
    content=(
        "Learn how to balance risk and return in your investment portfolio. Risk tolerance "
        "varies by individual and should align with your financial goals and time horizon."
    ),
    difficulty=Difficulty.BEGINNER,
    category="Risk Management",
)

ADVANCED_OPTIMIZATION = EducationalContent(
    title="Advanced Portfolio Optimization",
    content=(
        "Explore sophisticated strategies for maximizing risk-adjusted returns through "
        "diversification, correlation analysis, and dynamic rebalancing."
    ),
    difficulty=Difficulty.ADVANCED,
    category="Portfolio Strategy",
)

_MARKET_TIMING_TITLE = "Market Timing vs. Time in Market"
_MARKET_TIMING_BODY = (
    "Understanding why consistent investing often outperforms attempting to time market "
    "movements. Historical data shows the importance of staying invested."
)


def market_timing_article(experience: Experience) -> EducationalContent:
    difficulty = Difficulty.BEGINNER if experience == Experience.BEGINNER else Difficulty.INTERMEDIATE
    return EducationalContent(
        title=_MARKET_TIMING_TITLE,
        content=_MARKET_TIMING_BODY,
        difficulty=difficulty,
        category="Investment Philosophy",
    )


def select_educational_content(profile: FinancialProfile) -> list[EducationalContent]:
    content: list[EducationalContent] = []
    if profile.experience == Experience.BEGINNER:
        content.append(RISK_BASICS)
    if profile.risk_tolerance == RiskTolerance.AGGRESSIVE:
        content.append(ADVANCED_OPTIMIZATION)
    content.append(market_timing_article(profile.experience))
    return content


__all__ = [
    "ADVANCED_OPTIMIZATION",
    "RISK_BASICS",
    "market_timing_article",
    "select_educational_content",
]
