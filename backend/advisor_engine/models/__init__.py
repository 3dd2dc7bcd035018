"""Database model exports."""

from .records import (
    INVESTMENT_STATUSES,
    TRANSACTION_TYPES,
    Investment,
    InvestmentPlan,
    PortfolioHistory,
    Transaction,
    TransactionType,
    User,
)

__all__ = [
    "User",
    "InvestmentPlan",
    "Investment",
    "Transaction",
    "PortfolioHistory",
    "TRANSACTION_TYPES",
    "TransactionType",
    "INVESTMENT_STATUSES",
]
