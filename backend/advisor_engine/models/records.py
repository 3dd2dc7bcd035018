"""User, plan, investment, transaction and portfolio history tables."""

from __future__ import annotations

from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from advisor_engine.db.base import Base


class TransactionType(str, PyEnum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    PROFIT = "profit"
    INVESTMENT = "investment"


TRANSACTION_TYPES = tuple(kind.value for kind in TransactionType)
INVESTMENT_STATUSES = ("active", "completed", "cancelled")


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    balance: Mapped[float] = mapped_column(Numeric(15, 2), default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    investments: Mapped[list["Investment"]] = relationship(back_populates="user")
    transactions: Mapped[list["Transaction"]] = relationship(back_populates="user")
    history: Mapped[list["PortfolioHistory"]] = relationship(back_populates="user")


class InvestmentPlan(Base):
    __tablename__ = "investment_plans"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(128))
    description: Mapped[str | None] = mapped_column(String(512), nullable=True)
    apy_rate: Mapped[float] = mapped_column(Numeric(5, 2))
    minimum_amount: Mapped[float] = mapped_column(Numeric(15, 2), default=0)
    maximum_amount: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    duration_days: Mapped[int] = mapped_column(Integer, default=30)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class Investment(Base):
    __tablename__ = "investments"
    __table_args__ = (Index("ix_investments_user", "user_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    # Plans can be retired, so the join from investment to plan may miss.
    plan_id: Mapped[int] = mapped_column(Integer)
    amount: Mapped[float] = mapped_column(Numeric(15, 2))
    current_returns: Mapped[float] = mapped_column(Numeric(15, 2), default=0)
    expected_return: Mapped[float | None] = mapped_column(Numeric(5, 2), nullable=True)
    status: Mapped[str] = mapped_column(Enum(*INVESTMENT_STATUSES, name="investment_status"), default="active")
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    user: Mapped[User] = relationship(back_populates="investments")


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_user_created", "user_id", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    investment_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    type: Mapped[str] = mapped_column(Enum(*TRANSACTION_TYPES, name="transaction_type"))
    amount: Mapped[float] = mapped_column(Numeric(15, 2))
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="completed")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    user: Mapped[User] = relationship(back_populates="transactions")


class PortfolioHistory(Base):
    __tablename__ = "portfolio_history"
    __table_args__ = (Index("ix_portfolio_history_user_date", "user_id", "date"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    total_value: Mapped[float] = mapped_column(Numeric(15, 2))
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    user: Mapped[User] = relationship(back_populates="history")


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
