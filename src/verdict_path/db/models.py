"""ORM models for users, litigation completions and the coin ledger.

Tables are created by the Alembic migrations in ``alembic/versions``.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from verdict_path.db.base import Base

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Maps to the 'users' table (reward-relevant columns only)."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("total_coins >= 0", name="users_total_coins_non_negative"),
        CheckConstraint("coins_spent >= 0", name="users_coins_spent_non_negative"),
        CheckConstraint("login_streak >= 0", name="users_login_streak_non_negative"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    display_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    total_coins: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")
    coins_spent: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")
    last_daily_claim_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    login_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


# ---------------------------------------------------------------------------
# Litigation progress
# ---------------------------------------------------------------------------


class SubstageCompletion(Base):
    """One row per (user, substage); coins are captured at completion time."""

    __tablename__ = "litigation_substage_completions"
    __table_args__ = (
        UniqueConstraint("user_id", "substage_id", name="litigation_substage_completions_user_substage_key"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    stage_id: Mapped[int] = mapped_column(Integer, nullable=False)
    stage_name: Mapped[str] = mapped_column(String(64), nullable=False)
    substage_id: Mapped[str] = mapped_column(Text, nullable=False)
    substage_name: Mapped[str] = mapped_column(Text, nullable=False)
    substage_type: Mapped[str] = mapped_column(String(32), nullable=False)
    coins_awarded: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class StageCompletion(Base):
    """One row per (user, stage) for the stage completion bonus."""

    __tablename__ = "litigation_stage_completions"
    __table_args__ = (
        UniqueConstraint("user_id", "stage_id", name="litigation_stage_completions_user_stage_key"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    stage_id: Mapped[int] = mapped_column(Integer, nullable=False)
    stage_name: Mapped[str] = mapped_column(String(64), nullable=False)
    coins_awarded: Mapped[int] = mapped_column(Integer, nullable=False)
    all_substages_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Coins
# ---------------------------------------------------------------------------


class CoinLedger(Base):
    """Append-only log of every balance mutation."""

    __tablename__ = "coin_ledger"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(32), nullable=False)
    source_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    balance_after: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class CoinConversion(Base):
    """Coins converted to account credit."""

    __tablename__ = "coin_conversions"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    coins_converted: Mapped[int] = mapped_column(Integer, nullable=False)
    credit_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    conversion_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    converted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
