"""SQLAlchemy ORM models for the trading journal database.

All tables use UUID string primary keys and UTC timestamps, with
indexes for the common query patterns (a user's trades by entry time,
a session's trades by entry time).

Relationships:
    TradingPlanRecord is unique per user_id; trades reference the owner
    by user_id only (users live in the auth service).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_uuid() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Declarative base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""

    pass


# ---------------------------------------------------------------------------
# TradeRecord
# ---------------------------------------------------------------------------

class TradeRecord(Base):
    """Persisted trade.

    Maps from :class:`trade_psychology.core.models.Trade`.
    """

    __tablename__ = "trades"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_uuid)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    entry_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    exit_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    risk_percent_used: Mapped[float] = mapped_column(Float, nullable=False)
    profit_loss: Mapped[float] = mapped_column(Float, nullable=False)
    risk_reward_achieved: Mapped[float] = mapped_column(Float, nullable=False)
    session: Mapped[str] = mapped_column(String(8), nullable=False)
    stop_loss_hit: Mapped[bool] = mapped_column(Boolean, nullable=False)
    exited_early: Mapped[bool] = mapped_column(Boolean, nullable=False)
    target_percent_achieved: Mapped[float] = mapped_column(Float, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_trades_user_entry", "user_id", entry_time.desc()),
        Index("ix_trades_session_entry", "session", entry_time.desc()),
        Index("ix_trades_entry_time", "entry_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<TradeRecord(id={self.id!r}, user_id={self.user_id!r}, "
            f"session={self.session!r}, profit_loss={self.profit_loss!r})>"
        )


# ---------------------------------------------------------------------------
# TradingPlanRecord
# ---------------------------------------------------------------------------

class TradingPlanRecord(Base):
    """A user's trading plan (at most one row per user)."""

    __tablename__ = "trading_plans"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_uuid)
    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    max_trades_per_day: Mapped[int] = mapped_column(Integer, nullable=False)
    risk_percent_per_trade: Mapped[float] = mapped_column(Float, nullable=False)
    target_risk_reward_ratio: Mapped[float] = mapped_column(Float, nullable=False)
    preferred_sessions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    stop_loss_discipline: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<TradingPlanRecord(user_id={self.user_id!r})>"
