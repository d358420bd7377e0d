"""Repository pattern for async database operations.

Each repository encapsulates query logic for a single aggregate root
and opens its own unit of work through :meth:`Database.session`.

Conversion helpers translate between core domain models
(:mod:`trade_psychology.core.models`) and ORM records.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Sequence

from sqlalchemy import delete, func, select

from trade_psychology.core.enums import Session, StopLossDiscipline
from trade_psychology.core.models import Trade, TradingPlan, TradingPlanFields

from .connection import Database
from .models import TradeRecord, TradingPlanRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Conversion helpers
# ---------------------------------------------------------------------------

def _trade_to_record(trade: Trade) -> TradeRecord:
    """Convert a core :class:`Trade` to an ORM :class:`TradeRecord`."""
    return TradeRecord(
        id=trade.id,
        user_id=trade.user_id,
        entry_time=trade.entry_time,
        exit_time=trade.exit_time,
        risk_percent_used=trade.risk_percent_used,
        profit_loss=trade.profit_loss,
        risk_reward_achieved=trade.risk_reward_achieved,
        session=trade.session.value,
        stop_loss_hit=trade.stop_loss_hit,
        exited_early=trade.exited_early,
        target_percent_achieved=trade.target_percent_achieved,
        notes=trade.notes,
        created_at=trade.created_at,
        updated_at=trade.updated_at,
    )


def _record_to_trade(record: TradeRecord) -> Trade:
    """Convert an ORM :class:`TradeRecord` back to a core :class:`Trade`."""
    return Trade(
        id=record.id,
        user_id=record.user_id,
        entry_time=record.entry_time,
        exit_time=record.exit_time,
        risk_percent_used=record.risk_percent_used,
        profit_loss=record.profit_loss,
        risk_reward_achieved=record.risk_reward_achieved,
        session=Session(record.session),
        stop_loss_hit=record.stop_loss_hit,
        exited_early=record.exited_early,
        target_percent_achieved=record.target_percent_achieved,
        notes=record.notes,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _record_to_plan(record: TradingPlanRecord) -> TradingPlan:
    return TradingPlan(
        id=record.id,
        user_id=record.user_id,
        max_trades_per_day=record.max_trades_per_day,
        risk_percent_per_trade=record.risk_percent_per_trade,
        target_risk_reward_ratio=record.target_risk_reward_ratio,
        preferred_sessions=[Session(s) for s in record.preferred_sessions or []],
        stop_loss_discipline=StopLossDiscipline(record.stop_loss_discipline),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _column_value(value: Any) -> Any:
    return value.value if isinstance(value, (Session, StopLossDiscipline)) else value


# ---------------------------------------------------------------------------
# TradeRepository
# ---------------------------------------------------------------------------

class SqlTradeRepository:
    """Repository for :class:`TradeRecord` persistence and retrieval."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def _where(
        self,
        stmt: Any,
        user_id: str,
        session: Session | None,
        start: datetime | None,
        end: datetime | None,
        filters: dict[str, Any] | None,
    ) -> Any:
        stmt = stmt.where(TradeRecord.user_id == user_id)
        if session is not None:
            stmt = stmt.where(TradeRecord.session == session.value)
        if start is not None:
            stmt = stmt.where(TradeRecord.entry_time >= start)
        if end is not None:
            stmt = stmt.where(TradeRecord.entry_time <= end)
        for name, value in (filters or {}).items():
            stmt = stmt.where(getattr(TradeRecord, name) == _column_value(value))
        return stmt

    async def add(self, trade: Trade) -> Trade:
        async with self._db.session() as s:
            s.add(_trade_to_record(trade))
        logger.debug("Inserted trade %s", trade.id)
        return trade

    async def add_many(self, trades: Sequence[Trade]) -> list[Trade]:
        async with self._db.session() as s:
            s.add_all([_trade_to_record(t) for t in trades])
        logger.debug("Inserted %d trades", len(trades))
        return list(trades)

    async def get(self, user_id: str, trade_id: str) -> Trade | None:
        stmt = select(TradeRecord).where(
            TradeRecord.id == trade_id, TradeRecord.user_id == user_id,
        )
        async with self._db.session() as s:
            record = (await s.execute(stmt)).scalar_one_or_none()
        return _record_to_trade(record) if record is not None else None

    async def replace(self, trade: Trade) -> Trade:
        async with self._db.session() as s:
            await s.merge(_trade_to_record(trade))
        logger.debug("Updated trade %s", trade.id)
        return trade

    async def delete(self, user_id: str, trade_id: str) -> bool:
        stmt = delete(TradeRecord).where(
            TradeRecord.id == trade_id, TradeRecord.user_id == user_id,
        )
        async with self._db.session() as s:
            result = await s.execute(stmt)
        return bool(result.rowcount)

    async def find(
        self,
        user_id: str,
        *,
        session: Session | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        filters: dict[str, Any] | None = None,
        newest_first: bool = True,
        limit: int | None = None,
        offset: int = 0,
        sort_field: str = "entry_time",
    ) -> list[Trade]:
        column = getattr(TradeRecord, sort_field)
        stmt = self._where(select(TradeRecord), user_id, session, start, end, filters)
        stmt = stmt.order_by(column.desc() if newest_first else column.asc())
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._db.session() as s:
            records = (await s.execute(stmt)).scalars().all()
        return [_record_to_trade(r) for r in records]

    async def count(
        self,
        user_id: str,
        *,
        session: Session | None = None,
        filters: dict[str, Any] | None = None,
    ) -> int:
        stmt = self._where(
            select(func.count()).select_from(TradeRecord),
            user_id, session, None, None, filters,
        )
        async with self._db.session() as s:
            return int((await s.execute(stmt)).scalar_one())


# ---------------------------------------------------------------------------
# TradingPlanRepository
# ---------------------------------------------------------------------------

class SqlTradingPlanRepository:
    """Repository for :class:`TradingPlanRecord` (one row per user)."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def get(self, user_id: str) -> TradingPlan | None:
        stmt = select(TradingPlanRecord).where(TradingPlanRecord.user_id == user_id)
        async with self._db.session() as s:
            record = (await s.execute(stmt)).scalar_one_or_none()
        return _record_to_plan(record) if record is not None else None

    async def upsert(self, user_id: str, body: TradingPlanFields) -> TradingPlan:
        values = {k: _column_value(v) for k, v in body.model_dump().items()}
        values["preferred_sessions"] = [s.value for s in body.preferred_sessions]

        stmt = select(TradingPlanRecord).where(TradingPlanRecord.user_id == user_id)
        async with self._db.session() as s:
            record = (await s.execute(stmt)).scalar_one_or_none()
            if record is None:
                record = TradingPlanRecord(user_id=user_id, **values)
                s.add(record)
                logger.debug("Inserted trading plan for %s", user_id)
            else:
                for name, value in values.items():
                    setattr(record, name, value)
                record.updated_at = datetime.now(timezone.utc)
                logger.debug("Updated trading plan %s", record.id)
            await s.flush()
            return _record_to_plan(record)

    async def delete(self, user_id: str) -> bool:
        stmt = delete(TradingPlanRecord).where(TradingPlanRecord.user_id == user_id)
        async with self._db.session() as s:
            result = await s.execute(stmt)
        return bool(result.rowcount)
