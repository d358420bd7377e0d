"""In-memory repositories.

Default storage backend for development and tests.  Trades are held
per user in insertion order; queries sort a copy, so the stored lists
are never reordered.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Sequence

from trade_psychology.core.enums import Session
from trade_psychology.core.models import Trade, TradingPlan, TradingPlanFields

logger = logging.getLogger(__name__)


def _matches(
    trade: Trade,
    session: Session | None,
    start: datetime | None,
    end: datetime | None,
    filters: dict[str, Any] | None,
) -> bool:
    if session is not None and trade.session != session:
        return False
    if start is not None and trade.entry_time < start:
        return False
    if end is not None and trade.entry_time > end:
        return False
    if filters:
        for name, value in filters.items():
            if getattr(trade, name) != value:
                return False
    return True


class InMemoryTradeRepository:
    """Trade store keyed by user id."""

    def __init__(self) -> None:
        self._trades: dict[str, dict[str, Trade]] = defaultdict(dict)
        self._lock = asyncio.Lock()

    async def add(self, trade: Trade) -> Trade:
        async with self._lock:
            self._trades[trade.user_id][trade.id] = trade
        logger.debug("Stored trade %s for user %s", trade.id, trade.user_id)
        return trade

    async def add_many(self, trades: Sequence[Trade]) -> list[Trade]:
        async with self._lock:
            for t in trades:
                self._trades[t.user_id][t.id] = t
        logger.debug("Stored %d trades", len(trades))
        return list(trades)

    async def get(self, user_id: str, trade_id: str) -> Trade | None:
        return self._trades.get(user_id, {}).get(trade_id)

    async def replace(self, trade: Trade) -> Trade:
        async with self._lock:
            self._trades[trade.user_id][trade.id] = trade
        return trade

    async def delete(self, user_id: str, trade_id: str) -> bool:
        async with self._lock:
            return self._trades.get(user_id, {}).pop(trade_id, None) is not None

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
        selected = [
            t for t in self._trades.get(user_id, {}).values()
            if _matches(t, session, start, end, filters)
        ]
        selected.sort(key=lambda t: getattr(t, sort_field), reverse=newest_first)
        selected = selected[offset:]
        if limit is not None:
            selected = selected[:limit]
        return selected

    async def count(
        self,
        user_id: str,
        *,
        session: Session | None = None,
        filters: dict[str, Any] | None = None,
    ) -> int:
        return sum(
            1 for t in self._trades.get(user_id, {}).values()
            if _matches(t, session, None, None, filters)
        )


class InMemoryTradingPlanRepository:
    """One plan per user."""

    def __init__(self) -> None:
        self._plans: dict[str, TradingPlan] = {}

    async def get(self, user_id: str) -> TradingPlan | None:
        return self._plans.get(user_id)

    async def upsert(self, user_id: str, body: TradingPlanFields) -> TradingPlan:
        existing = self._plans.get(user_id)
        fields = body.model_dump()
        if existing is not None:
            plan = existing.model_copy(
                update={**fields, "updated_at": datetime.now(timezone.utc)},
            )
        else:
            plan = TradingPlan(user_id=user_id, **fields)
        self._plans[user_id] = plan
        return plan

    async def delete(self, user_id: str) -> bool:
        return self._plans.pop(user_id, None) is not None
