"""Trade CRUD and paginated queries, scoped to one owner."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Sequence

from pydantic import Field

from trade_psychology.core.enums import Session
from trade_psychology.core.errors import InvalidQueryError, TradeNotFoundError
from trade_psychology.core.interfaces import ITradeRepository
from trade_psychology.core.models import CamelModel, Trade, TradeCreate, TradeUpdate, as_utc

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10

# wire name -> attribute, for ``sortBy``
SORTABLE_FIELDS = {
    "entryTime": "entry_time",
    "exitTime": "exit_time",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "profitLoss": "profit_loss",
    "riskPercentUsed": "risk_percent_used",
    "riskRewardAchieved": "risk_reward_achieved",
    "targetPercentAchieved": "target_percent_achieved",
    "session": "session",
}


class TradePage(CamelModel):
    results: list[Trade] = Field(default_factory=list)
    page: int
    limit: int
    total_pages: int
    total_results: int


def parse_sort(sort_by: str | None) -> tuple[str, bool]:
    """``"profitLoss:desc"`` -> ``("profit_loss", True)``.

    Defaults to creation order (oldest first).  Either the wire name or
    the attribute name is accepted; direction defaults to ascending.
    """
    if not sort_by:
        return "created_at", False
    name, _, direction = sort_by.partition(":")
    field = SORTABLE_FIELDS.get(name) or (name if name in SORTABLE_FIELDS.values() else None)
    if field is None:
        raise InvalidQueryError(f"cannot sort by {name!r}")
    direction = direction.lower() or "asc"
    if direction not in ("asc", "desc"):
        raise InvalidQueryError(f"sort direction must be asc or desc, got {direction!r}")
    return field, direction == "desc"


class TradeService:
    def __init__(self, trades: ITradeRepository) -> None:
        self._trades = trades

    async def create_trade(self, user_id: str, body: TradeCreate) -> Trade:
        trade = await self._trades.add(Trade.from_create(user_id, body))
        logger.info("Created trade %s for %s", trade.id, user_id)
        return trade

    async def create_bulk_trades(self, user_id: str, bodies: Sequence[TradeCreate]) -> list[Trade]:
        trades = await self._trades.add_many([Trade.from_create(user_id, b) for b in bodies])
        logger.info("Created %d trades for %s", len(trades), user_id)
        return trades

    async def query_trades(
        self,
        user_id: str,
        *,
        session: Session | None = None,
        stop_loss_hit: bool | None = None,
        exited_early: bool | None = None,
        entry_time: datetime | None = None,
        exit_time: datetime | None = None,
        sort_by: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        page: int = 1,
    ) -> TradePage:
        """One page of a user's trades with optional equality filters."""
        limit = max(limit, 1)
        page = max(page, 1)
        sort_field, descending = parse_sort(sort_by)

        filters: dict[str, Any] = {}
        if stop_loss_hit is not None:
            filters["stop_loss_hit"] = stop_loss_hit
        if exited_early is not None:
            filters["exited_early"] = exited_early
        if entry_time is not None:
            filters["entry_time"] = as_utc(entry_time)
        if exit_time is not None:
            filters["exit_time"] = as_utc(exit_time)

        total = await self._trades.count(user_id, session=session, filters=filters)
        results = await self._trades.find(
            user_id,
            session=session,
            filters=filters,
            newest_first=descending,
            sort_field=sort_field,
            limit=limit,
            offset=(page - 1) * limit,
        )
        logger.info("Query for %s returned %d of %d trades", user_id, len(results), total)
        return TradePage(
            results=results,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
            total_results=total,
        )

    async def get_trade(self, user_id: str, trade_id: str) -> Trade:
        trade = await self._trades.get(user_id, trade_id)
        if trade is None:
            raise TradeNotFoundError(trade_id)
        return trade

    async def update_trade(self, user_id: str, trade_id: str, update: TradeUpdate) -> Trade:
        trade = await self.get_trade(user_id, trade_id)
        updated = await self._trades.replace(trade.with_changes(update.changes()))
        logger.info("Updated trade %s for %s", trade_id, user_id)
        return updated

    async def delete_trade(self, user_id: str, trade_id: str) -> None:
        if not await self._trades.delete(user_id, trade_id):
            raise TradeNotFoundError(trade_id)
        logger.info("Deleted trade %s for %s", trade_id, user_id)
