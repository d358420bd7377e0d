"""Repository interfaces used by the service layer.

Both the in-memory and the postgres storage backends implement these.
Trade queries return trades ordered by ``sort_field`` (``entry_time``
unless told otherwise).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, Sequence

from .enums import Session
from .models import Trade, TradingPlan, TradingPlanFields


class ITradeRepository(Protocol):
    """Trade persistence, scoped by owner."""

    async def add(self, trade: Trade) -> Trade:
        ...

    async def add_many(self, trades: Sequence[Trade]) -> list[Trade]:
        ...

    async def get(self, user_id: str, trade_id: str) -> Trade | None:
        ...

    async def replace(self, trade: Trade) -> Trade:
        """Overwrite an existing trade with the same id."""
        ...

    async def delete(self, user_id: str, trade_id: str) -> bool:
        """Remove a trade. Returns False when it did not exist."""
        ...

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
        ...

    async def count(
        self,
        user_id: str,
        *,
        session: Session | None = None,
        filters: dict[str, Any] | None = None,
    ) -> int:
        ...


class ITradingPlanRepository(Protocol):
    """One trading plan per user."""

    async def get(self, user_id: str) -> TradingPlan | None:
        ...

    async def upsert(self, user_id: str, body: TradingPlanFields) -> TradingPlan:
        ...

    async def delete(self, user_id: str) -> bool:
        ...
