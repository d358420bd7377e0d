"""Trading plan service: one plan per user, created or replaced in place."""

from __future__ import annotations

import logging

from trade_psychology.core.errors import TradingPlanNotFoundError
from trade_psychology.core.interfaces import ITradingPlanRepository
from trade_psychology.core.models import TradingPlan, TradingPlanFields

logger = logging.getLogger(__name__)


class TradingPlanService:
    def __init__(self, plans: ITradingPlanRepository) -> None:
        self._plans = plans

    async def create_or_update(self, user_id: str, body: TradingPlanFields) -> TradingPlan:
        plan = await self._plans.upsert(user_id, body)
        logger.info("Saved trading plan %s for %s", plan.id, user_id)
        return plan

    async def get(self, user_id: str) -> TradingPlan:
        plan = await self._plans.get(user_id)
        if plan is None:
            raise TradingPlanNotFoundError(user_id)
        return plan

    async def delete(self, user_id: str) -> None:
        if not await self._plans.delete(user_id):
            raise TradingPlanNotFoundError(user_id)
        logger.info("Deleted trading plan for %s", user_id)
