"""Dashboard service: period window fetch + dashboard aggregation."""

from __future__ import annotations

import logging

from trade_psychology.core.clock import IClock, WallClock
from trade_psychology.core.config import AnalysisConfig
from trade_psychology.core.enums import Period
from trade_psychology.core.interfaces import ITradeRepository
from trade_psychology.core.models import Trade
from trade_psychology.journal import build_dashboard, build_dashboard_summary, date_range
from trade_psychology.journal.periods import period_label
from trade_psychology.journal.results import DashboardResult, DashboardSummaryResult

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(
        self,
        trades: ITradeRepository,
        config: AnalysisConfig | None = None,
        clock: IClock | None = None,
    ) -> None:
        self._trades = trades
        self._config = config or AnalysisConfig()
        self._clock = clock or WallClock()

    async def _fetch(self, user_id: str, period: Period | str) -> tuple[list[Trade], list[Trade]]:
        """Period trades (newest first) and the most recent trades overall."""
        window = date_range(period, self._clock.now())
        period_trades = await self._trades.find(user_id, start=window.start, end=window.end)
        state_trades = await self._trades.find(user_id, limit=self._config.state_window)
        logger.info(
            "Found %d trades in %s window for dashboard of %s",
            len(period_trades), period_label(period), user_id,
        )
        return period_trades, state_trades

    async def get_complete_dashboard(
        self, user_id: str, period: Period | str = Period.MONTH,
    ) -> DashboardResult:
        period_trades, state_trades = await self._fetch(user_id, period)
        dashboard = build_dashboard(
            period_trades,
            state_trades,
            period,
            now=self._clock.now(),
            recent_count=self._config.recent_trades,
        )
        logger.info(
            "Dashboard compiled for %s (%d trades)", user_id, dashboard.summary.total_trades,
        )
        return dashboard

    async def get_dashboard_summary(
        self, user_id: str, period: Period | str = Period.MONTH,
    ) -> DashboardSummaryResult:
        period_trades, state_trades = await self._fetch(user_id, period)
        summary = build_dashboard_summary(
            period_trades, state_trades, period, now=self._clock.now(),
        )
        logger.info(
            "Dashboard summary compiled for %s (state %s)",
            user_id, summary.quick_stats.current_state.value,
        )
        return summary
