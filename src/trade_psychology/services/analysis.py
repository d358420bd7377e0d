"""Analysis service: fetches a user's trades and runs the analytics core.

Each method picks the trade window its analysis needs (ten most recent
trades for the current state, twenty most recent of one session for a
forecast, a period window for insights, an over-fetched slice for the
state history) and hands it to :mod:`trade_psychology.journal`.
"""

from __future__ import annotations

import logging
from datetime import datetime

from trade_psychology.core.clock import IClock, WallClock
from trade_psychology.core.config import AnalysisConfig
from trade_psychology.core.enums import Period, Session
from trade_psychology.core.interfaces import ITradeRepository
from trade_psychology.journal import (
    analyze_psychological_state,
    analyze_session_forecast,
    analyze_state_history,
    date_range,
    summarize_performance_insights,
)
from trade_psychology.journal.periods import period_label
from trade_psychology.journal.results import (
    InsightsDigest,
    PerformanceInsightsResult,
    PsychologicalStateResult,
    SessionForecastResult,
    StateHistoryResult,
)

logger = logging.getLogger(__name__)


class AnalysisService:
    """Per-user psychological analysis.

    Parameters
    ----------
    trades : ITradeRepository
        Trade storage.
    config : AnalysisConfig | None
        Window sizes and forecast constants.
    clock : IClock | None
        Source of "now" for timestamps and period windows.
    """

    def __init__(
        self,
        trades: ITradeRepository,
        config: AnalysisConfig | None = None,
        clock: IClock | None = None,
    ) -> None:
        self._trades = trades
        self._config = config or AnalysisConfig()
        self._clock = clock or WallClock()

    async def get_current_state(self, user_id: str) -> PsychologicalStateResult:
        recent = await self._trades.find(user_id, limit=self._config.state_window)
        logger.info("Found %d recent trades for state analysis of %s", len(recent), user_id)

        state = analyze_psychological_state(recent, now=self._clock.now())
        logger.info("Psychological state for %s: %s", user_id, state.state.value)
        return state

    async def get_session_forecast(
        self,
        user_id: str,
        session: Session | str = Session.LONDON,
    ) -> SessionForecastResult:
        session = Session(str(getattr(session, "value", session)).upper())
        trades = await self._trades.find(
            user_id, session=session, limit=self._config.forecast_window,
        )
        logger.info("Found %d %s trades for forecast of %s", len(trades), session.value, user_id)

        forecast = analyze_session_forecast(trades, session.value, config=self._config.forecast)
        logger.info("Session forecast for %s: %s", user_id, forecast.forecast.value)
        return forecast

    async def get_performance_insights(
        self,
        user_id: str,
        period: Period | str = Period.MONTH,
    ) -> PerformanceInsightsResult | InsightsDigest:
        window = date_range(period, self._clock.now())
        trades = await self._trades.find(user_id, start=window.start, end=window.end)
        logger.info("Found %d trades in %s window for insights of %s", len(trades), period_label(period), user_id)

        insights = summarize_performance_insights(trades, period)
        logger.info("Generated %d insights for %s", len(insights.insights), user_id)
        return insights

    async def get_state_history(
        self,
        user_id: str,
        *,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int | None = None,
    ) -> StateHistoryResult:
        limit = limit if limit is not None else self._config.history_limit
        trades = await self._trades.find(
            user_id,
            start=start_date,
            end=end_date,
            limit=limit * self._config.history_overfetch,
        )
        logger.info("Found %d trades for state history of %s", len(trades), user_id)

        history = analyze_state_history(trades, limit, now=self._clock.now())
        logger.info("Generated %d history records for %s", len(history.history), user_id)
        return history
