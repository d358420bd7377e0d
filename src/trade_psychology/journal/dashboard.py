"""Dashboard aggregation.

Builds the two dashboard payloads from a period's trades:

* :func:`build_dashboard`: summary stats, daily P&L, per-session
  performance, risk metrics, insights and the most recent trades.
* :func:`build_dashboard_summary`: quick stats, first-half vs
  second-half trends and threshold alerts.

Period trades are processed in the order given (the storage layer
returns them newest first); nothing here re-sorts them except the
daily P&L series, which is ordered by date.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Sequence

from trade_psychology.core.enums import (
    AlertPriority,
    AlertType,
    PsychState,
    Session,
    TrendDirection,
)
from trade_psychology.core.models import Trade

from .insights import analyze_performance_insights
from .metrics import (
    avg,
    max_drawdown,
    round_money,
    sharpe_ratio_simplified,
    win_fraction,
    win_rate,
)
from .periods import period_label
from .psychology import analyze_psychological_state
from .results import (
    Alert,
    DailyPnL,
    DashboardResult,
    DashboardSummaryResult,
    PerformanceBreakdown,
    PsychologicalStateResult,
    QuickStats,
    RecentTrade,
    RiskMetrics,
    SessionPerformance,
    SummaryStats,
    Trends,
)

logger = logging.getLogger(__name__)

RECENT_ALERT_WINDOW = 5
RECENT_TRADES_SHOWN = 10


@dataclass
class _SessionBucket:
    """Accumulator for one session."""

    trades: int = 0
    profit_loss: float = 0.0
    winners: int = 0

    def record(self, trade: Trade) -> None:
        self.trades += 1
        self.profit_loss += trade.profit_loss
        if trade.profit_loss > 0:
            self.winners += 1


# ------------------------------------------------------------------ #
# Building blocks                                                      #
# ------------------------------------------------------------------ #

def calculate_summary_stats(trades: Sequence[Trade]) -> SummaryStats:
    if not trades:
        return SummaryStats()

    profits = [t.profit_loss for t in trades]
    return SummaryStats(
        total_trades=len(trades),
        winning_trades=sum(1 for p in profits if p > 0),
        losing_trades=sum(1 for p in profits if p < 0),
        win_rate=round_money(win_rate(trades)),
        total_profit_loss=round_money(sum(profits)),
        average_risk_reward=round_money(avg(trades, "risk_reward_achieved")),
        best_trade=round_money(max(profits)),
        worst_trade=round_money(min(profits)),
    )


def calculate_daily_pnl(trades: Sequence[Trade]) -> list[DailyPnL]:
    """Net P&L per UTC calendar day of entry, oldest day first."""
    by_day: dict[date, float] = {}
    for t in trades:
        day = t.entry_time.astimezone(timezone.utc).date()
        by_day[day] = by_day.get(day, 0.0) + t.profit_loss
    return [
        DailyPnL(date=day, profit_loss=round_money(pnl))
        for day, pnl in sorted(by_day.items())
    ]


def calculate_session_performance(trades: Sequence[Trade]) -> list[SessionPerformance]:
    """Per-session stats in order of each session's first appearance."""
    buckets: dict[Session, _SessionBucket] = {}
    for t in trades:
        buckets.setdefault(t.session, _SessionBucket()).record(t)
    return [
        SessionPerformance(
            session=session,
            trades=b.trades,
            profit_loss=round_money(b.profit_loss),
            win_rate=round_money((b.winners / b.trades) * 100),
        )
        for session, b in buckets.items()
    ]


def calculate_risk_metrics(trades: Sequence[Trade]) -> RiskMetrics:
    if not trades:
        return RiskMetrics()
    return RiskMetrics(
        average_risk_per_trade=round_money(avg(trades, "risk_percent_used")),
        max_drawdown=round_money(max_drawdown(trades)),
        sharpe_ratio=round_money(sharpe_ratio_simplified(trades)),
    )


def _direction(first: float, second: float) -> TrendDirection:
    if second > first:
        return TrendDirection.UP
    if second < first:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def calculate_trends(trades: Sequence[Trade]) -> Trends:
    """Compare the first half of ``trades`` with the second half."""
    if len(trades) < 2:
        return Trends()

    mid = len(trades) // 2
    first, second = trades[:mid], trades[mid:]
    return Trends(
        pnl_trend=_direction(
            sum(t.profit_loss for t in first),
            sum(t.profit_loss for t in second),
        ),
        win_rate_trend=_direction(win_fraction(first), win_fraction(second)),
        risk_trend=_direction(
            avg(first, "risk_percent_used"),
            avg(second, "risk_percent_used"),
        ),
    )


def generate_alerts(
    trades: Sequence[Trade],
    psychological_state: PsychologicalStateResult,
) -> list[Alert]:
    """Threshold alerts over win rate, risk, recent form and state."""
    alerts: list[Alert] = []
    if not trades:
        return alerts

    rate = win_fraction(trades)
    avg_risk = avg(trades, "risk_percent_used")
    recent_rate = win_fraction(trades[-RECENT_ALERT_WINDOW:])

    if rate >= 0.7:
        alerts.append(Alert(
            type=AlertType.SUCCESS,
            message="Excellent win rate achieved",
            priority=AlertPriority.MEDIUM,
        ))
    elif rate <= 0.3:
        alerts.append(Alert(
            type=AlertType.WARNING,
            message="Low win rate - review trading strategy",
            priority=AlertPriority.HIGH,
        ))

    if avg_risk > 3:
        alerts.append(Alert(
            type=AlertType.WARNING,
            message="Risk per trade above recommended level",
            priority=AlertPriority.HIGH,
        ))
    elif avg_risk < 1:
        alerts.append(Alert(
            type=AlertType.INFO,
            message="Consider increasing position sizes gradually",
            priority=AlertPriority.LOW,
        ))

    if recent_rate > rate + 0.2:
        alerts.append(Alert(
            type=AlertType.SUCCESS,
            message="Recent performance showing improvement",
            priority=AlertPriority.MEDIUM,
        ))
    elif recent_rate < rate - 0.2:
        alerts.append(Alert(
            type=AlertType.WARNING,
            message="Recent performance declining",
            priority=AlertPriority.HIGH,
        ))

    if psychological_state.state == PsychState.GREEDY:
        alerts.append(Alert(
            type=AlertType.WARNING,
            message="High risk tolerance detected - reduce position sizes",
            priority=AlertPriority.HIGH,
        ))
    elif psychological_state.state == PsychState.FEARFUL:
        alerts.append(Alert(
            type=AlertType.INFO,
            message="Low confidence detected - consider taking a break",
            priority=AlertPriority.MEDIUM,
        ))

    return alerts


def _recent_trade(t: Trade) -> RecentTrade:
    return RecentTrade(
        id=t.id,
        entry_time=t.entry_time,
        exit_time=t.exit_time,
        profit_loss=t.profit_loss,
        session=t.session,
        risk_percent_used=t.risk_percent_used,
        risk_reward_achieved=t.risk_reward_achieved,
    )


# ------------------------------------------------------------------ #
# Payloads                                                             #
# ------------------------------------------------------------------ #

def build_dashboard(
    period_trades: Sequence[Trade],
    state_trades: Sequence[Trade],
    period: str,
    *,
    now: datetime | None = None,
    recent_count: int = RECENT_TRADES_SHOWN,
) -> DashboardResult:
    """Full dashboard for one period.

    Parameters
    ----------
    period_trades : Sequence[Trade]
        Trades inside the period window, newest first.
    state_trades : Sequence[Trade]
        The user's most recent trades regardless of period; these drive
        the psychological state.
    period : str
        Period label echoed back.
    """
    label = period_label(period)
    state = analyze_psychological_state(state_trades, now=now)
    insights = analyze_performance_insights(period_trades, label)

    dashboard = DashboardResult(
        period=label,
        summary=calculate_summary_stats(period_trades),
        psychological_state=state,
        performance=PerformanceBreakdown(
            daily_pnl=calculate_daily_pnl(period_trades),
            session_performance=calculate_session_performance(period_trades),
            risk_metrics=calculate_risk_metrics(period_trades),
        ),
        insights=insights.insights,
        recent_trades=[_recent_trade(t) for t in period_trades[:recent_count]],
    )
    logger.debug("Built dashboard for %s over %d trades", label, len(period_trades))
    return dashboard


def build_dashboard_summary(
    period_trades: Sequence[Trade],
    state_trades: Sequence[Trade],
    period: str,
    *,
    now: datetime | None = None,
) -> DashboardSummaryResult:
    """Quick stats, trends and alerts for one period."""
    label = period_label(period)
    state = analyze_psychological_state(state_trades, now=now)
    stats = calculate_summary_stats(period_trades)

    return DashboardSummaryResult(
        period=label,
        quick_stats=QuickStats(
            total_trades=stats.total_trades,
            win_rate=stats.win_rate,
            total_pnl=stats.total_profit_loss,
            avg_risk_reward=stats.average_risk_reward,
            current_state=state.state,
            confidence=state.confidence,
        ),
        trends=calculate_trends(period_trades),
        alerts=generate_alerts(period_trades, state),
    )
