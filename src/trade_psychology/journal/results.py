"""Derived result structures returned by the analytics core.

None of these are persisted by the core.  All of them serialise with
camelCase names via :meth:`CamelModel.to_json_dict`.
"""

from __future__ import annotations

from datetime import date as _date
from datetime import datetime

from pydantic import Field

from trade_psychology.core.enums import (
    AlertPriority,
    AlertType,
    FactorImpact,
    ForecastDirection,
    ImpactLevel,
    InsightType,
    PsychState,
    Session,
    TrendDirection,
)
from trade_psychology.core.models import CamelModel


# ---------------------------------------------------------------------------
# Psychological state
# ---------------------------------------------------------------------------

class PsychologicalStateResult(CamelModel):
    state: PsychState
    confidence: int = Field(ge=0, le=100)
    risk_tolerance: int = Field(ge=0, le=100)
    emotional_balance: int = Field(ge=0, le=100)
    last_updated: datetime
    recommendations: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Session forecast
# ---------------------------------------------------------------------------

class ForecastFactor(CamelModel):
    factor: str
    impact: FactorImpact
    weight: float = Field(ge=0, le=1)


class SessionForecastResult(CamelModel):
    session: str
    forecast: ForecastDirection
    probability: int = Field(ge=0, le=100)
    factors: list[ForecastFactor] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Performance insights
# ---------------------------------------------------------------------------

class Insight(CamelModel):
    type: InsightType
    description: str
    confidence: int = Field(ge=0, le=100)
    impact: ImpactLevel


class Pattern(CamelModel):
    pattern: str
    frequency: int = Field(ge=0, le=100)
    correlation: float = Field(ge=-1, le=1)


class PerformanceInsightsResult(CamelModel):
    period: str
    insights: list[Insight] = Field(default_factory=list)
    patterns: list[Pattern] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class InsightsDigest(CamelModel):
    """Period report shape used when the period holds no trades."""

    period: str
    insights: list[Insight] = Field(default_factory=list)
    summary: str


# ---------------------------------------------------------------------------
# State history
# ---------------------------------------------------------------------------

class StateEventContext(CamelModel):
    trade_id: str
    profit_loss: float
    risk_percent_used: float


class StateEvent(CamelModel):
    timestamp: datetime
    state: PsychState
    confidence: int
    trigger: str
    context: StateEventContext


class StateHistorySummary(CamelModel):
    total_changes: int = 0
    most_common_state: PsychState = PsychState.NEUTRAL
    average_confidence: int = 50
    volatility: float = 0.0


class StateHistoryResult(CamelModel):
    history: list[StateEvent] = Field(default_factory=list)
    summary: StateHistorySummary = Field(default_factory=StateHistorySummary)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class SummaryStats(CamelModel):
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    total_profit_loss: float = 0.0
    average_risk_reward: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0


class DailyPnL(CamelModel):
    date: _date
    profit_loss: float


class SessionPerformance(CamelModel):
    session: Session
    trades: int
    profit_loss: float
    win_rate: float


class RiskMetrics(CamelModel):
    average_risk_per_trade: float = 0.0
    max_drawdown: float = 0.0
    sharpe_ratio: float = 0.0


class Trends(CamelModel):
    pnl_trend: TrendDirection = TrendDirection.STABLE
    win_rate_trend: TrendDirection = TrendDirection.STABLE
    risk_trend: TrendDirection = TrendDirection.STABLE


class Alert(CamelModel):
    type: AlertType
    message: str
    priority: AlertPriority


class RecentTrade(CamelModel):
    id: str
    entry_time: datetime
    exit_time: datetime
    profit_loss: float
    session: Session
    risk_percent_used: float
    risk_reward_achieved: float


class PerformanceBreakdown(CamelModel):
    daily_pnl: list[DailyPnL] = Field(default_factory=list, alias="dailyPnL")
    session_performance: list[SessionPerformance] = Field(default_factory=list)
    risk_metrics: RiskMetrics = Field(default_factory=RiskMetrics)


class DashboardResult(CamelModel):
    period: str
    summary: SummaryStats
    psychological_state: PsychologicalStateResult
    performance: PerformanceBreakdown
    insights: list[Insight] = Field(default_factory=list)
    recent_trades: list[RecentTrade] = Field(default_factory=list)


class QuickStats(CamelModel):
    total_trades: int
    win_rate: float
    total_pnl: float = Field(alias="totalPnL")
    avg_risk_reward: float
    current_state: PsychState
    confidence: int


class DashboardSummaryResult(CamelModel):
    period: str
    quick_stats: QuickStats
    trends: Trends
    alerts: list[Alert] = Field(default_factory=list)
