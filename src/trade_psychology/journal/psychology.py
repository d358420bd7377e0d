"""Psychological state classifier.

Maps a handful of recent trades to a heuristic state label
(NEUTRAL / CONFIDENT / FRUSTRATED / GREEDY / FEARFUL) plus confidence,
risk-tolerance and emotional-balance scores on a 0-100 scale.

The rules run in a fixed order and each may overwrite what an earlier
rule decided.  In particular the risk-usage rule runs after the win-rate
rule, so a trader winning every trade while risking 5% per trade is
GREEDY, not CONFIDENT.

Usage::

    result = analyze_psychological_state(last_ten_trades)
    print(result.state, result.confidence)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Sequence

from trade_psychology.core.enums import PsychState
from trade_psychology.core.models import Trade

from .metrics import avg, fraction, round_score, win_rate
from .results import PsychologicalStateResult

logger = logging.getLogger(__name__)

EMPTY_RECOMMENDATION = "Start trading to build psychological profile"
DEFAULT_RECOMMENDATION = "Continue current trading approach"


@dataclass
class _TradeMetrics:
    """Inputs every rule reads."""

    win_rate: float
    avg_risk_used: float
    avg_target_achieved: float
    early_exit_fraction: float
    stop_loss_fraction: float

    @classmethod
    def from_trades(cls, trades: Sequence[Trade]) -> "_TradeMetrics":
        return cls(
            win_rate=win_rate(trades),
            avg_risk_used=avg(trades, "risk_percent_used"),
            avg_target_achieved=avg(trades, "target_percent_achieved"),
            early_exit_fraction=fraction(trades, "exited_early"),
            stop_loss_fraction=fraction(trades, "stop_loss_hit"),
        )


@dataclass
class _StateAccumulator:
    """Mutable verdict the rules write into, starting from neutral."""

    state: PsychState = PsychState.NEUTRAL
    confidence: float = 50.0
    risk_tolerance: float = 50.0
    emotional_balance: float = 50.0
    recommendations: list[str] = field(default_factory=list)


# ------------------------------------------------------------------ #
# Rules (applied in declaration order)                                 #
# ------------------------------------------------------------------ #

def _win_rate_rule(acc: _StateAccumulator, m: _TradeMetrics) -> None:
    if m.win_rate >= 70:
        acc.state = PsychState.CONFIDENT
        acc.confidence = min(95, 50 + (m.win_rate - 50) * 0.9)
        acc.risk_tolerance = min(80, 50 + (m.win_rate - 50) * 0.6)
    elif m.win_rate <= 30:
        acc.state = PsychState.FRUSTRATED
        acc.confidence = max(20, 50 - (50 - m.win_rate) * 0.6)
        acc.risk_tolerance = max(20, 50 - (50 - m.win_rate) * 0.6)


def _risk_usage_rule(acc: _StateAccumulator, m: _TradeMetrics) -> None:
    if m.avg_risk_used > 3:
        acc.state = PsychState.GREEDY
        acc.risk_tolerance = min(90, acc.risk_tolerance + 20)
        acc.recommendations.append("Reduce risk per trade")
    elif m.avg_risk_used < 1:
        acc.state = PsychState.FEARFUL
        acc.risk_tolerance = max(10, acc.risk_tolerance - 20)
        acc.recommendations.append("Consider increasing position size gradually")


def _early_exit_rule(acc: _StateAccumulator, m: _TradeMetrics) -> None:
    if m.early_exit_fraction > 0.3:
        acc.emotional_balance = max(30, acc.emotional_balance - 20)
        acc.recommendations.append("Work on holding profitable trades longer")


def _stop_loss_rule(acc: _StateAccumulator, m: _TradeMetrics) -> None:
    if m.stop_loss_fraction > 0.4:
        acc.emotional_balance = max(30, acc.emotional_balance - 15)
        acc.recommendations.append("Review entry strategies and market analysis")


def _target_rule(acc: _StateAccumulator, m: _TradeMetrics) -> None:
    if m.avg_target_achieved < 50:
        acc.recommendations.append("Improve trade management and target setting")


STATE_RULES: tuple[Callable[[_StateAccumulator, _TradeMetrics], None], ...] = (
    _win_rate_rule,
    _risk_usage_rule,
    _early_exit_rule,
    _stop_loss_rule,
    _target_rule,
)


def analyze_psychological_state(
    trades: Sequence[Trade],
    *,
    now: datetime | None = None,
) -> PsychologicalStateResult:
    """Classify the trader's state from ``trades`` (any order).

    Parameters
    ----------
    trades : Sequence[Trade]
        Usually the ten most recent trades.
    now : datetime | None
        Value stamped into ``last_updated``.  Defaults to wall-clock UTC.
    """
    stamp = now or datetime.now(timezone.utc)

    if not trades:
        return PsychologicalStateResult(
            state=PsychState.NEUTRAL,
            confidence=50,
            risk_tolerance=50,
            emotional_balance=50,
            last_updated=stamp,
            recommendations=[EMPTY_RECOMMENDATION],
        )

    metrics = _TradeMetrics.from_trades(trades)
    acc = _StateAccumulator()
    for rule in STATE_RULES:
        rule(acc, metrics)

    if not acc.recommendations:
        acc.recommendations.append(DEFAULT_RECOMMENDATION)

    logger.debug(
        "Classified %d trades as %s (win_rate=%.1f avg_risk=%.2f)",
        len(trades), acc.state.value, metrics.win_rate, metrics.avg_risk_used,
    )
    return PsychologicalStateResult(
        state=acc.state,
        confidence=round_score(acc.confidence),
        risk_tolerance=round_score(acc.risk_tolerance),
        emotional_balance=round_score(acc.emotional_balance),
        last_updated=stamp,
        recommendations=acc.recommendations,
    )
