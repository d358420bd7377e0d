"""Psychological state history.

Replays trades in entry order through the state classifier, each time
on a sliding window of the last five trades, and records an event
whenever the state changes or confidence moves by more than 15 points.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from trade_psychology.core.enums import PsychState
from trade_psychology.core.models import Trade

from .insights import dominant_key
from .metrics import mean, round_half_up, round_score, std_dev
from .psychology import analyze_psychological_state
from .results import (
    StateEvent,
    StateEventContext,
    StateHistoryResult,
    StateHistorySummary,
)

logger = logging.getLogger(__name__)

WINDOW_SIZE = 5
CONFIDENCE_JUMP = 15


def state_trigger(trade: Trade) -> str:
    """Describe what about ``trade`` prompted a state snapshot."""
    if trade.profit_loss > 0:
        return "Profitable trade"
    if trade.profit_loss < 0:
        return "Losing trade"
    if trade.exited_early:
        return "Early exit"
    if trade.stop_loss_hit:
        return "Stop loss hit"
    return "Trade execution"


def _summarize(events: list[StateEvent]) -> StateHistorySummary:
    counts: dict[PsychState, int] = {}
    for e in events:
        counts[e.state] = counts.get(e.state, 0) + 1
    confidences = [e.confidence for e in events]

    average = round_score(mean(confidences)) if confidences else 50
    # Deviations are taken from the rounded average confidence
    spread = std_dev(confidences, center=average)
    return StateHistorySummary(
        total_changes=len(events),
        most_common_state=dominant_key(counts) or PsychState.NEUTRAL,
        average_confidence=average,
        volatility=round_half_up(spread / 100, 2),
    )


def analyze_state_history(
    trades: Sequence[Trade],
    limit: int,
    *,
    now: datetime | None = None,
) -> StateHistoryResult:
    """Build at most ``limit`` state-change events from ``trades``.

    ``trades`` may arrive in any order; they are sorted by entry time
    (stably) without modifying the caller's sequence.
    """
    if not trades:
        return StateHistoryResult()

    ordered = sorted(trades, key=lambda t: t.entry_time)
    events: list[StateEvent] = []
    last: StateEvent | None = None

    i = 0
    while i < len(ordered) and len(events) < limit:
        trade = ordered[i]
        window = ordered[max(0, i - (WINDOW_SIZE - 1)):i + 1]
        snapshot = analyze_psychological_state(window, now=now)

        if (
            last is None
            or last.state != snapshot.state
            or abs(last.confidence - snapshot.confidence) > CONFIDENCE_JUMP
        ):
            last = StateEvent(
                timestamp=trade.entry_time,
                state=snapshot.state,
                confidence=snapshot.confidence,
                trigger=state_trigger(trade),
                context=StateEventContext(
                    trade_id=trade.id,
                    profit_loss=trade.profit_loss,
                    risk_percent_used=trade.risk_percent_used,
                ),
            )
            events.append(last)
        i += 1

    events = events[:limit]
    logger.debug("Replayed %d trades into %d state events", len(ordered), len(events))
    return StateHistoryResult(history=events, summary=_summarize(events))
