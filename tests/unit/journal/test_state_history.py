"""Tests for the psychological state history replay."""

import random

from trade_psychology.core.enums import PsychState
from trade_psychology.journal.state_history import analyze_state_history, state_trigger

from tests.factories import make_trade


def _sequence():
    """Win, then three losses, an hour apart."""
    return [
        make_trade(100, minutes=0, trade_id="t0"),
        make_trade(-100, minutes=60, risk=1.5, trade_id="t1"),
        make_trade(-100, minutes=120, trade_id="t2"),
        make_trade(-100, minutes=180, risk=2.5, trade_id="t3"),
    ]


class TestEmpty:
    def test_fixed_empty_result(self):
        result = analyze_state_history([], 50)
        assert result.history == []
        assert result.summary.total_changes == 0
        assert result.summary.most_common_state == PsychState.NEUTRAL
        assert result.summary.average_confidence == 50
        assert result.summary.volatility == 0


class TestReplay:
    def test_records_only_changes(self):
        result = analyze_state_history(_sequence(), 50)
        # t0 alone: 100% -> CONFIDENT 95; +t1: 50% -> NEUTRAL;
        # +t2: 33% -> still NEUTRAL 50; +t3: 25% -> FRUSTRATED 35
        assert [(e.state, e.confidence) for e in result.history] == [
            (PsychState.CONFIDENT, 95),
            (PsychState.NEUTRAL, 50),
            (PsychState.FRUSTRATED, 35),
        ]
        assert [e.context.trade_id for e in result.history] == ["t0", "t1", "t3"]
        assert [e.trigger for e in result.history] == [
            "Profitable trade", "Losing trade", "Losing trade",
        ]

    def test_out_of_order_input_is_replayed_chronologically(self):
        trades = _sequence()
        shuffled = trades[:]
        random.Random(7).shuffle(shuffled)
        snapshot = shuffled[:]

        result = analyze_state_history(shuffled, 50)
        assert shuffled == snapshot
        assert result == analyze_state_history(trades, 50)

        by_id = {t.id: t for t in trades}
        for event in result.history:
            origin = by_id[event.context.trade_id]
            assert event.timestamp == origin.entry_time
            assert event.context.profit_loss == origin.profit_loss
            assert event.context.risk_percent_used == origin.risk_percent_used

    def test_limit_caps_events(self):
        result = analyze_state_history(_sequence(), 2)
        assert len(result.history) == 2
        assert result.summary.total_changes == 2

    def test_window_is_last_five_trades(self):
        # five losses then five wins: at the tenth trade the window is all wins
        trades = [make_trade(-50, minutes=i) for i in range(5)]
        trades += [make_trade(50, minutes=5 + i) for i in range(5)]
        result = analyze_state_history(trades, 50)
        assert result.history[-1].state == PsychState.CONFIDENT
        assert result.history[-1].confidence == 95

    def test_confidence_jump_without_state_change(self):
        # CONFIDENT at 75% (72.5 -> 73), 80% (77), then 100% (95): same state, jump of 18
        trades = [make_trade(100, minutes=i) for i in range(4)]
        trades.insert(0, make_trade(-100, minutes=-1))
        trades.append(make_trade(100, minutes=10))
        result = analyze_state_history(trades, 50)
        states = [e.state for e in result.history]
        assert states.count(PsychState.CONFIDENT) == 2


class TestSummary:
    def test_summary_statistics(self):
        summary = analyze_state_history(_sequence(), 50).summary
        assert summary.total_changes == 3
        # one event each: the first recorded state wins the tie
        assert summary.most_common_state == PsychState.CONFIDENT
        assert summary.average_confidence == 60
        # population sd of [95, 50, 35] around 60 is 25.5 -> /100 -> 0.25
        assert summary.volatility == 0.25


class TestStateTrigger:
    def test_trigger_precedence(self):
        assert state_trigger(make_trade(10)) == "Profitable trade"
        assert state_trigger(make_trade(-10, exited_early=True)) == "Losing trade"
        assert state_trigger(make_trade(0, exited_early=True, stop_loss_hit=True)) == "Early exit"
        assert state_trigger(make_trade(0, stop_loss_hit=True)) == "Stop loss hit"
        assert state_trigger(make_trade(0)) == "Trade execution"
