"""Property tests: score bounds, clamping and determinism of the analytics core.

Uses hypothesis to generate arbitrary trade histories and checks the
invariants every entry point must keep regardless of input.
"""

from datetime import datetime, timedelta, timezone

from hypothesis import given, settings, strategies as st

from trade_psychology.core.config import ForecastConfig
from trade_psychology.core.enums import Session
from trade_psychology.core.models import Trade
from trade_psychology.journal import (
    analyze_performance_insights,
    analyze_psychological_state,
    analyze_session_forecast,
    analyze_state_history,
    build_dashboard,
    build_dashboard_summary,
)
from trade_psychology.journal.metrics import max_drawdown

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)
STAMP = datetime(2024, 6, 1, tzinfo=timezone.utc)

money = st.one_of(
    st.floats(min_value=-10_000, max_value=10_000, allow_nan=False, allow_infinity=False),
    st.floats(allow_nan=False, allow_infinity=False),
)
percent = st.floats(min_value=0, max_value=10, allow_nan=False, allow_infinity=False)


@st.composite
def trades(draw, min_size=0, max_size=30):
    n = draw(st.integers(min_value=min_size, max_value=max_size))
    out = []
    for i in range(n):
        entry = BASE + timedelta(minutes=draw(st.integers(min_value=0, max_value=100_000)))
        out.append(Trade(
            id=f"t{i}",
            user_id="prop",
            entry_time=entry,
            exit_time=entry + timedelta(minutes=5),
            risk_percent_used=draw(percent),
            profit_loss=draw(money),
            risk_reward_achieved=draw(percent),
            session=draw(st.sampled_from(list(Session))),
            stop_loss_hit=draw(st.booleans()),
            exited_early=draw(st.booleans()),
            target_percent_achieved=draw(st.floats(min_value=0, max_value=200)),
        ))
    return out


@given(history=trades())
@settings(max_examples=100)
def test_state_scores_are_bounded_ints(history):
    result = analyze_psychological_state(history, now=STAMP)
    for score in (result.confidence, result.risk_tolerance, result.emotional_balance):
        assert isinstance(score, int)
        assert 0 <= score <= 100
    assert result.recommendations


@given(history=trades())
@settings(max_examples=100)
def test_state_is_deterministic(history):
    assert analyze_psychological_state(history, now=STAMP) == analyze_psychological_state(
        list(history), now=STAMP,
    )


@given(
    history=trades(),
    shift=st.integers(min_value=0, max_value=200),
)
@settings(max_examples=100)
def test_forecast_probability_always_clamped(history, shift):
    config = ForecastConfig(win_rate_shift=shift, profitability_shift=shift, risk_shift=shift)
    result = analyze_session_forecast(history, "london", config=config)
    assert 0 <= result.probability <= 100
    assert result.session == "LONDON"


@given(history=trades())
@settings(max_examples=50)
def test_insight_scores_bounded(history):
    result = analyze_performance_insights(history, "MONTH")
    assert result.insights
    assert all(0 <= i.confidence <= 100 for i in result.insights)
    assert all(0 <= p.frequency <= 100 for p in result.patterns)
    assert result.recommendations


@given(history=trades(), limit=st.integers(min_value=1, max_value=40))
@settings(max_examples=50)
def test_state_history_respects_limit_and_order(history, limit):
    result = analyze_state_history(history, limit, now=STAMP)
    assert len(result.history) <= limit
    assert result.summary.total_changes == len(result.history)
    stamps = [e.timestamp for e in result.history]
    assert stamps == sorted(stamps)
    if history:
        assert result.history
    assert result.summary.volatility >= 0


@given(history=trades())
@settings(max_examples=50)
def test_drawdown_non_negative(history):
    assert max_drawdown(history) >= 0


@given(history=trades())
@settings(max_examples=50)
def test_summary_counts_consistent(history):
    result = build_dashboard_summary(history, history[:10], "MONTH", now=STAMP)
    assert result.quick_stats.total_trades == len(history)
    assert 0 <= result.quick_stats.win_rate <= 100


@given(history=trades())
@settings(max_examples=50)
def test_dashboard_is_total_over_finite_values(history):
    result = build_dashboard(history, history[:10], "MONTH", now=STAMP)
    assert result.summary.total_trades == len(history)
    assert len(result.recent_trades) == min(len(history), 10)
