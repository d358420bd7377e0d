"""Trade journal analytics: pure, synchronous, I/O free.

Every entry point takes an already-fetched sequence of trades and
returns a result model; none of them persists or mutates anything.

Key components
--------------
analyze_psychological_state     Heuristic state label + 0-100 scores
analyze_session_forecast        Directional forecast for one session
analyze_performance_insights    Strengths, weaknesses, patterns for a period
summarize_performance_insights  Same, with the empty-period digest shape
analyze_state_history           State-change events over a trade replay
build_dashboard                 Full dashboard payload
build_dashboard_summary         Quick stats, trends and alerts
date_range                      Period label -> date window
"""

from .dashboard import (
    build_dashboard,
    build_dashboard_summary,
    calculate_daily_pnl,
    calculate_risk_metrics,
    calculate_session_performance,
    calculate_summary_stats,
    calculate_trends,
    generate_alerts,
)
from .forecast import analyze_session_forecast
from .insights import analyze_performance_insights, summarize_performance_insights
from .periods import DateRange, date_range, parse_period
from .psychology import analyze_psychological_state
from .state_history import analyze_state_history, state_trigger

__all__ = [
    "analyze_psychological_state",
    "analyze_session_forecast",
    "analyze_performance_insights",
    "summarize_performance_insights",
    "analyze_state_history",
    "state_trigger",
    "build_dashboard",
    "build_dashboard_summary",
    "calculate_summary_stats",
    "calculate_daily_pnl",
    "calculate_session_performance",
    "calculate_risk_metrics",
    "calculate_trends",
    "generate_alerts",
    "DateRange",
    "date_range",
    "parse_period",
]
