"""Performance insight generator.

Turns a period's trades into categorised insights (strengths,
weaknesses, opportunities), behavioural patterns and recommendations.

Two entry points with different empty-period shapes:

* :func:`analyze_performance_insights` always returns a full result; for
  no trades it carries one OPPORTUNITY insight explaining why.
* :func:`summarize_performance_insights` is what the insights endpoint
  serves; for no trades it returns an :class:`InsightsDigest` with an
  empty insight list and a ``summary`` sentence.
"""

from __future__ import annotations

import logging
from typing import Sequence

from trade_psychology.core.enums import ImpactLevel, InsightType, Session
from trade_psychology.core.models import Trade

from .metrics import avg, fraction, round_score, win_rate
from .periods import period_label
from .results import Insight, InsightsDigest, Pattern, PerformanceInsightsResult

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No trading data available for analysis"


def session_counts(trades: Sequence[Trade]) -> dict[Session, int]:
    """Trade count per session, keyed in order of first appearance."""
    counts: dict[Session, int] = {}
    for t in trades:
        counts[t.session] = counts.get(t.session, 0) + 1
    return counts


def dominant_key(counts: dict):
    """Key with the strictly highest count; the earliest key wins ties."""
    best = None
    for key, count in counts.items():
        if best is None or count > counts[best]:
            best = key
    return best


def analyze_performance_insights(
    trades: Sequence[Trade],
    period: str,
) -> PerformanceInsightsResult:
    """Generate insights, patterns and recommendations for a period."""
    label = period_label(period)

    if not trades:
        return PerformanceInsightsResult(
            period=label,
            insights=[
                Insight(
                    type=InsightType.OPPORTUNITY,
                    description=NO_DATA_MESSAGE,
                    confidence=100,
                    impact=ImpactLevel.LOW,
                ),
            ],
            patterns=[],
            recommendations=["Start trading to generate performance insights"],
        )

    insights: list[Insight] = []
    patterns: list[Pattern] = []
    recommendations: list[str] = []

    rate = win_rate(trades)
    avg_risk = avg(trades, "risk_percent_used")
    avg_rr = avg(trades, "risk_reward_achieved")

    # Win rate
    if rate >= 70:
        insights.append(Insight(
            type=InsightType.STRENGTH,
            description="Excellent win rate indicates strong market analysis skills",
            confidence=round_score(rate),
            impact=ImpactLevel.HIGH,
        ))
    elif rate <= 30:
        insights.append(Insight(
            type=InsightType.WEAKNESS,
            description="Low win rate suggests need for better entry strategies",
            confidence=round_score(100 - rate),
            impact=ImpactLevel.HIGH,
        ))
        recommendations.append("Review entry criteria and market analysis")

    # Risk per trade
    if avg_risk <= 2:
        insights.append(Insight(
            type=InsightType.STRENGTH,
            description="Consistent risk management shows good discipline",
            confidence=85,
            impact=ImpactLevel.HIGH,
        ))
    elif avg_risk > 3:
        insights.append(Insight(
            type=InsightType.WEAKNESS,
            description="High risk per trade may lead to account blowouts",
            confidence=80,
            impact=ImpactLevel.HIGH,
        ))
        recommendations.append("Reduce risk per trade to protect capital")

    # Risk-reward
    if avg_rr >= 1.5:
        insights.append(Insight(
            type=InsightType.STRENGTH,
            description="Good risk-reward ratios maximize profit potential",
            confidence=75,
            impact=ImpactLevel.MEDIUM,
        ))
    elif avg_rr < 1:
        insights.append(Insight(
            type=InsightType.WEAKNESS,
            description="Poor risk-reward ratios limit profit potential",
            confidence=70,
            impact=ImpactLevel.MEDIUM,
        ))
        recommendations.append("Focus on trades with better risk-reward ratios")

    # Behavioural patterns
    early_exits = fraction(trades, "exited_early")
    if early_exits > 0.3:
        patterns.append(Pattern(
            pattern="Early exit on profitable trades",
            frequency=round_score(early_exits * 100),
            correlation=-0.3,
        ))
        recommendations.append("Practice holding winners longer")

    stop_hits = fraction(trades, "stop_loss_hit")
    if stop_hits > 0.4:
        patterns.append(Pattern(
            pattern="Frequent stop loss hits",
            frequency=round_score(stop_hits * 100),
            correlation=-0.5,
        ))
        recommendations.append("Improve entry timing and market analysis")

    # Session concentration
    counts = session_counts(trades)
    best_session = dominant_key(counts)
    if counts[best_session] / len(trades) > 0.5:
        insights.append(Insight(
            type=InsightType.OPPORTUNITY,
            description=f"Strong performance in {best_session.value} session",
            confidence=70,
            impact=ImpactLevel.MEDIUM,
        ))

    if not recommendations:
        recommendations.append("Continue current trading approach")
        recommendations.append("Monitor performance metrics regularly")

    logger.debug(
        "Generated %d insights and %d patterns for %s from %d trades",
        len(insights), len(patterns), label, len(trades),
    )
    return PerformanceInsightsResult(
        period=label,
        insights=insights,
        patterns=patterns,
        recommendations=recommendations,
    )


def summarize_performance_insights(
    trades: Sequence[Trade],
    period: str,
) -> PerformanceInsightsResult | InsightsDigest:
    """Insights as served to the dashboard: empty periods get a digest."""
    if not trades:
        return InsightsDigest(
            period=period_label(period), insights=[], summary=NO_DATA_MESSAGE,
        )
    return analyze_performance_insights(trades, period)
