"""Session forecaster.

Scores a trader's recent history in one session (LONDON / NY / ASIA)
into a directional forecast.  Three factors move a base probability:
historical win rate, average profitability and average risk per trade.
The final probability is clamped to [0, 100].
"""

from __future__ import annotations

import logging
from typing import Sequence

from trade_psychology.core.config import ForecastConfig
from trade_psychology.core.enums import FactorImpact, ForecastDirection
from trade_psychology.core.models import Trade

from .metrics import avg, win_rate
from .results import ForecastFactor, SessionForecastResult

logger = logging.getLogger(__name__)

WIN_RATE_FACTOR = "Historical win rate"
PROFITABILITY_FACTOR = "Average profitability"
RISK_FACTOR = "Risk management"

RECOMMENDATIONS: dict[ForecastDirection, list[str]] = {
    ForecastDirection.POSITIVE: [
        "Consider increasing position size",
        "Focus on high-probability setups",
    ],
    ForecastDirection.NEGATIVE: [
        "Reduce position sizes",
        "Be more selective with entries",
    ],
    ForecastDirection.NEUTRAL: [
        "Trade with normal position sizes",
        "Monitor market conditions closely",
    ],
}


def _impact(positive: bool) -> FactorImpact:
    return FactorImpact.POSITIVE if positive else FactorImpact.NEGATIVE


def analyze_session_forecast(
    trades: Sequence[Trade],
    session: str,
    *,
    config: ForecastConfig | None = None,
) -> SessionForecastResult:
    """Forecast the next ``session`` from trades already filtered to it.

    The caller is responsible for passing only that session's trades
    (normally the 20 most recent).  The session label is echoed back
    upper-cased.
    """
    cfg = config or ForecastConfig()
    label = str(getattr(session, "value", session)).upper()

    if not trades:
        return SessionForecastResult(
            session=label,
            forecast=ForecastDirection.NEUTRAL,
            probability=50,
            factors=[
                ForecastFactor(
                    factor="No historical data",
                    impact=FactorImpact.NEUTRAL,
                    weight=1.0,
                ),
            ],
            recommendations=["Start trading this session to build forecast data"],
        )

    rate = win_rate(trades)
    avg_profit = avg(trades, "profit_loss")
    avg_risk = avg(trades, "risk_percent_used")

    probability = cfg.base_probability
    factors: list[ForecastFactor] = []

    # Win rate: only the extremes count
    if rate >= cfg.positive_win_rate:
        factors.append(ForecastFactor(factor=WIN_RATE_FACTOR, impact=FactorImpact.POSITIVE, weight=0.4))
        probability += cfg.win_rate_shift
    elif rate <= cfg.negative_win_rate:
        factors.append(ForecastFactor(factor=WIN_RATE_FACTOR, impact=FactorImpact.NEGATIVE, weight=0.4))
        probability -= cfg.win_rate_shift

    profitable = avg_profit > 0
    factors.append(ForecastFactor(factor=PROFITABILITY_FACTOR, impact=_impact(profitable), weight=0.3))
    probability += cfg.profitability_shift if profitable else -cfg.profitability_shift

    disciplined = avg_risk <= cfg.max_avg_risk
    factors.append(ForecastFactor(factor=RISK_FACTOR, impact=_impact(disciplined), weight=0.3))
    probability += cfg.risk_shift if disciplined else -cfg.risk_shift

    if probability >= cfg.positive_threshold:
        forecast = ForecastDirection.POSITIVE
    elif probability <= cfg.negative_threshold:
        forecast = ForecastDirection.NEGATIVE
    else:
        forecast = ForecastDirection.NEUTRAL

    logger.debug(
        "Session %s forecast %s (raw probability %s from %d trades)",
        label, forecast.value, probability, len(trades),
    )
    return SessionForecastResult(
        session=label,
        forecast=forecast,
        probability=max(0, min(100, probability)),
        factors=factors,
        recommendations=list(RECOMMENDATIONS[forecast]),
    )
