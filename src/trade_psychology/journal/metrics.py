"""Shared metric helpers over sequences of trades.

All helpers are pure.  Functions that average over trades require a
non-empty sequence; every analysis entry point checks for empty input
before calling them.

Rounding follows the half-up convention used across the journal
(``2.5 -> 3``), not Python's round-half-to-even.
"""

from __future__ import annotations

import math
from typing import Sequence

from trade_psychology.core.models import Trade


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round half away from negative infinity (``floor(x * 10**n + 0.5)``).

    Values too large to scale (and non-finite values) come back unchanged.
    """
    factor = 10 ** ndigits
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / factor


def round_score(value: float) -> int:
    """Round a 0-100 score to the nearest integer, half up."""
    return int(round_half_up(value))


def round_money(value: float) -> float:
    """Round a P&L or ratio to 2 decimal places, half up."""
    return round_half_up(value, 2)


def win_rate(trades: Sequence[Trade]) -> float:
    """Percentage of trades with positive P&L.  0 for no trades."""
    if not trades:
        return 0.0
    winners = sum(1 for t in trades if t.profit_loss > 0)
    return (winners / len(trades)) * 100


def win_fraction(trades: Sequence[Trade]) -> float:
    """Fraction [0, 1] of trades with positive P&L.  0 for no trades."""
    if not trades:
        return 0.0
    return sum(1 for t in trades if t.profit_loss > 0) / len(trades)


def avg(trades: Sequence[Trade], field: str) -> float:
    """Arithmetic mean of a numeric trade attribute."""
    return sum(getattr(t, field) for t in trades) / len(trades)


def fraction(trades: Sequence[Trade], flag: str) -> float:
    """Fraction of trades where a boolean attribute is set."""
    return sum(1 for t in trades if getattr(t, flag)) / len(trades)


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def std_dev(values: Sequence[float], center: float | None = None) -> float:
    """Population standard deviation (divides by N).

    ``center`` overrides the mean the deviations are taken from.
    """
    if not values:
        return 0.0
    mu = mean(values) if center is None else center
    variance = sum((v - mu) * (v - mu) for v in values) / len(values)
    return math.sqrt(variance)


def max_drawdown(trades: Sequence[Trade]) -> float:
    """Largest peak-to-trough fall in cumulative P&L.

    Trades are taken in the order given.  The peak starts at zero, so a
    losing first trade already counts as drawdown.
    """
    peak = 0.0
    running = 0.0
    worst = 0.0
    for t in trades:
        running += t.profit_loss
        if running > peak:
            peak = running
        drawdown = peak - running
        if drawdown > worst:
            worst = drawdown
    return worst


def sharpe_ratio_simplified(trades: Sequence[Trade]) -> float:
    """Mean P&L over its population std dev.  0 when the std dev is 0."""
    if not trades:
        return 0.0
    returns = [t.profit_loss for t in trades]
    sd = std_dev(returns)
    if sd <= 0:
        return 0.0
    return mean(returns) / sd
