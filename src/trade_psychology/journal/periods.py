"""Period label -> date window mapping.

``WEEK`` is seven days; ``MONTH``, ``QUARTER`` and ``YEAR`` step back
whole calendar months, clamping the day to the end of a shorter month
(31 March minus one month is 28/29 February).  Unknown labels fall back
to ``MONTH``.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta

from trade_psychology.core.enums import Period

DEFAULT_PERIOD = Period.MONTH

_MONTHS_BACK = {
    Period.MONTH: 1,
    Period.QUARTER: 3,
    Period.YEAR: 12,
}


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime


def parse_period(label: str | Period | None) -> Period:
    """Coerce a label to a :class:`Period`, defaulting to ``MONTH``."""
    if isinstance(label, Period):
        return label
    try:
        return Period(str(label).upper())
    except ValueError:
        return DEFAULT_PERIOD


def subtract_months(moment: datetime, months: int) -> datetime:
    """Step back whole calendar months, keeping the time of day."""
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def date_range(period: str | Period | None, now: datetime) -> DateRange:
    """Window ``[start, now]`` covered by ``period``."""
    p = parse_period(period)
    if p is Period.WEEK:
        return DateRange(start=now - timedelta(days=7), end=now)
    return DateRange(start=subtract_months(now, _MONTHS_BACK[p]), end=now)


def period_label(period: str | Period) -> str:
    """Label echoed back in results; enum members render as their value."""
    return period.value if isinstance(period, Period) else str(period)
