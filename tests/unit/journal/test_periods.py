"""Tests for the period label -> date window mapping."""

from datetime import datetime, timedelta, timezone

import pytest

from trade_psychology.core.enums import Period
from trade_psychology.journal.periods import (
    date_range,
    parse_period,
    period_label,
    subtract_months,
)


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestParsePeriod:
    @pytest.mark.parametrize("label,expected", [
        ("WEEK", Period.WEEK),
        ("week", Period.WEEK),
        ("QUARTER", Period.QUARTER),
        (Period.YEAR, Period.YEAR),
        ("FORTNIGHT", Period.MONTH),
        (None, Period.MONTH),
    ])
    def test_labels(self, label, expected):
        assert parse_period(label) is expected


class TestSubtractMonths:
    def test_across_year_boundary(self):
        assert subtract_months(_utc(2024, 1, 15, 8, 30), 1) == _utc(2023, 12, 15, 8, 30)

    def test_clamps_to_short_month(self):
        assert subtract_months(_utc(2024, 3, 31), 1) == _utc(2024, 2, 29)
        assert subtract_months(_utc(2023, 3, 31), 1) == _utc(2023, 2, 28)

    def test_twelve_months(self):
        assert subtract_months(_utc(2024, 2, 29), 12) == _utc(2023, 2, 28)


class TestDateRange:
    NOW = _utc(2024, 5, 31, 12)

    def test_week_is_seven_days(self):
        window = date_range("WEEK", self.NOW)
        assert window.start == self.NOW - timedelta(days=7)
        assert window.end == self.NOW

    def test_month(self):
        assert date_range("MONTH", self.NOW).start == _utc(2024, 4, 30, 12)

    def test_quarter(self):
        assert date_range(Period.QUARTER, self.NOW).start == _utc(2024, 2, 29, 12)

    def test_year(self):
        assert date_range("YEAR", self.NOW).start == _utc(2023, 5, 31, 12)

    def test_unknown_label_falls_back_to_month(self):
        assert date_range("DECADE", self.NOW) == date_range("MONTH", self.NOW)


def test_period_label_echoes_value():
    assert period_label(Period.WEEK) == "WEEK"
    assert period_label("week") == "week"
