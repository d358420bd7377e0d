"""Shared fixtures for the trade-psychology test suite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from trade_psychology.core.clock import SimClock
from trade_psychology.core.config import Settings
from trade_psychology.storage.memory import (
    InMemoryTradeRepository,
    InMemoryTradingPlanRepository,
)

NOW = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sim_clock() -> SimClock:
    """Clock frozen at 2024-03-31 12:00 UTC."""
    return SimClock(start=NOW)


@pytest.fixture
def trade_repo() -> InMemoryTradeRepository:
    return InMemoryTradeRepository()


@pytest.fixture
def plan_repo() -> InMemoryTradingPlanRepository:
    return InMemoryTradingPlanRepository()


@pytest.fixture
def settings() -> Settings:
    return Settings()
