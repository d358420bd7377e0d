"""Enumerations used across the trading journal."""

from enum import Enum


class Session(str, Enum):
    LONDON = "LONDON"
    NY = "NY"
    ASIA = "ASIA"


class StopLossDiscipline(str, Enum):
    ALWAYS = "ALWAYS"
    FLEXIBLE = "FLEXIBLE"


class PsychState(str, Enum):
    """Heuristic psychological label derived from recent trades."""

    NEUTRAL = "NEUTRAL"
    CONFIDENT = "CONFIDENT"
    FRUSTRATED = "FRUSTRATED"
    GREEDY = "GREEDY"
    FEARFUL = "FEARFUL"


class ForecastDirection(str, Enum):
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"


class FactorImpact(str, Enum):
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"


class InsightType(str, Enum):
    STRENGTH = "STRENGTH"
    WEAKNESS = "WEAKNESS"
    OPPORTUNITY = "OPPORTUNITY"
    THREAT = "THREAT"


class ImpactLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class AlertType(str, Enum):
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    INFO = "INFO"
    ERROR = "ERROR"


class AlertPriority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class TrendDirection(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    STABLE = "STABLE"


class Period(str, Enum):
    """Look-back window for period-based analysis."""

    WEEK = "WEEK"
    MONTH = "MONTH"
    QUARTER = "QUARTER"
    YEAR = "YEAR"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    POSTGRES = "postgres"
