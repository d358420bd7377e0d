"""Custom exception hierarchy for the trading journal."""


class JournalError(Exception):
    """Base exception for all trading journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Storage ---
class StorageError(JournalError):
    """Persistence layer failure."""


class NotFoundError(StorageError):
    """A requested record does not exist for the requesting user."""

    resource = "Record"

    def __init__(self, identifier: str = "") -> None:
        self.identifier = identifier
        super().__init__(f"{self.resource} not found")


class TradeNotFoundError(NotFoundError):
    """Trade id unknown or owned by another user."""

    resource = "Trade"


class TradingPlanNotFoundError(NotFoundError):
    """User has no trading plan."""

    resource = "Trading plan"


# --- Requests ---
class InvalidQueryError(JournalError):
    """Malformed query parameter (unknown sort field, bad direction)."""
