"""Core domain models for the trading journal.

``Trade`` is the atomic input of every analysis: it is frozen, so the
analytics layer can never mutate what the storage layer handed it.
Wire names are camelCase (``riskPercentUsed``); Python attributes are
snake_case and either spelling is accepted on input.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .enums import Session, StopLossDiscipline


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class CamelModel(BaseModel):
    """Base model serialised with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to JSON-compatible primitives using the wire names."""
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Trade
# ---------------------------------------------------------------------------

class TradeFields(CamelModel):
    """User-supplied trade attributes, shared by create and stored forms."""

    model_config = ConfigDict(allow_inf_nan=False)

    entry_time: datetime
    exit_time: datetime
    risk_percent_used: float = Field(ge=0)
    profit_loss: float
    risk_reward_achieved: float = Field(ge=0)
    session: Session
    stop_loss_hit: bool
    exited_early: bool
    target_percent_achieved: float = Field(ge=0)
    notes: str | None = None

    @field_validator("entry_time", "exit_time")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class TradeCreate(TradeFields):
    """Request body for a new trade."""


class TradeUpdate(CamelModel):
    """Partial update; at least one field must be present."""

    model_config = ConfigDict(allow_inf_nan=False)

    entry_time: datetime | None = None
    exit_time: datetime | None = None
    risk_percent_used: float | None = Field(default=None, ge=0)
    profit_loss: float | None = None
    risk_reward_achieved: float | None = Field(default=None, ge=0)
    session: Session | None = None
    stop_loss_hit: bool | None = None
    exited_early: bool | None = None
    target_percent_achieved: float | None = Field(default=None, ge=0)
    notes: str | None = None

    @field_validator("entry_time", "exit_time")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    @model_validator(mode="after")
    def _require_one_field(self) -> "TradeUpdate":
        if not self.model_fields_set:
            raise ValueError("at least one field must be updated")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields explicitly set on the request, by attribute name."""
        return self.model_dump(include=self.model_fields_set)


class Trade(TradeFields):
    """A stored trade record owned by one user."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True,
    )

    id: str = Field(default_factory=_new_id)
    user_id: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_create(cls, user_id: str, body: TradeCreate) -> "Trade":
        return cls(user_id=user_id, **body.model_dump())

    def with_changes(self, changes: dict[str, Any]) -> "Trade":
        """Return a re-validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        data["updated_at"] = _utcnow()
        return Trade.model_validate(data)


# ---------------------------------------------------------------------------
# Trading plan
# ---------------------------------------------------------------------------

class TradingPlanFields(CamelModel):
    model_config = ConfigDict(allow_inf_nan=False)

    max_trades_per_day: int = Field(ge=0)
    risk_percent_per_trade: float = Field(ge=0)
    target_risk_reward_ratio: float = Field(ge=0)
    preferred_sessions: list[Session] = Field(default_factory=list)
    stop_loss_discipline: StopLossDiscipline


class TradingPlan(TradingPlanFields):
    """The single trading plan a user keeps."""

    id: str = Field(default_factory=_new_id)
    user_id: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
