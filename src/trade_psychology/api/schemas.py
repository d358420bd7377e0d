"""Request and response bodies specific to the HTTP layer."""

from __future__ import annotations

from pydantic import Field

from trade_psychology.core.models import CamelModel, Trade, TradeCreate


class BulkTradesRequest(CamelModel):
    trades: list[TradeCreate] = Field(min_length=1)


class BulkTradesResponse(CamelModel):
    trades: list[Trade]
    count: int


class ErrorBody(CamelModel):
    code: int
    message: str
