"""HTTP API: FastAPI application factory.

Routes (all under ``/v1`` and scoped to the ``X-User-Id`` owner):

  /trades                 create, bulk import, paginated query
  /trades/{trade_id}      read, update, delete
  /trading-plan           create-or-update, read, delete
  /analysis/*             state, forecast, insights, history
  /dashboard[/summary]    period dashboard and quick summary

Usage::

    from trade_psychology.api.app import create_app

    app = create_app(settings)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator

from fastapi import APIRouter, Depends, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from trade_psychology.core.clock import IClock, WallClock
from trade_psychology.core.config import Settings
from trade_psychology.core.enums import Session, StorageBackend
from trade_psychology.core.errors import InvalidQueryError, JournalError, NotFoundError
from trade_psychology.core.interfaces import ITradeRepository, ITradingPlanRepository
from trade_psychology.core.models import TradeCreate, TradeUpdate, TradingPlanFields, as_utc
from trade_psychology.observability.logger import new_trace_id, set_trace_id
from trade_psychology.services import (
    AnalysisService,
    DashboardService,
    TradeService,
    TradingPlanService,
)
from trade_psychology.storage.memory import InMemoryTradeRepository, InMemoryTradingPlanRepository

from .schemas import BulkTradesRequest, BulkTradesResponse, ErrorBody

logger = logging.getLogger(__name__)


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(
        ErrorBody(code=status, message=message).to_json_dict(), status_code=status,
    )


def _json(model: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(model.to_json_dict(), status_code=status_code)


def _validation_message(errors: list[dict[str, Any]]) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query"))
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts) or "Invalid request"


def _parse_session(value: str | None) -> Session | None:
    if value is None:
        return None
    try:
        return Session(value.upper())
    except ValueError:
        raise InvalidQueryError(f"session must be one of LONDON, NY, ASIA, got {value!r}") from None


async def current_user(x_user_id: str | None = Header(default=None)) -> str:
    """Owner of the request; every route is scoped to it."""
    if not x_user_id:
        raise StarletteHTTPException(status_code=401, detail="Please authenticate")
    return x_user_id


def _build_storage(
    settings: Settings,
) -> tuple[ITradeRepository, ITradingPlanRepository, Any]:
    """Repositories for the configured backend, plus the Database (or None)."""
    if settings.storage.backend == StorageBackend.POSTGRES:
        from trade_psychology.storage.postgres.connection import Database
        from trade_psychology.storage.postgres.repos import (
            SqlTradeRepository,
            SqlTradingPlanRepository,
        )

        db = Database(settings.storage.postgres_url, pool_size=settings.storage.pool_size)
        return SqlTradeRepository(db), SqlTradingPlanRepository(db), db
    return InMemoryTradeRepository(), InMemoryTradingPlanRepository(), None


def create_app(
    settings: Settings | None = None,
    trade_repo: ITradeRepository | None = None,
    plan_repo: ITradingPlanRepository | None = None,
    clock: IClock | None = None,
) -> FastAPI:
    """Create the journal API.

    Repositories not passed in are built from ``settings.storage``; the
    postgres backend connects on startup and disposes on shutdown.
    """
    settings = settings or Settings()
    clock = clock or WallClock()

    db = None
    if trade_repo is None or plan_repo is None:
        default_trades, default_plans, db = _build_storage(settings)
        trade_repo = trade_repo or default_trades
        plan_repo = plan_repo or default_plans

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if db is not None:
            db.connect()
            if settings.storage.create_tables:
                await db.create_all()
        yield
        if db is not None:
            await db.dispose()

    app = FastAPI(title=settings.api.title, lifespan=lifespan)

    trades = TradeService(trade_repo)
    plans = TradingPlanService(plan_repo)
    analysis = AnalysisService(trade_repo, settings.analysis, clock)
    dashboard = DashboardService(trade_repo, settings.analysis, clock)

    app.state.settings = settings
    app.state.trades = trades
    app.state.plans = plans
    app.state.analysis = analysis
    app.state.dashboard = dashboard

    @app.middleware("http")
    async def trace_requests(request: Request, call_next: Any) -> Response:
        incoming = request.headers.get("x-trace-id")
        if incoming:
            set_trace_id(incoming)
            trace_id = incoming
        else:
            trace_id = new_trace_id()
        response = await call_next(request)
        response.headers["X-Trace-Id"] = trace_id
        return response

    # ------------------------------------------------------------------
    # Trades
    # ------------------------------------------------------------------

    v1 = APIRouter(prefix="/v1")

    @v1.post("/trades", status_code=201)
    async def create_trade(body: TradeCreate, user_id: str = Depends(current_user)) -> JSONResponse:
        return _json(await trades.create_trade(user_id, body), status_code=201)

    @v1.post("/trades/bulk", status_code=201)
    async def create_bulk_trades(
        body: BulkTradesRequest, user_id: str = Depends(current_user),
    ) -> JSONResponse:
        created = await trades.create_bulk_trades(user_id, body.trades)
        return _json(BulkTradesResponse(trades=created, count=len(created)), status_code=201)

    @v1.get("/trades")
    async def list_trades(
        user_id: str = Depends(current_user),
        session: str | None = Query(default=None),
        stop_loss_hit: bool | None = Query(default=None, alias="stopLossHit"),
        exited_early: bool | None = Query(default=None, alias="exitedEarly"),
        entry_time: datetime | None = Query(default=None, alias="entryTime"),
        exit_time: datetime | None = Query(default=None, alias="exitTime"),
        sort_by: str | None = Query(default=None, alias="sortBy"),
        limit: int = Query(default=10, ge=1),
        page: int = Query(default=1, ge=1),
    ) -> JSONResponse:
        result = await trades.query_trades(
            user_id,
            session=_parse_session(session),
            stop_loss_hit=stop_loss_hit,
            exited_early=exited_early,
            entry_time=entry_time,
            exit_time=exit_time,
            sort_by=sort_by,
            limit=limit,
            page=page,
        )
        return _json(result)

    @v1.get("/trades/{trade_id}")
    async def get_trade(trade_id: str, user_id: str = Depends(current_user)) -> JSONResponse:
        return _json(await trades.get_trade(user_id, trade_id))

    @v1.api_route("/trades/{trade_id}", methods=["PATCH", "PUT"])
    async def update_trade(
        trade_id: str, body: TradeUpdate, user_id: str = Depends(current_user),
    ) -> JSONResponse:
        return _json(await trades.update_trade(user_id, trade_id, body))

    @v1.delete("/trades/{trade_id}", status_code=204)
    async def delete_trade(trade_id: str, user_id: str = Depends(current_user)) -> Response:
        await trades.delete_trade(user_id, trade_id)
        return Response(status_code=204)

    # ------------------------------------------------------------------
    # Trading plan
    # ------------------------------------------------------------------

    @v1.post("/trading-plan", status_code=201)
    async def save_trading_plan(
        body: TradingPlanFields, user_id: str = Depends(current_user),
    ) -> JSONResponse:
        return _json(await plans.create_or_update(user_id, body), status_code=201)

    @v1.get("/trading-plan")
    async def get_trading_plan(user_id: str = Depends(current_user)) -> JSONResponse:
        return _json(await plans.get(user_id))

    @v1.delete("/trading-plan", status_code=204)
    async def delete_trading_plan(user_id: str = Depends(current_user)) -> Response:
        await plans.delete(user_id)
        return Response(status_code=204)

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    @v1.get("/analysis/state")
    async def current_state(user_id: str = Depends(current_user)) -> JSONResponse:
        return _json(await analysis.get_current_state(user_id))

    @v1.get("/analysis/forecast")
    async def session_forecast(
        user_id: str = Depends(current_user),
        session: str = Query(default=Session.LONDON.value),
    ) -> JSONResponse:
        return _json(await analysis.get_session_forecast(user_id, _parse_session(session)))

    @v1.get("/analysis/insights")
    async def performance_insights(
        user_id: str = Depends(current_user),
        period: str = Query(default="MONTH"),
    ) -> JSONResponse:
        return _json(await analysis.get_performance_insights(user_id, period))

    @v1.get("/analysis/history")
    async def state_history(
        user_id: str = Depends(current_user),
        start_date: datetime | None = Query(default=None, alias="startDate"),
        end_date: datetime | None = Query(default=None, alias="endDate"),
        limit: int | None = Query(default=None, ge=1),
    ) -> JSONResponse:
        history = await analysis.get_state_history(
            user_id,
            start_date=as_utc(start_date) if start_date else None,
            end_date=as_utc(end_date) if end_date else None,
            limit=limit,
        )
        return _json(history)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    @v1.get("/dashboard")
    async def complete_dashboard(
        user_id: str = Depends(current_user),
        period: str = Query(default="MONTH"),
    ) -> JSONResponse:
        return _json(await dashboard.get_complete_dashboard(user_id, period))

    @v1.get("/dashboard/summary")
    async def dashboard_summary(
        user_id: str = Depends(current_user),
        period: str = Query(default="MONTH"),
    ) -> JSONResponse:
        return _json(await dashboard.get_dashboard_summary(user_id, period))

    app.include_router(v1)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    # ------------------------------------------------------------------
    # Error responses
    # ------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        return _error(400, _validation_message(list(exc.errors())))

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(400, _validation_message(list(exc.errors())))

    @app.exception_handler(InvalidQueryError)
    async def invalid_query_handler(request: Request, exc: InvalidQueryError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(404, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException,
    ) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(JournalError)
    async def journal_error_handler(request: Request, exc: JournalError) -> JSONResponse:
        logger.error("Journal error on %s: %s", request.url.path, exc)
        return _error(500, "Internal server error")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s", request.url.path)
        return _error(500, "Internal server error")

    return app
