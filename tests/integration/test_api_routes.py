"""HTTP API tests: status codes, response shapes and error mapping.

Uses create_app() over in-memory repositories and a frozen clock
(2024-03-31 12:00 UTC); factory trades are dated 2024-03-15.
"""

from __future__ import annotations

import json

import pytest
from starlette.testclient import TestClient

from trade_psychology.api.app import create_app
from trade_psychology.core.clock import SimClock
from trade_psychology.core.config import Settings

from tests.conftest import NOW
from tests.factories import trade_payload

USER = {"X-User-Id": "user-1"}
OTHER = {"X-User-Id": "user-2"}

PLAN = {
    "maxTradesPerDay": 3,
    "riskPercentPerTrade": 1.0,
    "targetRiskRewardRatio": 2.0,
    "preferredSessions": ["LONDON", "NY"],
    "stopLossDiscipline": "ALWAYS",
}


@pytest.fixture
def client():
    app = create_app(Settings(), clock=SimClock(start=NOW))
    with TestClient(app) as c:
        yield c


def _post_many(client, bodies, headers=USER):
    resp = client.post("/v1/trades/bulk", json={"trades": bodies}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["trades"]


# ------------------------------------------------------------------
# Health / auth
# ------------------------------------------------------------------


class TestHealthAndAuth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_missing_user_header_is_401(self, client):
        resp = client.get("/v1/trades")
        assert resp.status_code == 401
        assert resp.json() == {"code": 401, "message": "Please authenticate"}

    def test_trace_id_header(self, client):
        resp = client.get("/health", headers={"X-Trace-Id": "trace-123"})
        assert resp.headers["X-Trace-Id"] == "trace-123"


# ------------------------------------------------------------------
# Trades
# ------------------------------------------------------------------


class TestTradeRoutes:
    def test_create_returns_camel_case(self, client):
        resp = client.post("/v1/trades", json=trade_payload(), headers=USER)
        assert resp.status_code == 201
        body = resp.json()
        assert body["userId"] == "user-1"
        assert body["riskPercentUsed"] == 2.0
        assert body["session"] == "LONDON"
        assert "id" in body and "createdAt" in body

    def test_create_validation_error_is_400(self, client):
        resp = client.post("/v1/trades", json=trade_payload(riskPercentUsed=-1), headers=USER)
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 400
        assert "riskPercentUsed" in body["message"]

    def test_invalid_session_is_400(self, client):
        resp = client.post("/v1/trades", json=trade_payload(session="TOKYO"), headers=USER)
        assert resp.status_code == 400

    def test_bulk(self, client):
        resp = client.post(
            "/v1/trades/bulk",
            json={"trades": [trade_payload(), trade_payload(profitLoss=-10)]},
            headers=USER,
        )
        assert resp.status_code == 201
        assert resp.json()["count"] == 2
        assert len(resp.json()["trades"]) == 2

    def test_bulk_requires_at_least_one(self, client):
        resp = client.post("/v1/trades/bulk", json={"trades": []}, headers=USER)
        assert resp.status_code == 400

    def test_list_paginates_and_filters(self, client):
        _post_many(client, [
            trade_payload(profitLoss=p, session="NY" if p > 20 else "ASIA") for p in (10, 20, 30, 40, 50)
        ])
        resp = client.get("/v1/trades?limit=2&page=2&sortBy=profitLoss:desc", headers=USER)
        assert resp.status_code == 200
        body = resp.json()
        assert [t["profitLoss"] for t in body["results"]] == [30, 20]
        assert (body["page"], body["limit"], body["totalPages"], body["totalResults"]) == (2, 2, 3, 5)

        ny = client.get("/v1/trades?session=ny", headers=USER).json()
        assert ny["totalResults"] == 3

    def test_list_is_scoped_to_user(self, client):
        _post_many(client, [trade_payload()])
        assert client.get("/v1/trades", headers=OTHER).json()["totalResults"] == 0

    def test_bad_sort_is_400(self, client):
        resp = client.get("/v1/trades?sortBy=notes:asc", headers=USER)
        assert resp.status_code == 400

    def test_get_update_delete(self, client):
        trade_id = client.post("/v1/trades", json=trade_payload(), headers=USER).json()["id"]

        assert client.get(f"/v1/trades/{trade_id}", headers=USER).status_code == 200
        assert client.get(f"/v1/trades/{trade_id}", headers=OTHER).status_code == 404

        resp = client.patch(f"/v1/trades/{trade_id}", json={"profitLoss": 200.0}, headers=USER)
        assert resp.status_code == 200
        assert resp.json()["profitLoss"] == 200.0
        assert resp.json()["notes"] == "Good trade setup"

        put = client.put(f"/v1/trades/{trade_id}", json={"notes": "edited"}, headers=USER)
        assert put.json()["notes"] == "edited"

        assert client.delete(f"/v1/trades/{trade_id}", headers=USER).status_code == 204
        missing = client.get(f"/v1/trades/{trade_id}", headers=USER)
        assert missing.status_code == 404
        assert missing.json() == {"code": 404, "message": "Trade not found"}

    def test_empty_update_is_400(self, client):
        trade_id = client.post("/v1/trades", json=trade_payload(), headers=USER).json()["id"]
        assert client.patch(f"/v1/trades/{trade_id}", json={}, headers=USER).status_code == 400

    def test_delete_missing_is_404(self, client):
        assert client.delete("/v1/trades/nope", headers=USER).status_code == 404

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_number_is_400_and_not_stored(self, client, literal):
        raw = json.dumps(trade_payload(profitLoss=0.0)).replace('"profitLoss": 0.0', f'"profitLoss": {literal}')
        headers = {**USER, "Content-Type": "application/json"}

        resp = client.post("/v1/trades", content=raw, headers=headers)
        assert resp.status_code == 400
        assert "profitLoss" in resp.json()["message"]

        bulk = client.post("/v1/trades/bulk", content=f'{{"trades": [{raw}]}}', headers=headers)
        assert bulk.status_code == 400

        assert client.get("/v1/trades", headers=USER).json()["totalResults"] == 0
        assert client.get("/v1/dashboard/summary?period=YEAR", headers=USER).status_code == 200

    def test_non_finite_update_is_400(self, client):
        trade_id = client.post("/v1/trades", json=trade_payload(), headers=USER).json()["id"]
        resp = client.patch(
            f"/v1/trades/{trade_id}",
            content='{"riskRewardAchieved": NaN}',
            headers={**USER, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert client.get(f"/v1/trades/{trade_id}", headers=USER).json()["riskRewardAchieved"] == 1.5

    def test_list_filters_on_entry_and_exit_time(self, client):
        _post_many(client, [
            trade_payload(),
            trade_payload(entryTime="2024-03-16T09:00:00Z", exitTime="2024-03-16T11:00:00Z"),
        ])
        by_entry = client.get("/v1/trades", params={"entryTime": "2024-03-16T09:00:00Z"}, headers=USER)
        assert by_entry.status_code == 200
        assert by_entry.json()["totalResults"] == 1
        assert by_entry.json()["results"][0]["exitTime"].startswith("2024-03-16T11:00:00")

        by_exit = client.get("/v1/trades", params={"exitTime": "2024-03-15T10:30:00Z"}, headers=USER)
        assert by_exit.json()["totalResults"] == 1

        bad = client.get("/v1/trades", params={"entryTime": "yesterday"}, headers=USER)
        assert bad.status_code == 400


# ------------------------------------------------------------------
# Trading plan
# ------------------------------------------------------------------


class TestTradingPlanRoutes:
    def test_plan_lifecycle(self, client):
        assert client.get("/v1/trading-plan", headers=USER).status_code == 404

        created = client.post("/v1/trading-plan", json=PLAN, headers=USER)
        assert created.status_code == 201
        assert created.json()["preferredSessions"] == ["LONDON", "NY"]

        updated = client.post("/v1/trading-plan", json={**PLAN, "maxTradesPerDay": 5}, headers=USER)
        assert updated.json()["id"] == created.json()["id"]

        fetched = client.get("/v1/trading-plan", headers=USER).json()
        assert fetched["maxTradesPerDay"] == 5

        assert client.delete("/v1/trading-plan", headers=USER).status_code == 204
        resp = client.delete("/v1/trading-plan", headers=USER)
        assert resp.status_code == 404
        assert resp.json()["message"] == "Trading plan not found"

    def test_invalid_discipline_is_400(self, client):
        resp = client.post("/v1/trading-plan", json={**PLAN, "stopLossDiscipline": "SOMETIMES"}, headers=USER)
        assert resp.status_code == 400


# ------------------------------------------------------------------
# Analysis
# ------------------------------------------------------------------


class TestAnalysisRoutes:
    def test_state(self, client):
        _post_many(client, [trade_payload(profitLoss=100, riskPercentUsed=5.0)] * 3)
        body = client.get("/v1/analysis/state", headers=USER).json()
        assert body["state"] == "GREEDY"
        assert set(body) == {
            "state", "confidence", "riskTolerance", "emotionalBalance", "lastUpdated", "recommendations",
        }

    def test_forecast(self, client):
        bodies = [trade_payload(session="NY", profitLoss=100)] * 8
        bodies += [trade_payload(session="NY", profitLoss=-50)] * 2
        _post_many(client, bodies)
        body = client.get("/v1/analysis/forecast?session=ny", headers=USER).json()
        assert body["session"] == "NY"
        assert body["probability"] == 95
        assert body["forecast"] == "POSITIVE"

    def test_forecast_unknown_session_is_400(self, client):
        assert client.get("/v1/analysis/forecast?session=MARS", headers=USER).status_code == 400

    def test_insights_empty_period(self, client):
        body = client.get("/v1/analysis/insights?period=MONTH", headers=USER).json()
        assert body == {
            "period": "MONTH",
            "insights": [],
            "summary": "No trading data available for analysis",
        }

    def test_insights_with_trades(self, client):
        _post_many(client, [trade_payload()] * 3)
        body = client.get("/v1/analysis/insights", headers=USER).json()
        assert body["period"] == "MONTH"
        assert set(body) == {"period", "insights", "patterns", "recommendations"}

    def test_history(self, client):
        _post_many(client, [
            trade_payload(entryTime="2024-03-15T09:00:00Z", profitLoss=100),
            trade_payload(entryTime="2024-03-14T09:00:00Z", profitLoss=-100),
        ])
        body = client.get("/v1/analysis/history?limit=10", headers=USER).json()
        assert [e["state"] for e in body["history"]] == ["FRUSTRATED", "NEUTRAL"]
        assert body["summary"]["totalChanges"] == 2
        assert set(body["history"][0]["context"]) == {"tradeId", "profitLoss", "riskPercentUsed"}

    def test_history_date_filter(self, client):
        _post_many(client, [
            trade_payload(entryTime="2024-03-15T09:00:00Z"),
            trade_payload(entryTime="2024-01-15T09:00:00Z"),
        ])
        body = client.get("/v1/analysis/history?startDate=2024-03-01T00:00:00", headers=USER).json()
        assert body["summary"]["totalChanges"] == 1


# ------------------------------------------------------------------
# Dashboard
# ------------------------------------------------------------------


class TestDashboardRoutes:
    def test_dashboard(self, client):
        _post_many(client, [trade_payload(), trade_payload(profitLoss=-40, session="ASIA")])
        body = client.get("/v1/dashboard?period=MONTH", headers=USER).json()
        assert body["period"] == "MONTH"
        assert body["summary"]["totalTrades"] == 2
        assert body["performance"]["dailyPnL"] == [{"date": "2024-03-15", "profitLoss": 110.0}]
        assert len(body["recentTrades"]) == 2

    def test_dashboard_week_excludes_older_trades(self, client):
        _post_many(client, [trade_payload()])
        body = client.get("/v1/dashboard?period=WEEK", headers=USER).json()
        assert body["summary"]["totalTrades"] == 0
        # the state window ignores the period
        assert body["psychologicalState"]["state"] == "CONFIDENT"

    def test_summary(self, client):
        _post_many(client, [trade_payload()] * 4)
        body = client.get("/v1/dashboard/summary", headers=USER).json()
        assert body["quickStats"]["totalTrades"] == 4
        assert body["quickStats"]["totalPnL"] == 600.0
        assert body["alerts"] == [
            {"type": "SUCCESS", "message": "Excellent win rate achieved", "priority": "MEDIUM"},
        ]
