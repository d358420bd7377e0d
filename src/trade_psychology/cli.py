"""CLI entry point for the trade psychology journal."""

from __future__ import annotations

import json
from pathlib import Path

import click

ANALYSIS_KINDS = ("state", "forecast", "insights", "history", "dashboard", "summary")


@click.group()
def main() -> None:
    """Trade psychology journal."""


@main.command()
@click.option("--config", default=None, help="Config file path (TOML)")
@click.option("--host", default=None, help="Bind address override")
@click.option("--port", default=None, type=int, help="Port override")
def serve(config: str | None, host: str | None, port: int | None) -> None:
    """Run the HTTP API."""
    import uvicorn

    from .api.app import create_app
    from .core.config import load_settings
    from .observability.logger import setup_logging

    settings = load_settings(config)
    setup_logging(settings.observability.log_level, settings.observability.log_format)

    uvicorn.run(
        create_app(settings),
        host=host or settings.api.host,
        port=port or settings.api.port,
        log_config=None,
    )


@main.command()
@click.argument("trades_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--kind", type=click.Choice(ANALYSIS_KINDS), default="state", show_default=True,
    help="Analysis to run",
)
@click.option("--session", default="LONDON", show_default=True, help="Session for --kind forecast")
@click.option("--period", default="MONTH", show_default=True, help="Period label echoed in results")
@click.option("--limit", default=None, type=int, help="History length for --kind history")
@click.option("--config", default=None, help="Config file path (TOML)")
def analyze(
    trades_file: Path,
    kind: str,
    session: str,
    period: str,
    limit: int | None,
    config: str | None,
) -> None:
    """Analyze a JSON list of trades and print the result as JSON.

    Every trade in the file counts as part of the period; no date
    window is applied.
    """
    from .core.config import load_settings
    from .core.enums import Session
    from .core.models import Trade
    from .journal import (
        analyze_psychological_state,
        analyze_session_forecast,
        analyze_state_history,
        build_dashboard,
        build_dashboard_summary,
        summarize_performance_insights,
    )

    settings = load_settings(config)
    cfg = settings.analysis

    try:
        raw = json.loads(trades_file.read_text())
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="TRADES_FILE") from exc
    if not isinstance(raw, list):
        raise click.BadParameter("expected a JSON list of trades", param_hint="TRADES_FILE")

    trades = [Trade.model_validate({"userId": "cli", **item}) for item in raw]
    newest_first = sorted(trades, key=lambda t: t.entry_time, reverse=True)
    recent = newest_first[: cfg.state_window]

    if kind == "state":
        result = analyze_psychological_state(recent)
    elif kind == "forecast":
        try:
            wanted = Session(session.upper())
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--session") from exc
        in_session = [t for t in newest_first if t.session == wanted]
        result = analyze_session_forecast(
            in_session[: cfg.forecast_window], wanted.value, config=cfg.forecast,
        )
    elif kind == "insights":
        result = summarize_performance_insights(newest_first, period)
    elif kind == "history":
        result = analyze_state_history(newest_first, limit or cfg.history_limit)
    elif kind == "dashboard":
        result = build_dashboard(newest_first, recent, period, recent_count=cfg.recent_trades)
    else:
        result = build_dashboard_summary(newest_first, recent, period)

    click.echo(json.dumps(result.to_json_dict(), indent=2))


if __name__ == "__main__":
    main()
