from __future__ import annotations

import time
from dataclasses import dataclass
from typing import NoReturn, Optional

import typer

from cli.client import ApiClient, ApiError
from cli.config import CLIConfig, load_config
from cli.dashboard import DashboardRefresher, DashboardState
from cli.render import (
    echo_key_values,
    render_dashboard,
    render_history,
    render_readings,
    render_status,
)
from logging_config import configure_logging


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Terminal view of the canal ice-safety dashboard.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _fail(exc: ApiError) -> NoReturn:
    typer.secho(str(exc), fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Dashboard API base URL (defaults to API_BASE_URL env or http://localhost:3000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Per-request timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging()
    config = load_config(base_url=base_url, request_timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Show the latest reading for every location."""
    state = _get_state(ctx)
    try:
        readings = state.client.get_latest()
    except ApiError as exc:
        _fail(exc)
    render_readings(readings)


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show the overall canal status and each location's latest classification."""
    state = _get_state(ctx)
    try:
        payload = state.client.get_status()
    except ApiError as exc:
        _fail(exc)
    render_status(payload)


@app.command("history")
def history_command(
    ctx: typer.Context,
    location: str = typer.Argument(..., help="Location name, e.g. \"Dow's Lake\"."),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Number of readings to fetch (defaults to CLI_HISTORY_LIMIT or 12).",
    ),
) -> None:
    """Show recent readings for one location, oldest first."""
    state = _get_state(ctx)
    count = limit if limit is not None else state.config.history_limit
    try:
        readings = state.client.get_history(location, count)
    except ApiError as exc:
        _fail(exc)
    render_history(location, readings)


@app.command("all")
def all_command(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Cap on returned readings."),
) -> None:
    """Dump every stored reading, newest first."""
    state = _get_state(ctx)
    try:
        payload = state.client.get_all(limit)
    except ApiError as exc:
        _fail(exc)
    typer.echo(f"count: {payload.get('count')}")
    render_readings(payload.get("data") or [])


@app.command("health")
def health_command(ctx: typer.Context) -> None:
    """Show service health and store configuration flags."""
    state = _get_state(ctx)
    try:
        payload = state.client.get_health()
    except ApiError as exc:
        _fail(exc)
    store = payload.get("store") or {}
    echo_key_values(
        [
            ("status", payload.get("status")),
            ("timestamp", payload.get("timestamp")),
            *((f"store.{key}", value) for key, value in store.items()),
        ]
    )


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Seconds between refreshes (defaults to CLI_REFRESH_INTERVAL or 30).",
    ),
    iterations: Optional[int] = typer.Option(
        None,
        "--iterations",
        min=1,
        help="Stop after this many refreshes; runs until interrupted by default.",
    ),
    clear: bool = typer.Option(True, "--clear/--no-clear", help="Clear the screen between refreshes."),
) -> None:
    """Poll the API and redraw the dashboard on every refresh."""
    state = _get_state(ctx)
    delay = interval if interval is not None else state.config.refresh_interval
    refresher = DashboardRefresher(state.client, history_limit=state.config.history_limit)
    view = DashboardState()

    completed = 0
    try:
        while True:
            refresher.refresh(view)
            if clear:
                typer.clear()
            render_dashboard(view)
            completed += 1
            if iterations is not None and completed >= iterations:
                break
            time.sleep(delay)
    except KeyboardInterrupt:
        typer.echo()
