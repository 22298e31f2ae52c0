from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import typer

from cli.dashboard import ChartData, DashboardState

_STATUS_COLORS = {
    "Safe": typer.colors.GREEN,
    "Caution": typer.colors.YELLOW,
    "Unsafe": typer.colors.RED,
    "Unknown": typer.colors.WHITE,
}
_SPARK_CHARS = "▁▂▃▄▅▆▇█"


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def echo_status(label: str, status: Optional[str]) -> None:
    value = status or "Unknown"
    typer.echo(f"{label}: ", nl=False)
    typer.secho(value, fg=_STATUS_COLORS.get(value, typer.colors.WHITE), bold=True)


def _fmt(value: Any) -> str:
    return f"{value:.1f}" if isinstance(value, (int, float)) else "--"


def sparkline(values: List[Optional[float]]) -> str:
    present = [value for value in values if value is not None]
    if not present:
        return ""
    low, high = min(present), max(present)
    span = high - low
    chars = []
    for value in values:
        if value is None:
            chars.append(" ")
            continue
        index = 0 if span == 0 else round((value - low) / span * (len(_SPARK_CHARS) - 1))
        chars.append(_SPARK_CHARS[index])
    return "".join(chars)


def render_readings(readings: List[Dict[str, Any]]) -> None:
    if not readings:
        typer.echo("No readings available.")
        return
    for reading in readings:
        typer.echo()
        echo_heading(str(reading.get("location")))
        echo_key_values(
            [
                ("ice_thickness_cm", _fmt(reading.get("avgIceThickness"))),
                ("surface_temperature_c", _fmt(reading.get("avgSurfaceTemperature"))),
                ("snow_accumulation_cm", _fmt(reading.get("avgSnowAccumulation"))),
                ("window_end", reading.get("windowEndTime")),
            ]
        )
        echo_status("safety", reading.get("safetyStatus"))


def render_status(payload: Dict[str, Any]) -> None:
    echo_status("Canal Status", payload.get("overallStatus"))
    for entry in payload.get("locations") or []:
        echo_status(f"  - {entry.get('location')} ({entry.get('windowEndTime')})", entry.get("safetyStatus"))


def render_history(location: str, readings: List[Dict[str, Any]]) -> None:
    echo_heading(f"History for {location}")
    if not readings:
        typer.echo("No readings available.")
        return
    for reading in readings:
        typer.echo(
            f"  {reading.get('windowEndTime')}  "
            f"ice={_fmt(reading.get('avgIceThickness'))}  "
            f"temp={_fmt(reading.get('avgSurfaceTemperature'))}  "
            f"snow={_fmt(reading.get('avgSnowAccumulation'))}  "
            f"{reading.get('safetyStatus') or 'Unknown'}"
        )


def render_chart(chart: Optional[ChartData]) -> None:
    if chart is None:
        return
    echo_heading(f"{chart.title} ({chart.unit})")
    if chart.labels:
        first = chart.labels[0].strftime("%H:%M")
        last = chart.labels[-1].strftime("%H:%M")
        typer.echo(f"  {first} → {last}, {len(chart.labels)} windows")
    width = max((len(series.label) for series in chart.series), default=0)
    for series in chart.series:
        latest = next((value for value in reversed(series.values) if value is not None), None)
        typer.echo(f"  {series.label.ljust(width)}  {sparkline(series.values)}  {_fmt(latest)}")


def render_dashboard(state: DashboardState) -> None:
    echo_status("Canal Status", state.overall_status)
    if state.last_updated is not None:
        typer.echo(f"Last updated: {state.last_updated.astimezone().strftime('%H:%M:%S')}")
    render_readings(list(state.cards.values()))
    typer.echo()
    render_chart(state.ice_chart)
    render_chart(state.temp_chart)
