"""Polling view model shared by the ``watch`` command."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from cli.client import ApiClient, ApiError
from models.locations import KNOWN_LOCATIONS, Location
from models.records import WINDOW_END_FIELD, parse_window_end

logger = logging.getLogger(__name__)

History = Tuple[Location, List[Dict[str, Any]]]


@dataclass
class ChartSeries:
    label: str
    color: str
    values: List[Optional[float]]


@dataclass
class ChartData:
    """A line chart: shared time labels plus one aligned series per location."""

    title: str
    unit: str
    labels: List[datetime] = field(default_factory=list)
    series: List[ChartSeries] = field(default_factory=list)
    revision: int = 0


@dataclass
class DashboardState:
    """Everything the terminal view renders; owned by the caller, mutated by refreshes."""

    cards: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    overall_status: Optional[str] = None
    last_updated: Optional[datetime] = None
    ice_chart: Optional[ChartData] = None
    temp_chart: Optional[ChartData] = None


def merge_histories(
    histories: Sequence[History], value_field: str
) -> Tuple[List[datetime], List[ChartSeries]]:
    """Align each location's history on the union of window end times.

    A location without a reading for a given window contributes ``None`` at
    that position rather than shifting its later points.
    """
    by_location: List[Dict[datetime, Optional[float]]] = []
    timestamps: set[datetime] = set()
    for _location, readings in histories:
        points = {
            parse_window_end(reading[WINDOW_END_FIELD]): reading.get(value_field)
            for reading in readings
        }
        timestamps.update(points)
        by_location.append(points)

    labels = sorted(timestamps)
    series = [
        ChartSeries(
            label=location.display_name,
            color=location.color,
            values=[points.get(label) for label in labels],
        )
        for (location, _readings), points in zip(histories, by_location)
    ]
    return labels, series


def update_chart(
    existing: Optional[ChartData],
    title: str,
    unit: str,
    labels: List[datetime],
    series: List[ChartSeries],
) -> ChartData:
    """Replace labels and series in place when a chart exists, else build one."""
    if existing is not None:
        existing.labels = labels
        existing.series = series
        existing.revision += 1
        return existing
    return ChartData(title=title, unit=unit, labels=labels, series=series)


class DashboardRefresher:
    """Runs one refresh cycle: latest, status, then histories in parallel."""

    def __init__(
        self,
        client: ApiClient,
        history_limit: int = 12,
        locations: Sequence[Location] = KNOWN_LOCATIONS,
    ) -> None:
        self.client = client
        self.history_limit = history_limit
        self.locations = tuple(locations)

    def refresh(self, state: DashboardState) -> bool:
        """Update ``state``; on failure log and keep whatever was shown before."""
        try:
            latest = self.client.get_latest()
            for reading in latest:
                state.cards[reading["location"]] = reading
            state.last_updated = datetime.now(timezone.utc)

            status = self.client.get_status()
            state.overall_status = status.get("overallStatus")
        except (ApiError, KeyError) as exc:
            logger.error("Error updating dashboard: %s", exc)
            return False

        return self.update_charts(state)

    def update_charts(self, state: DashboardState) -> bool:
        try:
            histories = self._fetch_histories()
            ice_labels, ice_series = merge_histories(histories, "avgIceThickness")
            temp_labels, temp_series = merge_histories(histories, "avgSurfaceTemperature")
        except (ApiError, KeyError, ValueError) as exc:
            logger.error("Error updating charts: %s", exc)
            return False

        state.ice_chart = update_chart(
            state.ice_chart, "Ice Thickness", "cm", ice_labels, ice_series
        )
        state.temp_chart = update_chart(
            state.temp_chart, "Surface Temperature", "°C", temp_labels, temp_series
        )
        return True

    def _fetch_histories(self) -> List[History]:
        with ThreadPoolExecutor(max_workers=len(self.locations) or 1) as executor:
            results = executor.map(
                lambda location: self.client.get_history(location.display_name, self.history_limit),
                self.locations,
            )
            return list(zip(self.locations, results))
