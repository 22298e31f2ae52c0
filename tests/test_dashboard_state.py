"""Tests for the terminal dashboard's refresh cycle and chart state."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List

from cli.client import ApiError
from cli.dashboard import (
    ChartData,
    DashboardRefresher,
    DashboardState,
    merge_histories,
    update_chart,
)
from models.locations import KNOWN_LOCATIONS

DOWS, FIFTH, NAC = KNOWN_LOCATIONS


def _point(window_end: str, ice: float, temperature: float = -5.0) -> Dict[str, Any]:
    return {"windowEndTime": window_end, "avgIceThickness": ice, "avgSurfaceTemperature": temperature}


class StubApi:
    def __init__(self) -> None:
        self.latest: List[Dict[str, Any]] = [
            {"location": "Dow's Lake", "avgIceThickness": 30.0, "safetyStatus": "Safe"},
        ]
        self.status: Dict[str, Any] = {"success": True, "overallStatus": "Safe", "locations": []}
        self.histories: Dict[str, List[Dict[str, Any]]] = {
            "Dow's Lake": [_point("2025-01-15T12:00:00Z", 30.0), _point("2025-01-15T12:05:00Z", 31.0)],
            "Fifth Avenue": [_point("2025-01-15T12:05:00Z", 25.0)],
            "NAC": [],
        }
        self.fail_latest = False
        self.fail_history_for: str | None = None
        self.history_threads: set[int] = set()

    def get_latest(self) -> List[Dict[str, Any]]:
        if self.fail_latest:
            raise ApiError("latest unavailable")
        return self.latest

    def get_status(self) -> Dict[str, Any]:
        return self.status

    def get_history(self, location: str, limit: int) -> List[Dict[str, Any]]:
        self.history_threads.add(threading.get_ident())
        if location == self.fail_history_for:
            raise ApiError("history unavailable")
        return self.histories[location][-limit:]


def test_merge_histories_aligns_series_by_timestamp() -> None:
    histories = [
        (DOWS, [_point("2025-01-15T12:00:00Z", 30.0), _point("2025-01-15T12:10:00Z", 32.0)]),
        (FIFTH, [_point("2025-01-15T12:05:00Z", 25.0), _point("2025-01-15T12:10:00Z", 26.0)]),
        (NAC, []),
    ]

    labels, series = merge_histories(histories, "avgIceThickness")

    assert labels == [
        datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
        datetime(2025, 1, 15, 12, 5, tzinfo=timezone.utc),
        datetime(2025, 1, 15, 12, 10, tzinfo=timezone.utc),
    ]
    assert [entry.label for entry in series] == ["Dow's Lake", "Fifth Avenue", "NAC"]
    assert series[0].values == [30.0, None, 32.0]
    assert series[1].values == [None, 25.0, 26.0]
    assert series[2].values == [None, None, None]


def test_update_chart_mutates_existing_instance() -> None:
    chart = update_chart(None, "Ice Thickness", "cm", [], [])
    assert isinstance(chart, ChartData)

    labels = [datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)]
    updated = update_chart(chart, "Ice Thickness", "cm", labels, [])

    assert updated is chart
    assert chart.labels == labels
    assert chart.revision == 1


def test_refresh_populates_state() -> None:
    api = StubApi()
    refresher = DashboardRefresher(api, history_limit=12)  # type: ignore[arg-type]
    state = DashboardState()

    assert refresher.refresh(state) is True

    assert state.cards["Dow's Lake"]["avgIceThickness"] == 30.0
    assert state.overall_status == "Safe"
    assert state.last_updated is not None
    assert state.ice_chart is not None and state.temp_chart is not None
    assert len(state.ice_chart.labels) == 2
    assert state.ice_chart.series[1].values == [None, 25.0]


def test_second_refresh_reuses_chart_instances() -> None:
    api = StubApi()
    refresher = DashboardRefresher(api)  # type: ignore[arg-type]
    state = DashboardState()
    refresher.refresh(state)
    ice_chart = state.ice_chart

    api.histories["NAC"] = [_point("2025-01-15T12:10:00Z", 40.0)]
    refresher.refresh(state)

    assert state.ice_chart is ice_chart
    assert ice_chart is not None and ice_chart.revision == 1
    assert len(ice_chart.labels) == 3


def test_latest_failure_leaves_previous_state(caplog) -> None:
    api = StubApi()
    refresher = DashboardRefresher(api)  # type: ignore[arg-type]
    state = DashboardState()
    refresher.refresh(state)
    previous_update = state.last_updated

    api.fail_latest = True
    api.status = {"success": True, "overallStatus": "Unsafe", "locations": []}
    with caplog.at_level(logging.ERROR):
        assert refresher.refresh(state) is False

    assert state.last_updated == previous_update
    assert state.overall_status == "Safe"
    assert any("Error updating dashboard" in record.getMessage() for record in caplog.records)


def test_single_history_failure_skips_both_charts() -> None:
    api = StubApi()
    refresher = DashboardRefresher(api)  # type: ignore[arg-type]
    state = DashboardState()
    refresher.refresh(state)
    ice_labels = list(state.ice_chart.labels)  # type: ignore[union-attr]

    api.histories["Dow's Lake"].append(_point("2025-01-15T12:20:00Z", 33.0))
    api.status = {"success": True, "overallStatus": "Caution", "locations": []}
    api.fail_history_for = "NAC"

    assert refresher.refresh(state) is False
    assert state.overall_status == "Caution"
    assert state.ice_chart is not None
    assert state.ice_chart.labels == ice_labels
    assert state.ice_chart.revision == 0


def test_histories_are_requested_for_every_location() -> None:
    api = StubApi()
    refresher = DashboardRefresher(api, history_limit=1)  # type: ignore[arg-type]
    state = DashboardState()

    refresher.update_charts(state)

    assert state.ice_chart is not None
    assert state.ice_chart.series[0].values == [31.0]
    assert api.history_threads
