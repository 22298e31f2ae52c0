"""Unit tests for the in-memory reading store."""

from __future__ import annotations

import json

import pytest

from datastore.base import ReadingStoreError
from datastore.memory import InMemoryReadingStore


def _document(location: str, window_end: str, status: str = "Safe") -> dict:
    return {
        "location": location,
        "windowEndTime": window_end,
        "avgIceThickness": 25.0,
        "avgSurfaceTemperature": -3.0,
        "avgSnowAccumulation": 1.5,
        "safetyStatus": status,
    }


def test_find_by_location_returns_newest_first_and_honours_limit() -> None:
    store = InMemoryReadingStore(
        documents=[
            _document("NAC", "2025-01-15T12:05:00Z"),
            _document("NAC", "2025-01-15T12:15:00Z"),
            _document("NAC", "2025-01-15T12:10:00Z"),
            _document("DowsLake", "2025-01-15T12:20:00Z"),
        ]
    )

    found = store.find_by_location("NAC", limit=2)

    assert [item["windowEndTime"] for item in found] == [
        "2025-01-15T12:15:00Z",
        "2025-01-15T12:10:00Z",
    ]


def test_find_by_location_projects_fields() -> None:
    store = InMemoryReadingStore(documents=[_document("NAC", "2025-01-15T12:05:00Z")])

    found = store.find_by_location("NAC", fields=("location", "safetyStatus", "windowEndTime"))

    assert found == [
        {"location": "NAC", "safetyStatus": "Safe", "windowEndTime": "2025-01-15T12:05:00Z"}
    ]


def test_reads_return_deep_copies() -> None:
    store = InMemoryReadingStore(documents=[_document("NAC", "2025-01-15T12:05:00Z")])

    first = store.find_all()
    first[0]["avgIceThickness"] = 0.0

    assert store.find_all()[0]["avgIceThickness"] == 25.0


def test_find_all_orders_mixed_timestamp_formats() -> None:
    store = InMemoryReadingStore(
        documents=[
            _document("NAC", "2025-01-15T12:05:00+00:00"),
            _document("DowsLake", "2025-01-15T12:10:00Z"),
            _document("FifthAvenue", "2025-01-15T11:00:00"),
        ]
    )

    found = store.find_all()

    assert [item["location"] for item in found] == ["DowsLake", "NAC", "FifthAvenue"]


def test_seed_file_is_loaded(tmp_path) -> None:
    path = tmp_path / "seed.json"
    path.write_text(json.dumps([_document("NAC", "2025-01-15T12:05:00Z")]))

    store = InMemoryReadingStore(seed_path=path)

    assert len(store.find_by_location("NAC")) == 1


def test_missing_seed_file_is_ignored(tmp_path) -> None:
    store = InMemoryReadingStore(seed_path=tmp_path / "absent.json")

    assert store.find_all() == []


def test_malformed_seed_file_raises(tmp_path) -> None:
    path = tmp_path / "seed.json"
    path.write_text('{"not": "a list"}')

    with pytest.raises(ReadingStoreError):
        InMemoryReadingStore(seed_path=path)


@pytest.mark.parametrize(
    "document",
    [
        {"location": "NAC", "windowEndTime": "garbage"},
        {"location": "NAC"},
    ],
)
def test_unusable_window_end_raises_store_error(document: dict) -> None:
    store = InMemoryReadingStore(documents=[document])

    with pytest.raises(ReadingStoreError):
        store.find_by_location("NAC")
    with pytest.raises(ReadingStoreError):
        store.find_all()
