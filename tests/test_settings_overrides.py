from __future__ import annotations

import json
from typing import Iterable

import pytest

from datastore.base import ReadingStoreError
from datastore.factory import build_default_store
from datastore.memory import InMemoryReadingStore
from services.readings import build_default_service
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


_CACHES = (get_settings, build_default_store, build_default_service)


@pytest.fixture(autouse=True)
def clean_caches():
    _clear_caches(_CACHES)
    yield
    _clear_caches(_CACHES)


def test_defaults_apply_without_environment(monkeypatch) -> None:
    for name in (
        "READINGS_STORE_BACKEND",
        "READINGS_STORE_DATABASE",
        "READINGS_STORE_CONTAINER",
        "PORT",
        "HISTORY_DEFAULT_LIMIT",
        "HISTORY_MAX_LIMIT",
        "ALL_MAX_RESULTS",
        "DASHBOARD_REFRESH_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.store_backend == "mongo"
    assert settings.store_database == "canal"
    assert settings.store_container == "readings"
    assert settings.port == 3000
    assert settings.history_default_limit == 12
    assert settings.history_max_limit == 500
    assert settings.all_max_results == 1000
    assert settings.refresh_seconds == 30


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    seed_path = tmp_path / "seed.json"
    seed_path.write_text(
        json.dumps(
            [
                {
                    "location": "NAC",
                    "windowEndTime": "2025-01-15T12:00:00Z",
                    "avgIceThickness": 31.0,
                    "avgSurfaceTemperature": -6.0,
                    "avgSnowAccumulation": 0.5,
                    "safetyStatus": "Safe",
                }
            ]
        )
    )
    monkeypatch.setenv("READINGS_STORE_BACKEND", "memory")
    monkeypatch.setenv("READINGS_STORE_CONTAINER", "custom-readings")
    monkeypatch.setenv("READINGS_STORE_SEED_PATH", str(seed_path))
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("HISTORY_MAX_LIMIT", "50")
    monkeypatch.setenv("ALL_MAX_RESULTS", "200")

    settings = get_settings()
    store = build_default_store()
    service = build_default_service()

    assert settings.port == 8080
    assert isinstance(store, InMemoryReadingStore)
    assert store.name == "custom-readings"
    assert store.seed_path == seed_path
    assert service.store is store
    assert service.history_max_limit == 50
    assert service.all_max_results == 200
    assert [reading.location for reading in service.get_latest()] == ["NAC"]


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("READINGS_STORE_BACKEND", "cassandra")
    monkeypatch.setenv("PORT", "not-a-port")
    monkeypatch.setenv("HISTORY_MAX_LIMIT", "-5")
    monkeypatch.setenv("LOG_LEVEL", " debug ")

    settings = get_settings()

    assert settings.store_backend == "mongo"
    assert settings.port == 3000
    assert settings.history_max_limit == 500
    assert settings.log_level == "DEBUG"


def test_mongo_backend_requires_endpoint(monkeypatch) -> None:
    monkeypatch.setenv("READINGS_STORE_BACKEND", "mongo")
    monkeypatch.delenv("READINGS_STORE_ENDPOINT", raising=False)

    with pytest.raises(ReadingStoreError):
        build_default_store()
