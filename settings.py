from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


_BACKEND_ENV = "READINGS_STORE_BACKEND"
_ENDPOINT_ENV = "READINGS_STORE_ENDPOINT"
_USERNAME_ENV = "READINGS_STORE_USERNAME"
_KEY_ENV = "READINGS_STORE_KEY"
_DATABASE_ENV = "READINGS_STORE_DATABASE"
_CONTAINER_ENV = "READINGS_STORE_CONTAINER"
_SEED_PATH_ENV = "READINGS_STORE_SEED_PATH"
_HOST_ENV = "HOST"
_PORT_ENV = "PORT"
_HISTORY_DEFAULT_ENV = "HISTORY_DEFAULT_LIMIT"
_HISTORY_MAX_ENV = "HISTORY_MAX_LIMIT"
_ALL_MAX_ENV = "ALL_MAX_RESULTS"
_REFRESH_ENV = "DASHBOARD_REFRESH_SECONDS"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_BACKENDS = {"mongo", "memory"}


@dataclass(frozen=True)
class Settings:
    store_backend: str
    store_endpoint: Optional[str]
    store_username: Optional[str]
    store_key: Optional[str]
    store_database: str
    store_container: str
    store_seed_path: Optional[str]
    host: str
    port: int
    history_default_limit: int
    history_max_limit: int
    all_max_results: int
    refresh_seconds: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_backend(default: str) -> str:
    candidate = _read_str_env(_BACKEND_ENV, default).lower()
    return candidate if candidate in _BACKENDS else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    load_dotenv()
    history_max = _read_positive_int(_HISTORY_MAX_ENV, 500)
    return Settings(
        store_backend=_read_backend("mongo"),
        store_endpoint=_read_optional_env(_ENDPOINT_ENV),
        store_username=_read_optional_env(_USERNAME_ENV),
        store_key=_read_optional_env(_KEY_ENV),
        store_database=_read_str_env(_DATABASE_ENV, "canal"),
        store_container=_read_str_env(_CONTAINER_ENV, "readings"),
        store_seed_path=_read_optional_env(_SEED_PATH_ENV),
        host=_read_str_env(_HOST_ENV, "0.0.0.0"),
        port=_read_positive_int(_PORT_ENV, 3000),
        history_default_limit=min(_read_positive_int(_HISTORY_DEFAULT_ENV, 12), history_max),
        history_max_limit=history_max,
        all_max_results=_read_positive_int(_ALL_MAX_ENV, 1000),
        refresh_seconds=_read_positive_int(_REFRESH_ENV, 30),
        log_level=_read_log_level("INFO"),
    )
