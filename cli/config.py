from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_REFRESH_INTERVAL = 30.0
DEFAULT_HISTORY_LIMIT = 12
DEFAULT_REQUEST_TIMEOUT = 10.0

_BASE_URL_ENV = "API_BASE_URL"
_REFRESH_INTERVAL_ENV = "CLI_REFRESH_INTERVAL"
_HISTORY_LIMIT_ENV = "CLI_HISTORY_LIMIT"
_TIMEOUT_ENV = "CLI_REQUEST_TIMEOUT"


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    history_limit: int = DEFAULT_HISTORY_LIMIT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


def _read_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_int(value: Optional[str], default: int) -> int:
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


def load_config(
    base_url: Optional[str] = None,
    refresh_interval: Optional[float] = None,
    history_limit: Optional[int] = None,
    request_timeout: Optional[float] = None,
) -> CLIConfig:
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    if refresh_interval is None:
        refresh_interval = _read_float(os.getenv(_REFRESH_INTERVAL_ENV), DEFAULT_REFRESH_INTERVAL)
    if history_limit is None:
        history_limit = _read_int(os.getenv(_HISTORY_LIMIT_ENV), DEFAULT_HISTORY_LIMIT)
    if request_timeout is None:
        request_timeout = _read_float(os.getenv(_TIMEOUT_ENV), DEFAULT_REQUEST_TIMEOUT)
    return CLIConfig(
        base_url=url.rstrip("/"),
        refresh_interval=refresh_interval,
        history_limit=history_limit,
        request_timeout=request_timeout,
    )
