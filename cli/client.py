from __future__ import annotations

from typing import Any, Dict, List
from urllib.parse import quote

import httpx

from cli.config import CLIConfig


class ApiError(RuntimeError):
    """Raised when the dashboard API answers with a failure envelope."""


class ApiClient:
    """Minimal HTTP client for the dashboard API."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.request_timeout)

    def close(self) -> None:
        self._client.close()

    def get_latest(self) -> List[Dict[str, Any]]:
        return self._get("/api/latest")["data"]

    def get_status(self) -> Dict[str, Any]:
        return self._get("/api/status")

    def get_history(self, location: str, limit: int) -> List[Dict[str, Any]]:
        path = f"/api/history/{quote(location, safe='')}"
        return self._get(path, params={"limit": limit})["data"]

    def get_all(self, limit: int | None = None) -> Dict[str, Any]:
        params = {"limit": limit} if limit is not None else None
        return self._get("/api/all", params=params)

    def get_health(self) -> Dict[str, Any]:
        try:
            response = self._client.get("/health")
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ApiError(f"Health check failed: {exc}") from exc
        return response.json()

    def _get(self, path: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        try:
            response = self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise ApiError(f"Request to {path} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError(
                f"Request to {path} returned a non-JSON body (status {response.status_code})."
            ) from exc

        if response.is_error or not payload.get("success", False):
            detail = payload.get("error") or "no detail provided."
            raise ApiError(f"Request to {path} failed with status {response.status_code}: {detail}")
        return payload
