"""Domain helpers shared across services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


WINDOW_END_FIELD = "windowEndTime"


def parse_window_end(value: Any) -> datetime:
    """Normalise a stored ``windowEndTime`` into an aware UTC datetime.

    The upstream pipeline writes ISO-8601 strings (usually with a ``Z``
    suffix); documents read through a MongoDB driver may already carry
    ``datetime`` values. Naive values are treated as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            raise ValueError("Timestamp is empty.")

        if candidate.endswith("Z"):
            candidate = candidate[:-1] + "+00:00"

        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError as exc:
            raise ValueError("Invalid timestamp format") from exc
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)
