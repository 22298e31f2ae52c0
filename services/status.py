"""Overall safety classification for the canal."""

from __future__ import annotations

from typing import Iterable, Optional

from app.schemas import OverallStatus, SafetyStatus


class StatusAggregator:
    """Worst-case reduction over the latest per-location statuses.

    ``Unsafe`` dominates ``Caution`` which dominates ``Safe``; an empty input
    yields ``Unknown``. This is not an average: a single unsafe location makes
    the whole canal unsafe.
    """

    def aggregate(self, statuses: Iterable[Optional[SafetyStatus]]) -> OverallStatus:
        collected = list(statuses)
        if not collected:
            return OverallStatus.unknown
        if all(status is SafetyStatus.safe for status in collected):
            return OverallStatus.safe
        if any(status is SafetyStatus.unsafe for status in collected):
            return OverallStatus.unsafe
        return OverallStatus.caution
