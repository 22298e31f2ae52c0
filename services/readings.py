"""Query service translating dashboard requests into store queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Sequence

from app.schemas import LocationStatus, OverallStatus, Reading
from datastore.base import Document, ReadingStore, ReadingStoreError
from datastore.factory import build_default_store
from models.locations import KNOWN_LOCATIONS, Location, to_display_name, to_storage_name
from models.records import WINDOW_END_FIELD, parse_window_end
from services.status import StatusAggregator
from settings import get_settings

logger = logging.getLogger(__name__)

STATUS_FIELDS = ("location", "safetyStatus", WINDOW_END_FIELD)
DEFAULT_HISTORY_LIMIT = 12


class InvalidLimitError(ValueError):
    """Raised when a caller asks for a result size outside the allowed range."""


@dataclass
class StatusReport:
    """Overall classification plus the per-location detail it was derived from."""

    overall_status: OverallStatus
    locations: List[LocationStatus] = field(default_factory=list)


class ReadingService:
    """Stateless read-only queries over the readings store."""

    def __init__(
        self,
        store: ReadingStore,
        aggregator: StatusAggregator,
        locations: Sequence[Location] = KNOWN_LOCATIONS,
        history_max_limit: int = 500,
        all_max_results: int = 1000,
    ) -> None:
        self.store = store
        self.aggregator = aggregator
        self.locations = tuple(locations)
        self.history_max_limit = history_max_limit
        self.all_max_results = all_max_results

    def get_latest(self) -> List[Reading]:
        """Newest reading per known location; locations without data are omitted."""
        results: List[Reading] = []
        for location in self.locations:
            documents = self.store.find_by_location(location.storage_name, limit=1)
            self._log_query("latest", location.display_name, location.storage_name, len(documents))
            if documents:
                results.append(self._to_reading(documents[0], location.display_name))
        return results

    def get_history(self, location: str, limit: int = DEFAULT_HISTORY_LIMIT) -> List[Reading]:
        """Up to ``limit`` most recent readings for ``location``, oldest first."""
        if limit < 1 or limit > self.history_max_limit:
            raise InvalidLimitError(f"limit must be between 1 and {self.history_max_limit}")

        storage_name = to_storage_name(location)
        documents = self.store.find_by_location(storage_name, limit=limit)
        self._log_query("history", location, storage_name, len(documents), limit=limit)

        readings = [self._to_reading(document, location) for document in documents]
        return sorted(readings, key=lambda reading: reading.window_end_time)

    def get_status(self) -> StatusReport:
        statuses: List[LocationStatus] = []
        for location in self.locations:
            documents = self.store.find_by_location(location.storage_name, fields=STATUS_FIELDS)
            self._log_query("status", location.display_name, location.storage_name, len(documents))
            if not documents:
                continue
            latest = max(documents, key=self._window_end)
            statuses.append(self._to_status(latest, location.display_name))

        overall = self.aggregator.aggregate(status.safety_status for status in statuses)
        logger.info(
            "Derived overall status",
            extra={"operation": "status", "overall_status": overall.value},
        )
        return StatusReport(overall_status=overall, locations=statuses)

    def get_all(self, limit: Optional[int] = None) -> List[Reading]:
        """Every stored reading, newest first, capped at ``all_max_results``."""
        if limit is None:
            limit = self.all_max_results
        if limit < 1 or limit > self.all_max_results:
            raise InvalidLimitError(f"limit must be between 1 and {self.all_max_results}")

        documents = self.store.find_all(limit=limit)
        self._log_query("all", None, None, len(documents), limit=limit)

        readings = [
            self._to_reading(document, to_display_name(str(document.get("location", ""))))
            for document in documents
        ]
        return sorted(readings, key=lambda reading: reading.window_end_time, reverse=True)

    @staticmethod
    def _window_end(document: Document):
        try:
            return parse_window_end(document[WINDOW_END_FIELD])
        except (KeyError, ValueError) as exc:
            raise ReadingStoreError("Reading document has no usable windowEndTime") from exc

    def _to_reading(self, document: Document, display_name: str) -> Reading:
        try:
            return Reading(
                location=display_name,
                avg_ice_thickness=document.get("avgIceThickness"),
                avg_surface_temperature=document.get("avgSurfaceTemperature"),
                avg_snow_accumulation=document.get("avgSnowAccumulation"),
                safety_status=document.get("safetyStatus"),
                window_end_time=self._window_end(document),
            )
        except ValueError as exc:
            raise ReadingStoreError(f"Malformed reading document for {display_name!r}") from exc

    def _to_status(self, document: Document, display_name: str) -> LocationStatus:
        try:
            return LocationStatus(
                location=display_name,
                safety_status=document.get("safetyStatus"),
                window_end_time=self._window_end(document),
            )
        except ValueError as exc:
            raise ReadingStoreError(f"Malformed status document for {display_name!r}") from exc

    @staticmethod
    def _log_query(
        operation: str,
        location: Optional[str],
        storage_location: Optional[str],
        row_count: int,
        limit: Optional[int] = None,
    ) -> None:
        logger.info(
            "Queried readings",
            extra={
                "operation": operation,
                "location": location,
                "storage_location": storage_location,
                "limit": limit,
                "row_count": row_count,
            },
        )


@lru_cache
def build_default_service() -> ReadingService:
    """Factory that wires the query service to the configured store."""
    settings = get_settings()
    return ReadingService(
        store=build_default_store(),
        aggregator=StatusAggregator(),
        history_max_limit=settings.history_max_limit,
        all_max_results=settings.all_max_results,
    )
