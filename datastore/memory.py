from __future__ import annotations

import copy
import json
from pathlib import Path
from threading import Lock
from typing import Iterable, List, Optional, Sequence

from datastore.base import Document, ReadingStoreError
from models.records import WINDOW_END_FIELD, parse_window_end


class InMemoryReadingStore:
    """Thread-safe stand-in for the document store, optionally seeded from JSON."""

    def __init__(
        self,
        name: str = "readings",
        seed_path: Optional[Path] = None,
        documents: Iterable[Document] = (),
    ) -> None:
        self.name = name
        self.seed_path = seed_path
        self._items: List[Document] = []
        self._lock = Lock()
        for document in documents:
            self.put_item(document)
        if seed_path:
            self._load_from_disk()

    def put_item(self, document: Document) -> None:
        with self._lock:
            self._items.append(copy.deepcopy(document))

    def find_by_location(
        self,
        location: str,
        *,
        limit: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
    ) -> List[Document]:
        with self._lock:
            matches = [item for item in self._items if item.get("location") == location]
            return self._shape(matches, limit=limit, fields=fields)

    def find_all(self, *, limit: Optional[int] = None) -> List[Document]:
        with self._lock:
            return self._shape(self._items, limit=limit, fields=None)

    def close(self) -> None:
        return None

    @staticmethod
    def _shape(
        items: Iterable[Document],
        limit: Optional[int],
        fields: Optional[Sequence[str]],
    ) -> List[Document]:
        try:
            ordered = sorted(
                items,
                key=lambda item: parse_window_end(item[WINDOW_END_FIELD]),
                reverse=True,
            )
        except (KeyError, ValueError) as exc:
            raise ReadingStoreError("Stored reading has no usable windowEndTime") from exc
        if limit is not None:
            ordered = ordered[:limit]
        if fields:
            return [{key: item[key] for key in fields if key in item} for item in ordered]
        return [copy.deepcopy(item) for item in ordered]

    def _load_from_disk(self) -> None:
        if not self.seed_path or not self.seed_path.exists():
            return

        try:
            raw = self.seed_path.read_text() or "[]"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError) as exc:
            raise ReadingStoreError(f"Could not load seed file {self.seed_path}") from exc

        if not isinstance(data, list):
            raise ReadingStoreError(f"Seed file {self.seed_path} must contain a JSON list")

        for document in data:
            self.put_item(document)
