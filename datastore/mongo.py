from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from pymongo import DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from datastore.base import Document, ReadingStoreError
from models.records import WINDOW_END_FIELD

logger = logging.getLogger(__name__)


class MongoReadingStore:
    """Read-only query wrapper around a single readings collection."""

    def __init__(self, collection: Collection, client: Optional[MongoClient] = None) -> None:
        self.collection = collection
        self._client = client

    def find_by_location(
        self,
        location: str,
        *,
        limit: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
    ) -> List[Document]:
        return self._find({"location": location}, limit=limit, fields=fields)

    def find_all(self, *, limit: Optional[int] = None) -> List[Document]:
        return self._find({}, limit=limit, fields=None)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    def _find(
        self,
        query: Dict[str, Any],
        limit: Optional[int],
        fields: Optional[Sequence[str]],
    ) -> List[Document]:
        # ``_id`` is an ObjectId and never leaves the store layer.
        projection: Dict[str, int] = {"_id": 0}
        if fields:
            projection.update({field: 1 for field in fields})

        try:
            cursor = self.collection.find(query, projection).sort(WINDOW_END_FIELD, DESCENDING)
            if limit is not None:
                cursor = cursor.limit(limit)
            return list(cursor)
        except PyMongoError as exc:
            raise ReadingStoreError(
                f"Query against collection {self.collection.name!r} failed"
            ) from exc


def connect(
    endpoint: str,
    database: str,
    container: str,
    username: Optional[str] = None,
    key: Optional[str] = None,
) -> MongoReadingStore:
    """Open the long-lived client used by every request."""
    options: Dict[str, Any] = {"appname": "canal-dashboard"}
    if username:
        options["username"] = username
    if key:
        options["password"] = key

    try:
        client: MongoClient = MongoClient(endpoint, **options)
    except (PyMongoError, ValueError) as exc:
        raise ReadingStoreError("Could not create document store client") from exc

    logger.info(
        "Connected reading store",
        extra={"backend": "mongo"},
    )
    return MongoReadingStore(client[database][container], client=client)
