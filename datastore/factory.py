from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from datastore.base import ReadingStore, ReadingStoreError
from datastore.memory import InMemoryReadingStore
from datastore.mongo import connect
from settings import get_settings


@lru_cache
def build_default_store() -> ReadingStore:
    """Create the process-wide store handle selected by settings."""
    settings = get_settings()
    if settings.store_backend == "memory":
        seed = Path(settings.store_seed_path) if settings.store_seed_path else None
        return InMemoryReadingStore(name=settings.store_container, seed_path=seed)

    if not settings.store_endpoint:
        raise ReadingStoreError("READINGS_STORE_ENDPOINT is not configured")
    return connect(
        endpoint=settings.store_endpoint,
        database=settings.store_database,
        container=settings.store_container,
        username=settings.store_username,
        key=settings.store_key,
    )
