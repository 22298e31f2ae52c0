"""Read-only contract shared by every reading store backend."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

Document = Dict[str, Any]


class ReadingStoreError(RuntimeError):
    """Raised when the document store cannot be reached or queried."""


class ReadingStore(Protocol):
    """Parameterized queries over the readings container.

    Every method returns documents newest first, ordered by ``windowEndTime``.
    """

    def find_by_location(
        self,
        location: str,
        *,
        limit: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
    ) -> List[Document]:
        ...

    def find_all(self, *, limit: Optional[int] = None) -> List[Document]:
        ...

    def close(self) -> None:
        ...
