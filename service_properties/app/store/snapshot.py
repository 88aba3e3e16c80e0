"""
In-memory snapshot of the property collection.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple
import threading

from shared.errors import PropertyNotFoundError
from ..models import Property


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of one completed refresh."""

    properties: Tuple[Property, ...] = ()
    generation: int = 0
    refreshed_at: Optional[datetime] = None


class SnapshotStore:
    """
    Holds the currently served snapshot.

    ``replace`` swaps a single reference to a new immutable ``Snapshot``, so a
    reader always sees the whole of one refresh and never a mix of two. The
    lock only serialises writers; reads go straight to the current reference.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = Snapshot()

    def replace(self, properties: Iterable[Property]) -> Snapshot:
        """Install a new snapshot visible to all subsequent reads."""
        items = tuple(properties)
        with self._lock:
            snapshot = Snapshot(
                properties=items,
                generation=self._snapshot.generation + 1,
                refreshed_at=datetime.now(timezone.utc),
            )
            self._snapshot = snapshot
        return snapshot

    def snapshot(self) -> Snapshot:
        """Return the current snapshot value."""
        return self._snapshot

    def read_all(self) -> List[Property]:
        """Return the current properties as a new list."""
        return list(self._snapshot.properties)

    def read_by_slug(self, slug: str) -> Property:
        """
        Return the first property whose slug matches.

        Slugs are assumed unique upstream; with duplicates the earliest entry
        in upstream order wins.
        """
        for item in self._snapshot.properties:
            if item.slug.current == slug:
                return item
        raise PropertyNotFoundError(slug)

    def __len__(self) -> int:
        return len(self._snapshot.properties)
