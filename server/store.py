# In-memory dataset store holding the current catalog snapshot.
# Snapshots are immutable; a refresh builds a new one and swaps the reference,
# so readers keep a consistent view for as long as they hold it.

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from schemas import CatalogRecord


@dataclass(frozen=True)
class Snapshot:
    records: Tuple[CatalogRecord, ...] = ()
    version: int = 0
    loaded_at: Optional[datetime] = None
    source: Optional[str] = None

    def __len__(self):
        return len(self.records)


class SnapshotStore:
    def __init__(self):
        # guards only the reference; snapshot contents are never mutated
        self._lock = threading.Lock()
        self._current = Snapshot()

    def read(self) -> Snapshot:
        with self._lock:
            return self._current

    def swap(self, records: Iterable[CatalogRecord], source: Optional[str] = None) -> Snapshot:
        # materialize outside the lock so readers only wait for the pointer write
        frozen = tuple(records)
        loaded_at = datetime.now(timezone.utc)
        with self._lock:
            snapshot = Snapshot(
                records=frozen,
                version=self._current.version + 1,
                loaded_at=loaded_at,
                source=source,
            )
            self._current = snapshot
        return snapshot

    @property
    def version(self) -> int:
        return self.read().version
