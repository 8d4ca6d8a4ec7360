# Background refresh scheduler.
# The only writer to the SnapshotStore: every interval it reloads the whole
# catalog and swaps it in. A failed cycle keeps the previous snapshot.

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from log_config import get_logger
from source_loader import SourceError, load_records
from store import SnapshotStore

log = get_logger(__name__)

Loader = Callable[[str], Iterable]


@dataclass(frozen=True)
class RefreshOutcome:
    status: str  # "installed" | "failed" | "skipped"
    version: int
    records: int = 0
    error: Optional[str] = None

    @property
    def ok(self):
        return self.status == "installed"


class RefreshScheduler:
    def __init__(self, store: SnapshotStore, source: str, interval: float = 60.0,
                 loader: Optional[Loader] = None):
        if interval <= 0:
            raise ValueError("refresh interval must be positive")
        self.store = store
        self.source = source
        self.interval = interval
        self._loader = loader or load_records
        self._cycle_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.last_success_at: Optional[datetime] = None
        self.last_failure_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self.consecutive_failures = 0

    def refresh_once(self) -> RefreshOutcome:
        if not self._cycle_lock.acquire(blocking=False):
            log.debug("Refresh already in flight, skipping", extra={"source": self.source})
            return RefreshOutcome("skipped", self.store.version)
        try:
            return self._cycle()
        finally:
            self._cycle_lock.release()

    def _cycle(self) -> RefreshOutcome:
        try:
            records = tuple(self._loader(self.source))
        except SourceError as e:
            log.warning("Refresh failed, keeping previous snapshot: %s", e,
                        extra={"source": self.source, "version": self.store.version})
            return self._record_failure(str(e))
        except Exception as e:  # noqa: BLE001 - a bad cycle must not kill the thread
            log.exception("Unexpected refresh error, keeping previous snapshot",
                          extra={"source": self.source})
            return self._record_failure(f"{type(e).__name__}: {e}")

        snapshot = self.store.swap(records, source=self.source)
        self.last_success_at = snapshot.loaded_at
        self.last_error = None
        self.consecutive_failures = 0
        log.info("Snapshot installed",
                 extra={"source": self.source, "version": snapshot.version, "records": len(snapshot)})
        return RefreshOutcome("installed", snapshot.version, records=len(snapshot))

    def _record_failure(self, error: str) -> RefreshOutcome:
        self.last_failure_at = datetime.now(timezone.utc)
        self.last_error = error
        self.consecutive_failures += 1
        return RefreshOutcome("failed", self.store.version, error=error)

    def start(self, initial_load: bool = True) -> threading.Thread:
        if self.running:
            raise RuntimeError("refresh scheduler already running")
        self._stop.clear()
        if initial_load:
            self.refresh_once()

        def _loop():
            log.info("Refresh scheduler started",
                     extra={"source": self.source, "interval": self.interval})
            while not self._stop.wait(self.interval):
                self.refresh_once()
            log.info("Refresh scheduler stopped", extra={"source": self.source})

        t = threading.Thread(target=_loop, name="catalog-refresh", daemon=True)
        t.start()
        self._thread = t
        return t

    def stop(self, timeout: Optional[float] = None):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            # a thread still finishing its cycle stays tracked so start() refuses
            if not self._thread.is_alive():
                self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def status(self) -> dict:
        snapshot = self.store.read()
        return {
            "source": self.source,
            "interval_seconds": self.interval,
            "running": self.running,
            "version": snapshot.version,
            "records": len(snapshot),
            "loaded_at": snapshot.loaded_at.isoformat() if snapshot.loaded_at else None,
            "last_success_at": self.last_success_at.isoformat() if self.last_success_at else None,
            "last_failure_at": self.last_failure_at.isoformat() if self.last_failure_at else None,
            "last_error": self.last_error,
            "consecutive_failures": self.consecutive_failures,
        }
