from __future__ import annotations

import threading

from schemas import CatalogRecord
from store import Snapshot, SnapshotStore


def _rec(id_: str, name: str, cost: float) -> CatalogRecord:
    return CatalogRecord(id=id_, name=name, cost=cost)


def test_new_store_holds_empty_snapshot(store: SnapshotStore) -> None:
    snapshot = store.read()
    assert isinstance(snapshot, Snapshot)
    assert snapshot.records == ()
    assert snapshot.version == 0
    assert snapshot.loaded_at is None


def test_swap_then_read_returns_exact_records(store: SnapshotStore, sample_records) -> None:
    installed = store.swap(sample_records, source="catalog.json")
    snapshot = store.read()

    assert snapshot is installed
    assert snapshot.records == sample_records
    assert len(snapshot) == len(sample_records)
    assert snapshot.source == "catalog.json"
    assert snapshot.loaded_at is not None


def test_swap_bumps_version(store: SnapshotStore, sample_records) -> None:
    store.swap(sample_records)
    store.swap([])
    assert store.version == 2
    assert store.read().records == ()


def test_swap_accepts_any_iterable(store: SnapshotStore, sample_records) -> None:
    store.swap(rec for rec in sample_records)
    assert store.read().records == sample_records


def test_reader_keeps_old_snapshot_after_swap(store: SnapshotStore) -> None:
    old = (_rec("1", "A", 1),)
    store.swap(old)
    held = store.read()

    store.swap((_rec("1", "C", 1),))

    assert held.records == old
    assert store.read().records[0].name == "C"


def test_concurrent_readers_never_see_mixed_snapshot(store: SnapshotStore) -> None:
    before = (_rec("x", "A", 1), _rec("x", "B", 2))
    after = (_rec("x", "C", 1), _rec("x", "D", 2))
    allowed = {("A", "B"), ("C", "D")}
    store.swap(before)

    stop = threading.Event()
    seen: set[tuple[str, ...]] = set()
    errors: list[tuple[str, ...]] = []

    def reader() -> None:
        while not stop.is_set():
            names = tuple(rec.name for rec in store.read().records)
            seen.add(names)
            if names not in allowed:
                errors.append(names)

    threads = [threading.Thread(target=reader) for _ in range(8)]
    for t in threads:
        t.start()
    for i in range(2000):
        store.swap(after if i % 2 == 0 else before)
    stop.set()
    for t in threads:
        t.join()

    assert errors == []
    assert seen <= allowed
