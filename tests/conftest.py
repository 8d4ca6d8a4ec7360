"""
Pytest configuration for the suggest server.

Provides fixtures for:
- A small catalog written to a temporary source file
- Settings pointing at that source
- A fresh SnapshotStore per test
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from schemas import CatalogRecord
from settings import Settings
from store import SnapshotStore

SAMPLE_CATALOG = [
    {"id": "1", "name": "Apple", "cost": 3},
    {"id": "1", "name": "Banana", "cost": 1},
    {"id": "2", "name": "Cherry", "cost": 5},
]


def write_catalog(path: Path, rows: list[dict]) -> Path:
    path.write_text(json.dumps(rows), encoding="utf-8")
    return path


def make_records(rows: list[dict]) -> tuple[CatalogRecord, ...]:
    return tuple(CatalogRecord(**row) for row in rows)


@pytest.fixture
def catalog_path(tmp_path: Path) -> Path:
    return write_catalog(tmp_path / "json_source.json", SAMPLE_CATALOG)


@pytest.fixture
def sample_records() -> tuple[CatalogRecord, ...]:
    return make_records(SAMPLE_CATALOG)


@pytest.fixture
def store() -> SnapshotStore:
    return SnapshotStore()


@pytest.fixture
def test_settings(catalog_path: Path) -> Settings:
    """
    Settings fixture with test-specific overrides.

    The refresh interval is long enough that only the startup load runs.
    """
    return Settings(
        source=str(catalog_path),
        refresh_interval_seconds=3600,
        endpoint="/v1/api/suggest",
        log_level="DEBUG",
    )


@pytest.fixture
def catalog_writer(tmp_path: Path):
    """Return a helper that writes rows (or raw text) to a fresh source file."""
    counter = {"n": 0}

    def _write(rows: list[dict] | str) -> Path:
        counter["n"] += 1
        path = tmp_path / f"catalog-{counter['n']}.json"
        if isinstance(rows, str):
            path.write_text(rows, encoding="utf-8")
            return path
        return write_catalog(path, rows)

    return _write
