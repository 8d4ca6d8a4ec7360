# source_loader.py
"""
Catalog source loader
---------------------
Reads the full catalog into memory and parses it into records.

  - the location is either a local file path or an http(s) URL
  - URLs are fetched with requests, honouring a timeout and a few retries
  - the document must be a JSON array of {"id", "name", "cost"} objects
  - any read, fetch or validation problem raises SourceError; nothing partial
    is ever returned

Usage:
    from source_loader import load_records
    records = load_records("json_source.json")
"""

import time
from pathlib import Path
from typing import Tuple
from urllib.parse import urlparse

import requests
from pydantic import ValidationError

from schemas import CatalogDocument, CatalogRecord


class SourceError(Exception):
    """The catalog source could not be read or parsed."""

    def __init__(self, location: str, reason: str):
        super().__init__(f"{location}: {reason}")
        self.location = location
        self.reason = reason


def is_remote(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


def _read_file(location: str) -> bytes:
    path = Path(location)
    try:
        return path.read_bytes()
    except OSError as e:
        raise SourceError(location, f"cannot read file ({e.strerror or e})") from e


def fetch_remote(location: str, max_retries: int = 2, timeout: float = 5.0) -> bytes:
    """Fetch the raw catalog document over HTTP. Raises SourceError once retries run out."""
    last_exc = None
    for attempt in range(max_retries + 1):
        try:
            resp = requests.get(location, timeout=timeout)
            resp.raise_for_status()
            return resp.content
        except requests.HTTPError as e:
            # the server answered; retrying will not change a 4xx/5xx verdict
            raise SourceError(location, f"HTTP {e.response.status_code}") from e
        except requests.RequestException as e:
            last_exc = e
            if attempt < max_retries:
                time.sleep(0.3 * (attempt + 1))
    raise SourceError(location, f"request failed ({last_exc})") from last_exc


def read_source(location: str, timeout: float = 5.0, max_retries: int = 2) -> bytes:
    if is_remote(location):
        return fetch_remote(location, max_retries=max_retries, timeout=timeout)
    return _read_file(location)


def parse_records(raw: bytes, location: str = "<memory>") -> Tuple[CatalogRecord, ...]:
    try:
        return tuple(CatalogDocument.validate_json(raw))
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(p) for p in first["loc"]) or "document"
        raise SourceError(location, f"invalid catalog at {where}: {first['msg']}") from e


def load_records(location: str, timeout: float = 5.0, max_retries: int = 2) -> Tuple[CatalogRecord, ...]:
    """
    Load and parse the whole catalog.

    Args:
        location: file path or http(s) URL
        timeout: per-request timeout for remote sources, in seconds
        max_retries: extra attempts after a connection-level failure
    """
    raw = read_source(location, timeout=timeout, max_retries=max_retries)
    return parse_records(raw, location)


__all__ = [
    'SourceError',
    'load_records',
    'parse_records',
    'read_source',
    'fetch_remote',
]
