"""File-backed GitHub response cache.

One JSON file per entry, named after the SHA-256 of the lookup parameters.
All cache operations catch I/O and decode errors internally and degrade
gracefully: read failures return ``None`` (treated as cache miss by callers),
write failures are logged and ignored (fetched content is still returned).
A broken cache directory never prevents a term from resolving.
"""

from __future__ import annotations

import hashlib
import json
import os
from contextlib import suppress
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from specxref.models.cache import CacheEntry

if TYPE_CHECKING:
    from datetime import timedelta
    from pathlib import Path

log = structlog.get_logger()


def generate_key(*parts: str) -> str:
    """Return a stable, order-sensitive key for the given lookup parameters.

    Parts are hashed as a JSON array so that separators inside a part (owner
    and repository names may contain dashes) cannot make two lookups collide.
    """
    encoded = json.dumps(list(parts), ensure_ascii=False)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def write_text_atomic(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` in one step; readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)
    finally:
        with suppress(OSError):
            tmp.unlink(missing_ok=True)


def write_json_atomic(path: Path, data: Any) -> None:
    write_text_atomic(path, json.dumps(data, indent=2))


class FileCache:
    """Directory of JSON cache entries implementing CacheProtocol."""

    def __init__(self, cache_dir: Path) -> None:
        self._dir = cache_dir

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def get(self, key: str) -> CacheEntry | None:
        """Read an entry. Any present file counts as valid, regardless of age."""
        path = self.path_for(key)
        if not path.is_file():
            return None
        try:
            return CacheEntry.model_validate_json(path.read_bytes())
        except (OSError, ValidationError):
            log.warning("cache_read_error", key=key, path=str(path), exc_info=True)
            return None

    def get_fresh(self, key: str, ttl: timedelta) -> CacheEntry | None:
        """Read an entry only if it was written no more than ``ttl`` ago."""
        entry = self.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(ttl):
            log.info("cache_expired", key=key, written_at=entry.timestamp.isoformat())
            return None
        return entry

    def put(self, key: str, payload: Any) -> CacheEntry | None:
        """Write an entry, overwriting any previous one. Non-fatal on failure."""
        entry = CacheEntry(key=key, timestamp=datetime.now(UTC), payload=payload)
        try:
            write_json_atomic(self.path_for(key), entry.model_dump(mode="json"))
        except (OSError, TypeError, ValueError):
            log.warning("cache_write_error", key=key, exc_info=True)
            return None
        log.debug("cache_write", key=key)
        return entry

    def write_artifact(self, name: str, data: Any) -> Path | None:
        """Write an audit file next to the cache entries. Non-fatal on failure."""
        path = self._dir / name
        try:
            write_json_atomic(path, data)
        except (OSError, TypeError, ValueError):
            log.warning("cache_artifact_write_error", path=str(path), exc_info=True)
            return None
        return path
