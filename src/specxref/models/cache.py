from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """One cached GitHub response, stored as ``<key>.json``."""

    key: str  # SHA-256 of the lookup parameters
    timestamp: datetime  # When the entry was written (UTC)
    payload: Any  # Raw JSON response body, decoded file text or term index

    def is_fresh(self, ttl: timedelta, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        return now - self.timestamp <= ttl
