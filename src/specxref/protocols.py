"""Protocol interfaces for swappable components.

The pipeline and the transclusion renderer reference these protocols, not the
concrete implementations. This allows:
- Tests to use lightweight in-memory implementations
- Other Markdown engines to be plugged into transclusion
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, Protocol

if TYPE_CHECKING:
    from datetime import timedelta
    from pathlib import Path

    from specxref.models.cache import CacheEntry
    from specxref.models.xref import ReferenceRecord, ResolvedTerm


class CacheProtocol(Protocol):
    """Interface for the GitHub response cache."""

    def get(self, key: str) -> CacheEntry | None: ...

    def get_fresh(self, key: str, ttl: timedelta) -> CacheEntry | None: ...

    def put(self, key: str, payload: Any) -> CacheEntry | None: ...

    def write_artifact(self, name: str, data: Any) -> Path | None: ...


class TermResolver(Protocol):
    """One strategy for finding a term's definition in an external repository."""

    kind: Literal["search", "index"]

    async def resolve_term(self, record: ReferenceRecord) -> ResolvedTerm | None: ...


class MarkdownRenderer(Protocol):
    """Anything with a markdown-it style ``render`` method."""

    def render(self, markdown: str) -> str: ...
