"""Term resolution strategies and the selection between them.

Two strategies exist, never combined for one reference:
- ``search``: GitHub code search over the repository's term source files
- ``index``:  scraping the repository's rendered ``index.html`` glossary

The index strategy is used when the external spec has a published site that
answers; otherwise resolution falls back to source search.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from specxref.resolvers.index import IndexTermResolver
from specxref.resolvers.search import SearchTermResolver

if TYPE_CHECKING:
    from specxref.github import GitHubClient
    from specxref.models.xref import ReferenceRecord
    from specxref.protocols import TermResolver

log = structlog.get_logger()

__all__ = ["IndexTermResolver", "ResolverSelector", "SearchTermResolver"]


class ResolverSelector:
    """Pick the resolver for a reference from the metadata it carries."""

    def __init__(
        self,
        github: GitHubClient,
        search: TermResolver,
        index: TermResolver,
    ) -> None:
        self._github = github
        self._search = search
        self._index = index
        self._site_available: dict[str, bool] = {}

    async def select(self, record: ReferenceRecord) -> TermResolver:
        if record.site and await self._has_rendered_index(record.site):
            return self._index
        return self._search

    async def _has_rendered_index(self, site: str) -> bool:
        if site not in self._site_available:
            self._site_available[site] = await self._github.url_exists(site)
            log.debug("site_probe", site=site, available=self._site_available[site])
        return self._site_available[site]
