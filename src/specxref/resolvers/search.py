"""Search-based term resolution.

Finds the file that defines a term by running GitHub code search for the term
inside the repository's terms directory, picking the first file whose search
fragments contain a ``[[def: ...]]`` line, and downloading that file.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import structlog
from pydantic import ValidationError

from specxref.cache import generate_key
from specxref.errors import XrefError
from specxref.github import decode_content
from specxref.models.github import SearchItem, SearchResponse
from specxref.models.xref import ResolvedTerm
from specxref.parser import is_line_with_definition
from specxref.provenance import get_latest_commit

if TYPE_CHECKING:
    from specxref.github import GitHubClient
    from specxref.models.xref import ReferenceRecord
    from specxref.protocols import CacheProtocol

log = structlog.get_logger()


def select_definition_item(response: SearchResponse) -> SearchItem | None:
    """First item with a definition line, scanning item → fragment → line.

    Ties between files are broken purely by the order GitHub returned them.
    """
    for item in response.items:
        for text_match in item.text_matches:
            for line in text_match.fragment.split("\n"):
                if is_line_with_definition(line):
                    return item
    return None


class SearchTermResolver:
    """Resolve terms through GitHub code search plus the contents API."""

    kind: Literal["search"] = "search"

    def __init__(self, github: GitHubClient, cache: CacheProtocol) -> None:
        self._github = github
        self._cache = cache

    async def resolve(
        self,
        search_string: str,
        owner: str,
        repo: str,
        subdirectory: str | None,
    ) -> SearchItem | None:
        """Return the defining file with its ``content`` attached, or None."""
        log.info(
            "search_started",
            search_string=search_string,
            repository=f"{owner}/{repo}",
            subdirectory=subdirectory,
        )
        try:
            response = await self._search(search_string, owner, repo, subdirectory)
            log.info("search_complete", total_count=response.total_count)
            if response.total_count == 0:
                log.info("search_no_matches", search_string=search_string)
                return None

            item = select_definition_item(response)
            if item is None:
                log.info("search_no_definition_line", search_string=search_string)
                return None

            item.content = await self._file_content(owner, repo, item)
            return item
        except (XrefError, ValidationError) as exc:
            log.error(
                "search_resolve_failed",
                search_string=search_string,
                repository=f"{owner}/{repo}",
                type=type(exc).__name__,
                status_code=getattr(exc, "status_code", None),
                message=str(exc),
            )
            return None

    async def resolve_term(self, record: ReferenceRecord) -> ResolvedTerm | None:
        if record.owner is None or record.repo is None:
            return None

        item = await self.resolve(record.term, record.owner, record.repo, record.terms_dir)
        if item is None:
            return None

        owner = item.repository.owner.login
        repo = item.repository.name
        commit_hash = await get_latest_commit(self._github, owner, repo, item.path)
        return ResolvedTerm(
            term=record.term,
            content=item.content or "",
            owner=owner,
            repo=repo,
            repo_url=record.repo_url or f"https://github.com/{owner}/{repo}",
            commit_hash=commit_hash,
            avatar_url=item.repository.owner.avatar_url,
        )

    async def _search(
        self, search_string: str, owner: str, repo: str, subdirectory: str | None
    ) -> SearchResponse:
        key = generate_key("search", search_string, owner, repo, subdirectory or "")
        cached = self._cache.get(key)
        if cached is not None:
            log.info("search_cache_hit", key=key)
            return SearchResponse.model_validate(cached.payload)

        log.info("search_cache_miss", key=key)
        body = await self._github.search_code(search_string, owner, repo, subdirectory)
        response = SearchResponse.model_validate(body)
        self._cache.put(key, body)
        return response

    async def _file_content(self, owner: str, repo: str, item: SearchItem) -> str:
        """Full text of the selected file. Empty when too large or unavailable."""
        key = generate_key("file", owner, repo, item.path)
        cached = self._cache.get(key)
        if cached is not None:
            log.info("file_cache_hit", key=key, path=item.path)
            return cached.payload

        log.info("file_cache_miss", key=key, path=item.path)
        try:
            data = await self._github.get_content(
                item.repository.owner.login, item.repository.name, item.path
            )
        except XrefError as exc:
            log.error(
                "file_content_failed",
                path=item.path,
                status_code=exc.status_code,
                message=exc.message,
            )
            return ""

        encoded = data.get("content")
        if not encoded:
            # Files over 1 MB come back without inline content
            log.warning(
                "file_too_large",
                path=item.path,
                download_url=data.get("download_url"),
            )
            return ""

        try:
            content = decode_content(encoded)
        except ValueError:
            log.error("file_content_undecodable", path=item.path, exc_info=True)
            return ""
        self._cache.put(key, content)
        return content
