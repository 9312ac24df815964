"""Index-based term resolution.

Instead of searching source files, reads the external repository's already
rendered ``index.html`` (located through its ``specs.json``) and extracts the
whole glossary in one pass. Individual lookups are then served from that
term index.
"""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Literal

import structlog
from pydantic import ValidationError

from specxref.cache import generate_key
from specxref.errors import ErrorCode, RateLimitError, XrefError
from specxref.github import decode_content
from specxref.models.xref import RepoTermIndex, ResolvedTerm
from specxref.parser import parse_glossary
from specxref.provenance import get_latest_commit

if TYPE_CHECKING:
    from datetime import timedelta

    from specxref.github import GitHubClient
    from specxref.models.xref import ReferenceRecord
    from specxref.protocols import CacheProtocol

log = structlog.get_logger()


def normalise_output_path(output_path: str) -> str:
    """Strip a leading ``./`` and a trailing ``/``: ``"./docs/"`` → ``"docs"``."""
    return output_path.removeprefix("./").removesuffix("/")


def find_term(index: RepoTermIndex, term: str) -> ResolvedTerm | None:
    """Case-insensitive exact label lookup in a term index."""
    wanted = term.casefold()
    owner, _, repo = index.repository.partition("/")
    for indexed in index.terms:
        if indexed.term.casefold() == wanted:
            return ResolvedTerm(
                term=indexed.term,
                content=indexed.definition,
                owner=owner,
                repo=repo,
                repo_url=f"https://github.com/{index.repository}",
                commit_hash=index.sha,
                avatar_url=index.avatar_url,
            )
    return None


class IndexTermResolver:
    """Resolve terms from the rendered glossary of each external repository."""

    kind: Literal["index"] = "index"

    def __init__(self, github: GitHubClient, cache: CacheProtocol, ttl: timedelta) -> None:
        self._github = github
        self._cache = cache
        self._ttl = ttl
        self._indexes: dict[tuple[str, str], RepoTermIndex] = {}
        # Repositories whose index could not be built; not retried this run
        self._failed: set[tuple[str, str]] = set()

    async def resolve_all(self, owner: str, repo: str) -> RepoTermIndex | None:
        """Return every term of ``owner/repo``, building the index when needed."""
        memo = self._indexes.get((owner, repo))
        if memo is not None:
            return memo
        if (owner, repo) in self._failed:
            log.debug("index_previously_failed", repository=f"{owner}/{repo}")
            return None

        key = generate_key("index", owner, repo)
        cached = self._cache.get_fresh(key, self._ttl)
        if cached is not None:
            try:
                index = RepoTermIndex.model_validate(cached.payload)
            except ValidationError:
                log.warning("index_cache_invalid", key=key, exc_info=True)
            else:
                if index.repository == f"{owner}/{repo}":
                    log.info("index_cache_hit", key=key, repository=index.repository)
                    self._indexes[(owner, repo)] = index
                    return index
                log.warning(
                    "index_cache_mismatch",
                    key=key,
                    expected=f"{owner}/{repo}",
                    found=index.repository,
                )

        try:
            index = await self._build_index(owner, repo)
        except RateLimitError as exc:
            log.error(
                "index_rate_limited",
                repository=f"{owner}/{repo}",
                reset_at=exc.reset_at.isoformat() if exc.reset_at else None,
            )
            self._failed.add((owner, repo))
            return None
        except XrefError as exc:
            log.error(
                "index_build_failed",
                repository=f"{owner}/{repo}",
                code=exc.code,
                status_code=exc.status_code,
                message=exc.message,
            )
            self._failed.add((owner, repo))
            return None

        self._cache.write_artifact(index.output_file_name, index.model_dump(by_alias=True))
        self._cache.put(key, index.model_dump(by_alias=True))
        log.info("index_saved", repository=index.repository, terms=len(index.terms))
        self._indexes[(owner, repo)] = index
        return index

    async def resolve_one(self, term: str, owner: str, repo: str) -> ResolvedTerm | None:
        index = await self.resolve_all(owner, repo)
        if index is None:
            return None

        found = find_term(index, term)
        if found is None:
            log.info("index_term_not_found", term=term, repository=f"{owner}/{repo}")
            return None
        log.info("index_term_found", term=term, repository=f"{owner}/{repo}")
        return found

    async def resolve_term(self, record: ReferenceRecord) -> ResolvedTerm | None:
        if record.owner is None or record.repo is None:
            return None
        resolved = await self.resolve_one(record.term, record.owner, record.repo)
        if resolved is not None and record.repo_url:
            resolved.repo_url = record.repo_url
        return resolved

    async def _build_index(self, owner: str, repo: str) -> RepoTermIndex:
        output_path = await self._output_path(owner, repo)
        index_path = f"{normalise_output_path(output_path)}/index.html"

        log.info("index_fetch", repository=f"{owner}/{repo}", path=index_path)
        html = await self._github.fetch_raw(owner, repo, index_path)

        sha = await get_latest_commit(self._github, owner, repo, index_path)
        if sha is None:
            log.warning("index_commit_unknown", repository=f"{owner}/{repo}", path=index_path)

        terms = parse_glossary(html)
        if terms is None:
            raise XrefError(
                code=ErrorCode.PARSE_ERROR,
                message=f"No terms-and-definitions-list found in {owner}/{repo}:{index_path}",
            )

        timestamp = int(time.time() * 1000)
        return RepoTermIndex(
            timestamp=timestamp,
            repository=f"{owner}/{repo}",
            terms=terms,
            sha=sha,
            avatar_url=None,
            output_file_name=f"{timestamp}-{owner}-{repo}-terms.json",
        )

    async def _output_path(self, owner: str, repo: str) -> str:
        """Read ``specs[0].output_path`` from the repository's specs.json."""
        data = await self._github.get_content(owner, repo, "specs.json")
        try:
            specs_json = json.loads(decode_content(data["content"]))
            output_path = specs_json["specs"][0].get("output_path")
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as exc:
            raise XrefError(
                code=ErrorCode.PARSE_ERROR,
                message=f"Malformed specs.json in {owner}/{repo}: {exc}",
            ) from exc

        if not output_path:
            raise XrefError(
                code=ErrorCode.NOT_FOUND,
                message=f"No output_path found in specs.json for {owner}/{repo}",
            )
        return output_path
