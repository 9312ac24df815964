"""Commit provenance lookup.

Advisory only: any failure drops the commit hash but never blocks resolution.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from specxref.errors import XrefError

if TYPE_CHECKING:
    from specxref.github import GitHubClient

log = structlog.get_logger()


def term_file_path(terms_dir: str | None, term: str) -> str:
    """Conventional location of a term file: ``<terms_dir>/<term-slug>.md``."""
    slug = term.replace(" ", "-").lower()
    if not terms_dir:
        return f"{slug}.md"
    return f"{terms_dir.strip('/')}/{slug}.md"


async def get_latest_commit(github: GitHubClient, owner: str, repo: str, path: str) -> str | None:
    """Return the SHA of the newest commit touching ``path``, or None."""
    path = path.lstrip("/")
    try:
        commits = await github.list_commits(owner, repo, path, per_page=1)
    except XrefError as exc:
        log.warning(
            "commit_lookup_failed",
            repository=f"{owner}/{repo}",
            path=path,
            code=exc.code,
            status_code=exc.status_code,
            message=exc.message,
        )
        return None

    if not commits:
        log.info("commit_not_found", repository=f"{owner}/{repo}", path=path)
        return None

    sha = commits[0].get("sha")
    log.info("commit_found", repository=f"{owner}/{repo}", path=path, sha=sha)
    return sha
