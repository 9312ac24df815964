"""Runtime state container.

AppState is created once per run by the CLI (or a test fixture) and passed to
the pipeline. It owns nothing itself: whoever built the GitHubClient closes
its HTTP client.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from specxref.resolvers import IndexTermResolver, ResolverSelector, SearchTermResolver

if TYPE_CHECKING:
    from specxref.config import Settings
    from specxref.github import GitHubClient
    from specxref.protocols import CacheProtocol


@dataclass
class AppState:
    """Holds all shared runtime state for one pipeline run."""

    settings: Settings
    github: GitHubClient
    cache: CacheProtocol
    selector: ResolverSelector


def build_state(
    settings: Settings,
    github: GitHubClient,
    cache: CacheProtocol,
) -> AppState:
    """Wire both resolvers and the selector around one client and cache."""
    search = SearchTermResolver(github, cache)
    index = IndexTermResolver(
        github,
        cache,
        ttl=timedelta(hours=settings.cache.index_ttl_hours),
    )
    return AppState(
        settings=settings,
        github=github,
        cache=cache,
        selector=ResolverSelector(github, search=search, index=index),
    )
