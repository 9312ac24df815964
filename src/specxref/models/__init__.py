from __future__ import annotations

from specxref.models.cache import CacheEntry
from specxref.models.github import (
    Repository,
    RepositoryOwner,
    SearchItem,
    SearchResponse,
    TextMatch,
)
from specxref.models.specs import ExternalSpecRepo, SpecEntry, SpecsConfig
from specxref.models.xref import (
    IndexedTerm,
    ReferenceRecord,
    RepoTermIndex,
    ResolvedTerm,
    XrefDataset,
)

__all__ = [
    # cache
    "CacheEntry",
    # github
    "Repository",
    "RepositoryOwner",
    "SearchItem",
    "SearchResponse",
    "TextMatch",
    # specs.json
    "ExternalSpecRepo",
    "SpecEntry",
    "SpecsConfig",
    # xrefs
    "IndexedTerm",
    "ReferenceRecord",
    "RepoTermIndex",
    "ResolvedTerm",
    "XrefDataset",
]
