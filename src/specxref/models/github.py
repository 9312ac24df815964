"""Subset of the GitHub REST API responses consumed by the resolvers."""

from __future__ import annotations

from pydantic import BaseModel


class RepositoryOwner(BaseModel):
    login: str
    avatar_url: str | None = None


class Repository(BaseModel):
    name: str
    full_name: str | None = None
    owner: RepositoryOwner


class TextMatch(BaseModel):
    """A snippet of file content around one search hit, not the whole file."""

    fragment: str = ""
    matches: list[dict] = []


class SearchItem(BaseModel):
    """One file returned by code search. ``content`` is attached after selection."""

    path: str
    name: str = ""
    sha: str | None = None
    html_url: str | None = None
    repository: Repository
    text_matches: list[TextMatch] = []
    content: str | None = None


class SearchResponse(BaseModel):
    total_count: int = 0
    items: list[SearchItem] = []
