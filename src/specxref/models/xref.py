from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReferenceRecord(BaseModel):
    """One ``[[xref: spec, term]]`` reference, enriched as resolution progresses."""

    model_config = _CAMEL

    external_spec: str
    term: str
    repo_url: str | None = None
    terms_dir: str | None = None
    owner: str | None = None
    repo: str | None = None
    site: str | None = None
    commit_hash: str | None = None
    content: str | None = None
    avatar_url: str | None = None

    @field_validator("commit_hash", mode="before")
    @classmethod
    def _first_commit(cls, v: object) -> object:
        # Older datasets stored the hash as a one-element list
        if isinstance(v, list):
            return v[0] if v else None
        return v

    @property
    def identity(self) -> tuple[str, str]:
        return (self.external_spec, self.term)


class ResolvedTerm(BaseModel):
    """A definition found in an external repository, ready for transclusion."""

    model_config = _CAMEL

    term: str
    content: str
    owner: str
    repo: str
    repo_url: str
    commit_hash: str | None = None
    avatar_url: str | None = None


class IndexedTerm(BaseModel):
    term: str
    definition: str  # Concatenated outer HTML of the term's <dd> elements


class RepoTermIndex(BaseModel):
    """Every term scraped from one repository's rendered index.html."""

    model_config = _CAMEL

    timestamp: int  # Epoch milliseconds
    repository: str  # "owner/repo"
    terms: list[IndexedTerm] = []
    sha: str | None = None
    avatar_url: str | None = None
    output_file_name: str


class XrefDataset(BaseModel):
    xrefs: list[ReferenceRecord] = []

    def dump(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
