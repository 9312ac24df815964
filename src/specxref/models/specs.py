"""Models for the consuming project's ``specs.json``."""

from __future__ import annotations

from pydantic import BaseModel


class ExternalSpecRepo(BaseModel):
    """Maps an external spec short name to the repository holding its terms."""

    external_spec: str
    url: str
    terms_dir: str | None = None


class SpecEntry(BaseModel):
    spec_directory: str = "."
    spec_terms_directory: str = "terms-definitions"
    output_path: str | None = None
    external_specs_repos: list[ExternalSpecRepo] = []
    # Each item is a single-key mapping: {"PE": "https://identity.foundation/..."}
    external_specs: list[dict[str, str]] = []

    @property
    def terms_path(self) -> str:
        return f"{self.spec_directory.rstrip('/')}/{self.spec_terms_directory}"


class SpecsConfig(BaseModel):
    specs: list[SpecEntry] = []
