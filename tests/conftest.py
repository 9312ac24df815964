"""Shared test fixtures for the specxref test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from specxref.cache import FileCache
from specxref.config import GitHubSettings
from specxref.github import GitHubClient, build_http_client
from specxref.models.specs import ExternalSpecRepo, SpecEntry, SpecsConfig

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path


@pytest.fixture()
def github_settings() -> GitHubSettings:
    return GitHubSettings(token="test-token")


@pytest.fixture()
async def github(github_settings: GitHubSettings) -> AsyncIterator[GitHubClient]:
    async with build_http_client(github_settings) as client:
        yield GitHubClient(client, github_settings)


@pytest.fixture()
def cache(tmp_path: Path) -> FileCache:
    return FileCache(tmp_path / "github-cache")


@pytest.fixture()
def specs_config() -> SpecsConfig:
    return SpecsConfig(
        specs=[
            SpecEntry(
                spec_directory="./spec",
                spec_terms_directory="terms-definitions",
                output_path="./docs",
                external_specs_repos=[
                    ExternalSpecRepo(
                        external_spec="PE",
                        url="https://github.com/decentralized-identity/presentation-exchange",
                        terms_dir="spec",
                    ),
                    ExternalSpecRepo(
                        external_spec="test-1",
                        url="https://github.com/blockchainbird/spec-up-xref-test-1",
                        terms_dir="spec/term-definitions",
                    ),
                ],
                external_specs=[
                    {"test-1": "https://blockchainbird.github.io/spec-up-xref-test-1/"},
                ],
            )
        ]
    )
