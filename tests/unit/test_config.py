"""Unit tests for specxref.config."""

from __future__ import annotations

from typing import TYPE_CHECKING

from specxref.config import Settings

if TYPE_CHECKING:
    import pytest


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.github.api_url == "https://api.github.com"
        assert settings.github.raw_url == "https://raw.githubusercontent.com"
        assert settings.github.default_branch == "main"
        assert settings.cache.index_ttl_hours == 24
        assert settings.cache.dir.endswith("github-cache")
        assert settings.output.dir == "output"
        assert settings.output.specs_file == "specs.json"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECXREF__GITHUB__TOKEN", "ghp_env")
        monkeypatch.setenv("SPECXREF__CACHE__INDEX_TTL_HOURS", "0")
        monkeypatch.setenv("SPECXREF__LOGGING__FORMAT", "json")
        settings = Settings()
        assert settings.github.token == "ghp_env"
        assert settings.cache.index_ttl_hours == 0
        assert settings.logging.format == "json"

    def test_init_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECXREF__OUTPUT__DIR", "from-env")
        settings = Settings(output={"dir": "from-init"})
        assert settings.output.dir == "from-init"
