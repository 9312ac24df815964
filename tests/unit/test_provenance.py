"""Unit tests for specxref.provenance."""

from __future__ import annotations

import httpx
import respx

from specxref.github import GitHubClient
from specxref.provenance import get_latest_commit, term_file_path


class TestTermFilePath:
    def test_slug_from_term(self) -> None:
        assert term_file_path("spec/term-definitions", "Verifiable Credential") == (
            "spec/term-definitions/verifiable-credential.md"
        )

    def test_strips_slashes(self) -> None:
        assert term_file_path("/spec/", "Holder") == "spec/holder.md"

    def test_no_terms_dir(self) -> None:
        assert term_file_path(None, "Holder") == "holder.md"


class TestGetLatestCommit:
    async def test_returns_newest_sha(self, github: GitHubClient) -> None:
        with respx.mock:
            route = respx.get(host="api.github.com", path="/repos/o/r/commits").mock(
                return_value=httpx.Response(200, json=[{"sha": "newest"}, {"sha": "older"}])
            )
            assert await get_latest_commit(github, "o", "r", "/spec/holder.md") == "newest"
        assert route.calls.last.request.url.params["path"] == "spec/holder.md"

    async def test_no_commits(self, github: GitHubClient) -> None:
        with respx.mock:
            respx.get(host="api.github.com", path="/repos/o/r/commits").mock(
                return_value=httpx.Response(200, json=[])
            )
            assert await get_latest_commit(github, "o", "r", "spec/holder.md") is None

    async def test_http_error_is_swallowed(self, github: GitHubClient) -> None:
        with respx.mock:
            respx.get(host="api.github.com", path="/repos/o/r/commits").mock(
                return_value=httpx.Response(500)
            )
            assert await get_latest_commit(github, "o", "r", "spec/holder.md") is None

    async def test_unexpected_payload(self, github: GitHubClient) -> None:
        with respx.mock:
            respx.get(host="api.github.com", path="/repos/o/r/commits").mock(
                return_value=httpx.Response(200, json={"message": "not a list"})
            )
            assert await get_latest_commit(github, "o", "r", "spec/holder.md") is None

    async def test_non_json_body(self, github: GitHubClient) -> None:
        with respx.mock:
            respx.get(host="api.github.com", path="/repos/o/r/commits").mock(
                return_value=httpx.Response(200, text="<html>proxy error</html>")
            )
            assert await get_latest_commit(github, "o", "r", "spec/holder.md") is None
