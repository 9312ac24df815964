"""GitHub HTTP client with rate-limit detection.

All network I/O for resolving external references goes through a single
GitHubClient instance shared by the resolvers. The client receives an
httpx.AsyncClient via constructor injection. The caller owns the client
lifecycle.
"""

from __future__ import annotations

import base64
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
import structlog

from specxref import __version__
from specxref.errors import ErrorCode, RateLimitError, XrefError

if TYPE_CHECKING:
    from specxref.config import GitHubSettings

log = structlog.get_logger()

TEXT_MATCH_MEDIA_TYPE = "application/vnd.github.v3.text-match+json"


def build_http_client(settings: GitHubSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": f"specxref/{__version__}",
    }
    if settings.token:
        headers["Authorization"] = f"token {settings.token}"
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers=headers,
    )


def decode_content(encoded: str) -> str:
    """Decode the base64 ``content`` field of the contents API."""
    return base64.b64decode(encoded).decode("utf-8")


def _json_body(response: httpx.Response) -> Any:
    """Decoded JSON body; a 2xx reply that is not JSON is a parse error."""
    try:
        return response.json()
    except ValueError as exc:
        raise XrefError(
            code=ErrorCode.PARSE_ERROR,
            message=f"Non-JSON response from {response.request.url}: {exc}",
            status_code=response.status_code,
        ) from exc


def _rate_limit_reset(response: httpx.Response) -> datetime | None:
    raw = response.headers.get("x-ratelimit-reset")
    if raw is None:
        return None
    try:
        return datetime.fromtimestamp(int(raw), UTC)
    except ValueError:
        return None


class GitHubClient:
    """Thin wrapper over the GitHub REST API and raw content host.

    Raises XrefError on network errors and non-2xx responses. After GitHub
    reports an exhausted quota, every further call raises RateLimitError
    without touching the network until the reported reset time.
    """

    def __init__(self, client: httpx.AsyncClient, settings: GitHubSettings) -> None:
        self._client = client
        self._settings = settings
        self._rate_limited_until: datetime | None = None

    @property
    def rate_limited(self) -> bool:
        if self._rate_limited_until is None:
            return False
        return datetime.now(UTC) < self._rate_limited_until

    async def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        if self.rate_limited:
            raise RateLimitError(
                f"GitHub rate limit exceeded, skipping {url}",
                reset_at=self._rate_limited_until,
            )

        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise XrefError(
                code=ErrorCode.FETCH_FAILED,
                message=f"Network error fetching {url}: {exc}",
                recoverable=True,
            ) from exc

        if response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0":
            reset_at = _rate_limit_reset(response)
            self._rate_limited_until = reset_at or datetime.max.replace(tzinfo=UTC)
            retry_after = f"{reset_at:%Y-%m-%d %H:%M:%S} UTC" if reset_at else "an unknown time"
            log.error(
                "github_rate_limited",
                url=url,
                reset_at=reset_at.isoformat() if reset_at else None,
                message=f"GitHub API rate limit exceeded. Try again after {retry_after}.",
            )
            raise RateLimitError(f"GitHub rate limit exceeded fetching {url}", reset_at=reset_at)

        if response.status_code == 404:
            raise XrefError(
                code=ErrorCode.NOT_FOUND,
                message=f"HTTP 404 fetching {url}",
                status_code=404,
            )

        if not response.is_success:
            raise XrefError(
                code=ErrorCode.FETCH_FAILED,
                message=f"HTTP {response.status_code} fetching {url}",
                recoverable=response.status_code >= 500,
                status_code=response.status_code,
            )

        log.debug("github_request_complete", url=url, status_code=response.status_code)
        return response

    async def search_code(
        self, search_string: str, owner: str, repo: str, subdirectory: str | None
    ) -> dict:
        """Full-text code search scoped to one repository (and optionally one path)."""
        query = f"{search_string} repo:{owner}/{repo}"
        if subdirectory:
            query += f" path:{subdirectory}"
        response = await self._get(
            f"{self._settings.api_url}/search/code",
            params={"q": query},
            headers={"Accept": TEXT_MATCH_MEDIA_TYPE},
        )
        return _json_body(response)

    async def get_content(self, owner: str, repo: str, path: str) -> dict:
        """Contents API entry for one file: base64 ``content`` or a ``download_url``."""
        url = f"{self._settings.api_url}/repos/{owner}/{repo}/contents/{quote(path)}"
        response = await self._get(url)
        data = _json_body(response)
        if not isinstance(data, dict):
            # A directory path lists its entries instead
            raise XrefError(
                code=ErrorCode.PARSE_ERROR,
                message=f"Unexpected contents payload for {owner}/{repo}:{path}",
            )
        return data

    async def list_commits(
        self, owner: str, repo: str, path: str, *, per_page: int = 1
    ) -> list[dict]:
        """Newest-first commit history touching ``path``."""
        response = await self._get(
            f"{self._settings.api_url}/repos/{owner}/{repo}/commits",
            params={"path": path, "per_page": per_page},
        )
        data = _json_body(response)
        if not isinstance(data, list):
            raise XrefError(
                code=ErrorCode.PARSE_ERROR,
                message=f"Unexpected commits payload for {owner}/{repo}:{path}",
            )
        return data

    async def fetch_raw(self, owner: str, repo: str, path: str, ref: str | None = None) -> str:
        """Fetch a file's text from the raw content host (default branch unless ``ref``)."""
        branch = ref or self._settings.default_branch
        url = f"{self._settings.raw_url}/{owner}/{repo}/{branch}/{quote(path)}"
        response = await self._get(url)
        return response.text

    async def url_exists(self, url: str) -> bool:
        """Return True if ``url`` answers a HEAD request with 200."""
        try:
            response = await self._client.head(url, timeout=5.0)
        except httpx.HTTPError as exc:
            log.debug("url_check_failed", url=url, error=str(exc))
            return False
        if response.status_code == 404:
            log.debug("url_not_found", url=url)
        return response.status_code == 200
