"""Builders for GitHub API payloads used across the test suite."""

from __future__ import annotations

import base64

API = "https://api.github.com"
RAW = "https://raw.githubusercontent.com"


def b64(text: str) -> str:
    """Encode text the way the contents API does."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def search_item(
    path: str,
    fragments: list[str],
    *,
    owner: str = "decentralized-identity",
    repo: str = "presentation-exchange",
) -> dict:
    """One code-search result item with the given text-match fragments."""
    return {
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "sha": "blobsha",
        "repository": {
            "name": repo,
            "full_name": f"{owner}/{repo}",
            "owner": {
                "login": owner,
                "avatar_url": f"https://avatars.githubusercontent.com/{owner}",
            },
        },
        "text_matches": [{"fragment": fragment, "matches": []} for fragment in fragments],
    }


def search_body(*items: dict) -> dict:
    return {"total_count": len(items), "incomplete_results": False, "items": list(items)}
