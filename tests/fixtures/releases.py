"""Release index payloads in the shape the GitHub releases API returns."""

from typing import Any, Dict, Iterable, Optional

API_BASE = "https://api.github.test"
DOWNLOAD_BASE = "https://downloads.github.test"


def release_json(
    tag: str,
    asset_names: Iterable[str],
    repo: str = "risc0/rust",
    published_at: Optional[str] = "2024-04-22T18:00:00Z",
) -> Dict[str, Any]:
    """
    Build a releases API body.

    Example:
        >>> release_json("v1.0.0", ["a.tar.gz"])["assets"][0]["name"]
        'a.tar.gz'
    """
    body: Dict[str, Any] = {
        "tag_name": tag,
        "name": tag,
        "assets": [
            {
                "name": name,
                "browser_download_url": asset_url(repo, tag, name),
                "size": 0,
            }
            for name in asset_names
        ],
    }
    if published_at is not None:
        body["published_at"] = published_at
    return body


def asset_url(repo: str, tag: str, name: str) -> str:
    return f"{DOWNLOAD_BASE}/{repo}/releases/download/{tag}/{name}"


def release_api_url(repo: str, selector: Optional[str] = None) -> str:
    """API URL the resolver requests for ``selector`` (None means latest)."""
    suffix = "latest" if selector in (None, "latest") else f"tags/{selector}"
    return f"{API_BASE}/repos/{repo}/releases/{suffix}"
