"""
Release resolution against the GitHub releases API.

Turns a (family, version selector) pair into a ReleaseDescriptor: the
canonical tag and every asset published with it. Picking the asset for the
host is left to the fetcher so that "release not found" and "no build for
this host" stay distinct failures.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

import requests
from requests.exceptions import RequestException

from rzup.core.exceptions import ResolutionFailed
from rzup.toolchain.families import ToolchainFamily

logger = logging.getLogger(__name__)

LATEST = "latest"
TAG_PREFIX = "tags/"
USER_AGENT = "rzup"


@dataclass(frozen=True)
class ReleaseAsset:
    """Release asset returned by the GitHub API."""

    name: str
    download_url: str


@dataclass
class ReleaseDescriptor:
    """A resolved release and its assets."""

    tag_name: str
    assets: List[ReleaseAsset]
    published_at: Optional[str] = None

    def find_asset(self, name: str) -> Optional[ReleaseAsset]:
        """Return the asset with exactly this file name, if any."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


def release_path(selector: Optional[str]) -> str:
    """
    Map a version selector to the releases API path suffix.

    Example:
        >>> release_path(None)
        'latest'
        >>> release_path("v1.0.0")
        'tags/v1.0.0'
        >>> release_path("tags/v1.0.0")
        'tags/v1.0.0'
    """
    if selector is None or selector == LATEST:
        return LATEST
    if selector.startswith(TAG_PREFIX):
        return selector
    return f"{TAG_PREFIX}{selector}"


def create_http_session(token: Optional[str] = None) -> requests.Session:
    """
    Build a session with the headers the GitHub API expects.

    Args:
        token: Optional GitHub token, sent as a bearer token to lift rate limits
    """
    session = requests.Session()
    session.headers["User-Agent"] = USER_AGENT
    session.headers["Accept"] = "application/vnd.github+json"
    if token:
        session.headers["Authorization"] = f"Bearer {token}"
    return session


def parse_release(data: Any) -> ReleaseDescriptor:
    """
    Validate a releases API response body.

    Raises:
        ValueError: If the body does not match the expected schema
    """
    if not isinstance(data, dict):
        raise ValueError("release info is not a JSON object")

    tag_name = data.get("tag_name")
    if not isinstance(tag_name, str) or not tag_name:
        raise ValueError("release info has no 'tag_name'")

    raw_assets = data.get("assets")
    if not isinstance(raw_assets, list):
        raise ValueError("release info has no 'assets' list")

    assets = []
    for raw in raw_assets:
        if not isinstance(raw, dict):
            raise ValueError("release asset is not a JSON object")
        name = raw.get("name")
        url = raw.get("browser_download_url")
        if not isinstance(name, str) or not isinstance(url, str):
            raise ValueError("release asset lacks 'name' or 'browser_download_url'")
        assets.append(ReleaseAsset(name=name, download_url=url))

    if not assets:
        raise ValueError(f"release {tag_name} has no assets")

    published_at = data.get("published_at")
    return ReleaseDescriptor(
        tag_name=tag_name,
        assets=assets,
        published_at=published_at if isinstance(published_at, str) else None,
    )


class ReleaseResolver:
    """
    Queries the release index for a family's releases.

    Example:
        >>> resolver = ReleaseResolver()
        >>> release = resolver.resolve(RUST, "latest")
        >>> release.tag_name
        'v2024-04-22.0'
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        api_base_url: str = "https://api.github.com",
        timeout: float = 30,
    ):
        self.session = session or create_http_session()
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout = timeout

    def release_url(self, family: ToolchainFamily, selector: Optional[str]) -> str:
        return f"{self.api_base_url}/repos/{family.repo}/releases/{release_path(selector)}"

    def resolve(
        self, family: ToolchainFamily, selector: Optional[str] = None
    ) -> ReleaseDescriptor:
        """
        Resolve ``selector`` to a concrete release of ``family``.

        Args:
            family: Toolchain family to look up
            selector: None or "latest" for the newest release, else a tag

        Returns:
            ReleaseDescriptor with the canonical tag and all assets

        Raises:
            ResolutionFailed: On HTTP errors or a malformed response body
        """
        label = selector or LATEST
        url = self.release_url(family, selector)
        logger.info(f"Getting release info: {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except RequestException as e:
            raise ResolutionFailed(
                family.name, label, f"could not download release info: {e}"
            ) from e

        try:
            release = parse_release(response.json())
        except ValueError as e:
            raise ResolutionFailed(
                family.name, label, f"could not deserialize release info: {e}"
            ) from e

        logger.debug(
            f"Resolved {family.name} '{label}' to {release.tag_name} "
            f"({len(release.assets)} assets)"
        )
        return release


__all__ = [
    "ReleaseAsset",
    "ReleaseDescriptor",
    "ReleaseResolver",
    "create_http_session",
    "parse_release",
    "release_path",
]
