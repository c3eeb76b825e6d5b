"""
Host asset selection and download.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import requests

from rzup.core.download import DownloadProgress, download_file
from rzup.core.exceptions import UnsupportedPlatform
from rzup.toolchain.families import ToolchainFamily
from rzup.toolchain.resolver import ReleaseAsset, ReleaseDescriptor

logger = logging.getLogger(__name__)


class ArchiveFetcher:
    """
    Downloads the asset of a resolved release that matches the host.

    The scratch directory is owned by the caller, which is responsible for
    removing it (see ``rzup.core.filesystem.temporary_directory``).
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        self.session = session
        self.timeout = timeout
        self.progress_callback = progress_callback

    def select_asset(
        self, descriptor: ReleaseDescriptor, family: ToolchainFamily, host: str
    ) -> ReleaseAsset:
        """
        Find the asset built for ``host``.

        Raises:
            UnsupportedPlatform: If the family publishes nothing for ``host``
                or the release lacks the expected file
        """
        expected = family.asset_name(host)
        asset = descriptor.find_asset(expected) if expected else None
        if asset is None:
            raise UnsupportedPlatform(family.name, descriptor.tag_name, host)
        return asset

    def fetch(
        self,
        descriptor: ReleaseDescriptor,
        family: ToolchainFamily,
        host: str,
        scratch_dir: Path,
    ) -> Path:
        """
        Download the host asset of ``descriptor`` into ``scratch_dir``.

        Args:
            descriptor: Resolved release
            family: Family the release belongs to
            host: Host target triple
            scratch_dir: Directory to download into

        Returns:
            Path to the downloaded archive

        Raises:
            UnsupportedPlatform: If no asset matches the host (nothing is downloaded)
            DownloadFailed: If the transfer fails
        """
        asset = self.select_asset(descriptor, family, host)
        logger.info(
            f"Downloading {family.name} toolchain {descriptor.tag_name} "
            f"from '{asset.download_url}'..."
        )
        return download_file(
            asset.download_url,
            Path(scratch_dir) / asset.name,
            session=self.session,
            progress_callback=self.progress_callback,
            timeout=self.timeout,
        )


__all__ = ["ArchiveFetcher"]
