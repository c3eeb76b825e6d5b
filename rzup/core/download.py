"""
Streaming HTTP download with progress reporting.

Downloads are single-shot: any network error, non-2xx status, or a body
shorter than the advertised Content-Length raises DownloadFailed. Callers
decide whether to re-run; nothing is retried here.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from .exceptions import DownloadFailed

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def download_file(
    url: str,
    destination: Path,
    session: Optional[requests.Session] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: float = 30,
) -> Path:
    """
    Download ``url`` to ``destination``.

    Args:
        url: URL to download from
        destination: Local path to save file (parent is created)
        session: Session to issue the request on (default: plain ``requests``)
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadFailed: On transport errors, HTTP errors or a truncated body
        ValueError: If URL is empty

    Example:
        >>> download_file(
        ...     "https://example.com/rust-toolchain.tar.gz",
        ...     Path("/tmp/scratch/rust-toolchain.tar.gz"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    http = session if session is not None else requests

    logger.info(f"Downloading from {url}")

    try:
        with http.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            response.raise_for_status()
            content_length = response.headers.get("content-length")
            total_size = int(content_length) if content_length else 0
            # Content-Length counts encoded bytes; iter_content yields decoded ones
            if response.headers.get("content-encoding"):
                total_size = 0
            downloaded = _stream_to_file(
                response, destination, total_size, progress_callback
            )
    except RequestException as e:
        logger.error(f"Error during download: {e}")
        raise DownloadFailed(url, str(e)) from e
    except OSError as e:
        raise DownloadFailed(url, f"could not write {destination}: {e}") from e

    if total_size and downloaded != total_size:
        raise DownloadFailed(
            url, f"truncated transfer: got {downloaded} of {total_size} bytes"
        )

    logger.info(f"Download complete: {destination}")
    return destination


def _stream_to_file(
    response,
    destination: Path,
    total_size: int,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
) -> int:
    """Write response chunks to ``destination``; return bytes written."""
    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            f.write(chunk)
            downloaded += len(chunk)

            # Report progress (max once per 0.5 seconds to avoid spam)
            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5 or downloaded == total_size
            ):
                elapsed = current_time - start_time
                speed = downloaded / elapsed if elapsed > 0 else 0
                remaining = total_size - downloaded if total_size > 0 else 0
                progress_callback(
                    DownloadProgress(
                        bytes_downloaded=downloaded,
                        total_bytes=total_size if total_size > 0 else downloaded,
                        percentage=(downloaded / total_size * 100)
                        if total_size > 0
                        else 0,
                        speed_bps=speed,
                        eta_seconds=remaining / speed if speed > 0 else 0,
                    )
                )
                last_progress_time = current_time

    return downloaded


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"
