"""
Shared utilities for CLI commands.
"""

import sys
from typing import Callable, Optional

from rzup.core.download import DownloadProgress


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for Windows console.

    Falls back to ASCII-safe characters if Unicode symbols can't be encoded.
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = message.replace("✓", "[OK]").replace("✗", "[FAILED]")
        print(safe_message, file=file)


def progress_printer(
    quiet: bool = False, file=None
) -> Optional[Callable[[DownloadProgress], None]]:
    """
    Build a download progress callback that rewrites one status line.

    Args:
        quiet: Return None so nothing is shown
        file: Output stream (default: stderr)
    """
    if quiet:
        return None

    def show_progress(progress: DownloadProgress):
        out = file if file is not None else sys.stderr
        print(f"\r  {progress}", end="", file=out, flush=True)
        if progress.total_bytes and progress.bytes_downloaded >= progress.total_bytes:
            print(file=out)  # New line after a finished download

    return show_progress
