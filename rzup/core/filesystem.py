"""
File system utilities for rzup.

This module provides:
- Tar archive extraction (gzip and xz) with traversal protection
- Safe directory removal and copying
- Permission fixes for toolchain binaries
- Scratch directories with guaranteed cleanup
"""

import os
import shutil
import stat
import sys
import tarfile
import tempfile
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Union

# Platform detection
IS_WINDOWS = os.name == "nt"
IS_UNIX = not IS_WINDOWS

EXECUTABLE_MODE = 0o755


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Archive Formats
# ============================================================================


class ArchiveFormat(Enum):
    """Compression wrapped around a tar stream."""

    TAR_GZ = "tar.gz"
    TAR_XZ = "tar.xz"

    @property
    def tar_mode(self) -> str:
        return _TAR_MODES[self]


_TAR_MODES = {
    ArchiveFormat.TAR_GZ: "r:gz",
    ArchiveFormat.TAR_XZ: "r:xz",
}


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent (i.e., path is under parent).

    Example:
        >>> is_relative_to(Path("/home/user/.rzup/cpp"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_tar(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    archive_format: ArchiveFormat,
) -> None:
    """
    Extract a compressed tar archive into ``destination``.

    The format is given by the caller, not detected from the file name or
    contents.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to (created if missing)
        archive_format: Compression of the tar stream

    Raises:
        ArchiveExtractionError: If the archive is missing, corrupt, or the
            destination cannot be written
        InsecureArchiveError: If archive contains malicious paths
        ValueError: If ``archive_format`` is not an ArchiveFormat
    """
    if not isinstance(archive_format, ArchiveFormat):
        raise ValueError(f"Unknown archive format: {archive_format!r}")

    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    try:
        destination.mkdir(parents=True, exist_ok=True)
        with tarfile.open(archive_path, archive_format.tar_mode) as tar:
            members = tar.getmembers()

            # Validate all paths first
            for member in members:
                _validate_archive_path(member.name, destination)

            # Extract with filter for security (Python 3.12+)
            if sys.version_info >= (3, 12):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, EOFError, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


# ============================================================================
# Permissions
# ============================================================================


def make_files_executable(directories: Iterable[Path]) -> List[Path]:
    """
    Set mode 0755 on every regular file directly inside ``directories``.

    Directories that do not exist are skipped. Does nothing on Windows.

    Returns:
        Files whose mode was changed
    """
    changed: List[Path] = []
    if not IS_UNIX:
        return changed

    for directory in directories:
        if not directory.is_dir():
            continue
        for entry in directory.iterdir():
            if entry.is_file() and not entry.is_symlink():
                os.chmod(entry, EXECUTABLE_MODE)
                changed.append(entry)

    return changed


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('~/.rzup/cpp', require_prefix='~/.rzup')
    """
    path = Path(path).absolute()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).absolute()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists() and not path.is_symlink():
        return  # Already gone, nothing to do

    if path.is_symlink() or not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    def handle_remove_readonly(func, failed_path, exc):
        """Retry once after clearing a read-only bit."""
        if isinstance(exc, tuple):
            exc = exc[1]
        if os.access(failed_path, os.W_OK):
            raise exc
        os.chmod(failed_path, stat.S_IWUSR | stat.S_IRUSR | stat.S_IXUSR)
        func(failed_path)

    try:
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=handle_remove_readonly)
        else:
            shutil.rmtree(path, onerror=handle_remove_readonly)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def copy_tree(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Recursively copy a directory tree, keeping symlinks as symlinks.

    Raises:
        FilesystemError: If the source is missing or the copy fails
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}")

    try:
        shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
    except (shutil.Error, OSError) as e:
        raise FilesystemError(f"Failed to copy {source} to {destination}: {e}") from e


# ============================================================================
# Temporary File/Directory Management
# ============================================================================


@contextmanager
def temporary_directory(prefix: str = "rzup_", cleanup: bool = True):
    """
    Context manager for temporary directory with automatic cleanup.

    The directory is removed when the block exits, whether it raised or not.

    Yields:
        Path to temporary directory

    Example:
        >>> with temporary_directory() as tmp:
        ...     (tmp / 'asset.tar.gz').write_bytes(b'...')
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_dir
    finally:
        if cleanup and temp_dir.exists():
            safe_rmtree(temp_dir)


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "ArchiveFormat",
    "is_relative_to",
    "extract_tar",
    "make_files_executable",
    "safe_rmtree",
    "copy_tree",
    "temporary_directory",
]
