"""
Archive extraction into per-version toolchain directories.

Every (family, host, tag) triple has exactly one directory under
``<rzup home>/toolchains/``. Re-extracting the same release replaces that
directory wholesale, so no files from an earlier or partial extraction
survive.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from rzup.core.exceptions import ExtractionFailed
from rzup.core.filesystem import (
    FilesystemError,
    extract_tar,
    make_files_executable,
    safe_rmtree,
)
from rzup.core.platform import get_supported_hosts
from rzup.toolchain.families import ToolchainFamily

logger = logging.getLogger(__name__)


def install_dir_name(family: ToolchainFamily, host: str, tag: str) -> str:
    """
    Directory name for one extracted release.

    Example:
        >>> install_dir_name(RUST, "x86_64-unknown-linux-gnu", "v1.2.3")
        'rust_x86_64-unknown-linux-gnu_v1.2.3'
    """
    return f"{family.name}_{host}_{tag}"


def parse_install_dir_name(
    dir_name: str, family: ToolchainFamily, host: str
) -> Optional[str]:
    """
    Recover the tag from a directory created by ``install_dir_name``.

    Returns:
        The tag, or None if ``dir_name`` belongs to another family or host
    """
    prefix = f"{family.name}_{host}_"
    if dir_name.startswith(prefix) and len(dir_name) > len(prefix):
        return dir_name[len(prefix):]
    return None


def split_install_dir_name(dir_name: str) -> Optional[Tuple[str, str, str]]:
    """
    Split ``family_host_tag`` into its parts, or None if it does not fit.

    Both host triples ('x86_64-...') and tags may contain underscores, so
    the host is matched against the supported triples.
    """
    family, sep, rest = dir_name.partition("_")
    if not (sep and family):
        return None
    for host in get_supported_hosts():
        prefix = f"{host}_"
        if rest.startswith(prefix) and len(rest) > len(prefix):
            return family, host, rest[len(prefix):]
    return None


def installed_versions(
    toolchains_dir: Path, family: ToolchainFamily, host: str
) -> List[str]:
    """
    Tags of ``family`` extracted under ``toolchains_dir`` for ``host``.

    Returns:
        Tags ordered from least to most recently extracted
    """
    toolchains_dir = Path(toolchains_dir)
    if not toolchains_dir.is_dir():
        return []
    found = []
    for entry in toolchains_dir.iterdir():
        tag = parse_install_dir_name(entry.name, family, host)
        if tag is not None and entry.is_dir():
            found.append((entry.stat().st_mtime, tag))
    return [tag for _, tag in sorted(found)]


class ArchiveExtractor:
    """Unpacks downloaded archives for a family."""

    def extract(
        self,
        archive_path: Path,
        family: ToolchainFamily,
        destination_parent: Path,
        tag: str,
        host: str,
    ) -> Path:
        """
        Extract ``archive_path`` into its deterministic directory.

        Args:
            archive_path: Downloaded archive
            family: Family the archive belongs to (selects the format)
            destination_parent: Usually ``<rzup home>/toolchains``
            tag: Resolved release tag
            host: Host target triple

        Returns:
            Path of the extracted toolchain directory

        Raises:
            ExtractionFailed: On corrupt archives or file system errors
        """
        destination_parent = Path(destination_parent)
        toolchain_dir = destination_parent / install_dir_name(family, host, tag)

        try:
            destination_parent.mkdir(parents=True, exist_ok=True)
            if toolchain_dir.exists() or toolchain_dir.is_symlink():
                logger.warning(
                    f"Toolchain path {toolchain_dir} already exists - "
                    "deleting existing files!"
                )
                safe_rmtree(toolchain_dir, require_prefix=destination_parent)

            logger.info(f"Extracting {family.name} toolchain to {toolchain_dir}...")
            extract_tar(archive_path, toolchain_dir, family.archive_format)

            exec_dirs = [toolchain_dir / d for d in family.executable_dirs(host)]
            for missing in (d for d in exec_dirs if not d.is_dir()):
                logger.debug(f"No executable directory at {missing}")
            changed = make_files_executable(exec_dirs)
            if changed:
                logger.debug(f"Marked {len(changed)} files executable")
        except (FilesystemError, OSError) as e:
            raise ExtractionFailed(Path(archive_path), str(e)) from e

        return toolchain_dir


__all__ = [
    "ArchiveExtractor",
    "install_dir_name",
    "installed_versions",
    "parse_install_dir_name",
    "split_install_dir_name",
]
