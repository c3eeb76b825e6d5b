"""
rzup/toolchain/linking.py

Activation of extracted toolchains under their stable names.

Two strategies exist:
- RustupLinker registers the extracted directory with rustup
  (``rustup toolchain link``), replacing any toolchain of the same name.
- DirectInstallLinker copies the archive's single top-level directory into
  a fixed directory under the rzup home, replacing what was there.
"""

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from rzup.core.exceptions import (
    InstallCopyFailed,
    InvalidToolchainLayout,
    LinkFailed,
    UnexpectedArchiveLayout,
)
from rzup.core.filesystem import FilesystemError, copy_tree, safe_rmtree
from rzup.toolchain.extractor import split_install_dir_name
from rzup.toolchain.families import LinkKind, ToolchainFamily

logger = logging.getLogger(__name__)

# "(default)", "(override)" and similar markers rustup prints before the path
_RUSTUP_MARKERS = re.compile(r"^(\([^)]*\)\s*)*")


@dataclass
class InstalledToolchain:
    """An activated toolchain."""

    family: str
    name: str
    path: Path
    tag: Optional[str] = None
    linked: bool = False

    def __str__(self) -> str:
        version = f" {self.tag}" if self.tag else ""
        return f"{self.family}{version} ({self.name}) at {self.path}"


def _tag_from_path(path: Path) -> Optional[str]:
    parts = split_install_dir_name(path.name)
    return parts[2] if parts else None


# ============================================================================
# Chained (rustup)
# ============================================================================


class RustupLinker:
    """Registers toolchains with rustup under a stable name."""

    def __init__(self, rustup: str = "rustup", windows: Optional[bool] = None):
        """
        Args:
            rustup: rustup executable
            windows: Expect ``rustc.exe`` instead of ``rustc`` (default: host OS)
        """
        self.rustup = rustup
        self.windows = os.name == "nt" if windows is None else windows

    @property
    def rustc_exe(self) -> str:
        return "rustc.exe" if self.windows else "rustc"

    def _run(self, args: Sequence[Union[str, Path]], name: str) -> str:
        """
        Run rustup with ``args`` and return stdout.

        Raises:
            LinkFailed: If rustup cannot be started or exits non-zero
        """
        cmd = [self.rustup, *[str(a) for a in args]]
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise LinkFailed(
                name, None, f"could not run {self.rustup}: rustup not installed? ({e})"
            ) from e

        if result.returncode != 0:
            detail = f"failed to execute {' '.join(cmd)}\n    status: {result.returncode}"
            if result.stdout.strip():
                detail += f"\n    stdout:\n        {result.stdout.strip()}"
            if result.stderr.strip():
                detail += f"\n    stderr:\n        {result.stderr.strip()}"
            raise LinkFailed(name, None, detail)

        return result.stdout

    def find_by_name(self, name: str) -> Optional[Path]:
        """
        Look up the directory of the rustup toolchain called ``name``.

        Returns:
            Toolchain directory, or None if rustup does not know ``name``
        """
        out = self._run(["toolchain", "list", "--verbose"], name)
        for line in out.splitlines():
            line = line.strip()
            fields = line.split(None, 1)
            if not fields or fields[0] != name:
                continue
            rest = _RUSTUP_MARKERS.sub("", fields[1].strip()) if len(fields) > 1 else ""
            if rest:
                return Path(rest)
        return None

    def link(
        self, extracted_dir: Path, family: ToolchainFamily, tag: Optional[str] = None
    ) -> InstalledToolchain:
        """
        Register ``extracted_dir`` as rustup toolchain ``family.stable_name``.

        Raises:
            InvalidToolchainLayout: If the compiler binary is missing
            LinkFailed: If any rustup call fails (``extracted_dir`` is kept)
        """
        name = family.stable_name
        extracted_dir = Path(extracted_dir)
        logger.info(f"Activating rustup toolchain {name} at {extracted_dir}")

        rustc_path = extracted_dir / "bin" / self.rustc_exe
        if not rustc_path.is_file():
            raise InvalidToolchainLayout(extracted_dir, rustc_path)

        if self.find_by_name(name) is not None:
            logger.debug(f"Removing existing rustup toolchain {name}")
            self._run(["toolchain", "remove", name], name)

        try:
            self._run(["toolchain", "link", name, extracted_dir], name)
        except LinkFailed as e:
            raise LinkFailed(name, extracted_dir, e.detail) from e

        logger.info(f"rustup toolchain {name} was linked successfully")
        return InstalledToolchain(
            family=family.name, name=name, path=extracted_dir, tag=tag, linked=True
        )

    def find_active(self, family: ToolchainFamily) -> Optional[InstalledToolchain]:
        path = self.find_by_name(family.stable_name)
        if path is None:
            return None
        return InstalledToolchain(
            family=family.name,
            name=family.stable_name,
            path=path,
            tag=_tag_from_path(path),
            linked=True,
        )


# ============================================================================
# Direct install
# ============================================================================


class DirectInstallLinker:
    """Copies toolchains into ``<home>/<stable name>``."""

    def __init__(self, home: Path):
        self.home = Path(home)

    def install_path(self, family: ToolchainFamily) -> Path:
        return self.home / family.stable_name

    def _single_subdir(self, extracted_dir: Path) -> Path:
        entries: List[Path] = sorted(extracted_dir.iterdir())
        if len(entries) != 1 or not entries[0].is_dir() or entries[0].is_symlink():
            raise UnexpectedArchiveLayout(extracted_dir, [e.name for e in entries])
        return entries[0]

    def link(
        self, extracted_dir: Path, family: ToolchainFamily, tag: Optional[str] = None
    ) -> InstalledToolchain:
        """
        Install the single top-level directory of ``extracted_dir``.

        The new tree is copied to a staging directory first; the previous
        installation is only removed once the copy is complete.

        Raises:
            UnexpectedArchiveLayout: If ``extracted_dir`` does not hold exactly
                one directory (the existing install is left alone)
            InstallCopyFailed: If copying or swapping fails
        """
        extracted_dir = Path(extracted_dir)
        source = self._single_subdir(extracted_dir)
        target = self.install_path(family)
        staging = self.home / f".{family.stable_name}.staging"

        logger.info(f"Installing {family.name} toolchain to {target}")
        try:
            self.home.mkdir(parents=True, exist_ok=True)
            safe_rmtree(staging, require_prefix=self.home)
            copy_tree(source, staging)
            if target.exists() or target.is_symlink():
                safe_rmtree(target, require_prefix=self.home)
            staging.rename(target)
        except (FilesystemError, OSError) as e:
            self._discard_staging(staging)
            raise InstallCopyFailed(source, target, str(e)) from e

        return InstalledToolchain(
            family=family.name, name=family.stable_name, path=target, tag=tag
        )

    def _discard_staging(self, staging: Path) -> None:
        try:
            safe_rmtree(staging, require_prefix=self.home)
        except (FilesystemError, OSError) as e:
            logger.warning(f"Failed to remove staging directory {staging}: {e}")

    def find_active(self, family: ToolchainFamily) -> Optional[InstalledToolchain]:
        target = self.install_path(family)
        if not target.is_dir():
            return None
        return InstalledToolchain(family=family.name, name=family.stable_name, path=target)


Linker = Union[RustupLinker, DirectInstallLinker]


def create_linker(family: ToolchainFamily, home: Path, rustup: str = "rustup") -> Linker:
    """Pick the activation strategy for ``family``."""
    if family.link_kind is LinkKind.CHAINED:
        return RustupLinker(rustup=rustup)
    return DirectInstallLinker(home)


__all__ = [
    "InstalledToolchain",
    "RustupLinker",
    "DirectInstallLinker",
    "Linker",
    "create_linker",
]
