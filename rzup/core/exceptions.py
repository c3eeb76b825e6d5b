"""
Centralized exception hierarchy for rzup.

Every failure that can end an install is one of the classes below. Each
carries enough context (family, tag, host triple, underlying error) to be
printed to the user as-is; none of them is retried internally.
"""

from pathlib import Path
from typing import List, Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class RzupError(Exception):
    """Base exception for all rzup errors."""

    pass


class ConfigError(RzupError):
    """Configuration file could not be parsed or holds invalid values."""

    pass


# ============================================================================
# Host / Lock Exceptions
# ============================================================================


class UnsupportedHost(RzupError):
    """Raised when the host (arch, os) pair has no pre-built toolchains."""

    def __init__(self, arch: str, os_name: str):
        self.arch = arch
        self.os_name = os_name
        super().__init__(
            f"The risc0 toolchain is not available for download on this "
            f"platform ({arch}, {os_name}). "
            "Build it yourself with: 'cargo risczero build-toolchain'"
        )


class LockUnavailable(RzupError):
    """Raised when the install lock cannot be acquired within the timeout."""

    def __init__(self, lock_path: Path, timeout: float):
        self.lock_path = lock_path
        self.timeout = timeout
        super().__init__(
            f"Could not acquire install lock {lock_path} after {timeout}s. "
            "Another rzup process may be installing toolchains."
        )


# ============================================================================
# Release / Download Exceptions
# ============================================================================


class ResolutionFailed(RzupError):
    """Release index query failed or returned an unusable body."""

    def __init__(self, family: str, selector: str, detail: str):
        self.family = family
        self.selector = selector
        self.detail = detail
        super().__init__(
            f"Could not resolve {family} release '{selector}': {detail}"
        )


class UnsupportedPlatform(RzupError):
    """Release exists but has no asset for the host triple."""

    def __init__(self, family: str, tag: str, host: str):
        self.family = family
        self.tag = tag
        self.host = host
        super().__init__(
            f"Release {tag} does not have a prebuilt {family} toolchain "
            f"for host {host}"
        )


class DownloadFailed(RzupError):
    """Asset download failed (network error, HTTP error, truncated body)."""

    def __init__(self, url: str, detail: str):
        self.url = url
        self.detail = detail
        super().__init__(f"Download of {url} failed: {detail}")


# ============================================================================
# Extraction / Installation Exceptions
# ============================================================================


class ExtractionFailed(RzupError):
    """Archive could not be unpacked."""

    def __init__(self, archive: Path, detail: str):
        self.archive = archive
        self.detail = detail
        super().__init__(f"Failed to extract {archive}: {detail}")


class InvalidToolchainLayout(RzupError):
    """Extracted directory does not look like a usable toolchain."""

    def __init__(self, path: Path, missing: Path):
        self.path = path
        self.missing = missing
        super().__init__(
            f"Invalid toolchain directory {path}: "
            f"compiler executable not found at {missing}"
        )


class UnexpectedArchiveLayout(RzupError):
    """Extracted archive does not hold exactly one top-level directory."""

    def __init__(self, path: Path, entries: List[str]):
        self.path = path
        self.entries = entries
        found = ", ".join(entries) if entries else "nothing"
        super().__init__(
            f"Expected {path} to only have 1 subdirectory, found {found}"
        )


class LinkFailed(RzupError):
    """The toolchain multiplexer refused to register the toolchain."""

    def __init__(self, name: str, path: Optional[Path], detail: str):
        self.name = name
        self.path = path
        self.detail = detail
        location = f" at {path}" if path is not None else ""
        super().__init__(f"Could not link toolchain {name}{location}: {detail}")


class InstallCopyFailed(RzupError):
    """Copying an extracted toolchain into its fixed location failed."""

    def __init__(self, source: Path, destination: Path, detail: str):
        self.source = source
        self.destination = destination
        self.detail = detail
        super().__init__(
            f"Could not install {source} to {destination}: {detail}"
        )
