"""
Toolchain management module for rzup.

This module provides functionality for:
- Toolchain family definitions
- Release resolution and asset download
- Archive extraction
- Toolchain activation (rustup linking and direct installs)
- Install orchestration
"""

from rzup.toolchain.families import (
    CPP,
    RUST,
    LinkKind,
    ToolchainFamily,
    default_families,
    get_family,
)
from rzup.toolchain.resolver import (
    ReleaseAsset,
    ReleaseDescriptor,
    ReleaseResolver,
    create_http_session,
)
from rzup.toolchain.fetcher import ArchiveFetcher
from rzup.toolchain.extractor import ArchiveExtractor, install_dir_name
from rzup.toolchain.linking import (
    DirectInstallLinker,
    InstalledToolchain,
    RustupLinker,
    create_linker,
)
from rzup.toolchain.installer import (
    InstallCoordinator,
    InstallPhase,
    InstallReport,
)

__all__ = [
    # Families
    "ToolchainFamily",
    "LinkKind",
    "RUST",
    "CPP",
    "default_families",
    "get_family",
    # Resolution / download
    "ReleaseAsset",
    "ReleaseDescriptor",
    "ReleaseResolver",
    "create_http_session",
    "ArchiveFetcher",
    # Extraction
    "ArchiveExtractor",
    "install_dir_name",
    # Linking
    "InstalledToolchain",
    "RustupLinker",
    "DirectInstallLinker",
    "create_linker",
    # Orchestration
    "InstallCoordinator",
    "InstallPhase",
    "InstallReport",
]
