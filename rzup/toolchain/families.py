"""
Toolchain families known to rzup.

A family bundles everything that differs between toolchain products: where
its releases live, how its per-host asset is named, how the asset is
compressed, which directories hold executables, and whether it is activated
through rustup (chained) or copied into a fixed path (direct).
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import PurePosixPath
from typing import Callable, List, Optional, Sequence, Tuple

from rzup.core.filesystem import ArchiveFormat


class LinkKind(Enum):
    """How an extracted toolchain is activated."""

    CHAINED = "chained"  # registered with rustup under a stable name
    DIRECT = "direct"  # copied into <rzup home>/<stable name>


def _no_executable_dirs(host: str) -> List[str]:
    return []


@dataclass(frozen=True)
class ToolchainFamily:
    """
    Static description of one toolchain product.

    Attributes:
        name: Short identifier used in directory names ('rust', 'cpp')
        repo: GitHub repository as 'owner/name'
        archive_format: Compression of the release assets
        link_kind: Activation strategy
        stable_name: rustup toolchain name (chained) or directory name
            under the rzup home (direct)
        asset_namer: Maps a host triple to the asset file name, or None
            when the family publishes nothing for that host
        executable_dirs_for: Maps a host triple to directories, relative to
            the extracted toolchain, whose files must be executable
        pinned_version: Tag always installed for this family, ignoring the
            caller's selector
    """

    name: str
    repo: str
    archive_format: ArchiveFormat
    link_kind: LinkKind
    stable_name: str
    asset_namer: Callable[[str], Optional[str]] = field(repr=False)
    executable_dirs_for: Callable[[str], List[str]] = field(
        default=_no_executable_dirs, repr=False
    )
    pinned_version: Optional[str] = None

    def asset_name(self, host: str) -> Optional[str]:
        return self.asset_namer(host)

    def executable_dirs(self, host: str) -> List[PurePosixPath]:
        return [PurePosixPath(d) for d in self.executable_dirs_for(host)]

    def selector_for(self, selector: Optional[str]) -> Optional[str]:
        """Version selector to resolve, honoring a pinned version."""
        return self.pinned_version if self.pinned_version else selector

    def __str__(self) -> str:
        return self.name


# ============================================================================
# Rust
# ============================================================================


def _rust_asset_name(host: str) -> Optional[str]:
    return f"rust-toolchain-{host}.tar.gz"


def _rust_executable_dirs(host: str) -> List[str]:
    return ["bin", f"lib/rustlib/{host}/bin"]


RUST = ToolchainFamily(
    name="rust",
    repo="risc0/rust",
    archive_format=ArchiveFormat.TAR_GZ,
    link_kind=LinkKind.CHAINED,
    stable_name="risc0",
    asset_namer=_rust_asset_name,
    executable_dirs_for=_rust_executable_dirs,
)


# ============================================================================
# C++
# ============================================================================

_CPP_ASSETS = {
    "aarch64-apple-darwin": "riscv32im-osx-arm64.tar.xz",
    "x86_64-unknown-linux-gnu": "riscv32im-linux-x86_64.tar.xz",
}


def _cpp_asset_name(host: str) -> Optional[str]:
    return _CPP_ASSETS.get(host)


CPP = ToolchainFamily(
    name="cpp",
    repo="risc0/toolchain",
    archive_format=ArchiveFormat.TAR_XZ,
    link_kind=LinkKind.DIRECT,
    stable_name="cpp",
    asset_namer=_cpp_asset_name,
    pinned_version="2024.01.05",
)


def default_families(
    rust_toolchain_name: Optional[str] = None,
    cpp_version: Optional[str] = CPP.pinned_version,
) -> Tuple[ToolchainFamily, ...]:
    """
    Families installed by ``rzup install``, in install order.

    The C++ toolchain comes first: it lays out the rzup home that the Rust
    toolchain install then relies on.

    Args:
        rust_toolchain_name: rustup name for the Rust toolchain
        cpp_version: Tag to pin the C++ toolchain to; None follows the selector
    """
    rust = RUST
    if rust_toolchain_name:
        rust = replace(rust, stable_name=rust_toolchain_name)
    cpp = replace(CPP, pinned_version=cpp_version)
    return (cpp, rust)


def get_family(
    name: str, families: Optional[Sequence[ToolchainFamily]] = None
) -> ToolchainFamily:
    """
    Look up a family by name.

    Args:
        name: Family name ('rust', 'cpp')
        families: Families to search (default: the built-in ones)

    Raises:
        KeyError: If no family has that name
    """
    for family in families if families is not None else (RUST, CPP):
        if family.name == name:
            return family
    raise KeyError(f"Unknown toolchain family: {name}")


__all__ = [
    "LinkKind",
    "ToolchainFamily",
    "RUST",
    "CPP",
    "default_families",
    "get_family",
]
