"""
Core functionality for rzup.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    get_rzup_home,
    get_toolchains_dir,
    get_lock_path,
    get_config_path,
)

from .locking import InstallLock

from .platform import (
    detect_host_triple,
    host_triple_for,
    get_supported_hosts,
    clear_platform_cache,
)

from .exceptions import (
    RzupError,
    ConfigError,
    UnsupportedHost,
    LockUnavailable,
    ResolutionFailed,
    UnsupportedPlatform,
    DownloadFailed,
    ExtractionFailed,
    InvalidToolchainLayout,
    UnexpectedArchiveLayout,
    LinkFailed,
    InstallCopyFailed,
)

__all__ = [
    "get_rzup_home",
    "get_toolchains_dir",
    "get_lock_path",
    "get_config_path",
    "InstallLock",
    "detect_host_triple",
    "host_triple_for",
    "get_supported_hosts",
    "clear_platform_cache",
    "RzupError",
    "ConfigError",
    "UnsupportedHost",
    "LockUnavailable",
    "ResolutionFailed",
    "UnsupportedPlatform",
    "DownloadFailed",
    "ExtractionFailed",
    "InvalidToolchainLayout",
    "UnexpectedArchiveLayout",
    "LinkFailed",
    "InstallCopyFailed",
]
