"""
Host platform detection for rzup.

Pre-built toolchains are only published for a handful of hosts. This module
maps the running interpreter's (CPU architecture, operating system) pair onto
the target triple used in release asset names.

Usage:
    from rzup.core.platform import detect_host_triple

    triple = detect_host_triple()   # e.g. 'x86_64-unknown-linux-gnu'
"""

import functools
import platform
from typing import Dict, List, Optional, Tuple

from .exceptions import UnsupportedHost

# (normalized arch, normalized os) -> target triple
SUPPORTED_HOSTS: Dict[Tuple[str, str], str] = {
    ("x86_64", "linux"): "x86_64-unknown-linux-gnu",
    ("x86_64", "macos"): "x86_64-apple-darwin",
    ("aarch64", "macos"): "aarch64-apple-darwin",
    ("x86_64", "windows"): "x86_64-pc-windows-msvc",
}


def _normalize_os(system: str) -> str:
    """
    Normalize ``platform.system()`` output.

    Returns:
        'linux', 'macos', 'windows', or the lowercased input for anything else
    """
    system = system.lower()
    if system == "darwin":
        return "macos"
    return system


def _normalize_arch(machine: str) -> str:
    """
    Normalize ``platform.machine()`` output.

    Returns:
        'x86_64', 'aarch64', or the lowercased input for anything else
    """
    machine = machine.lower()
    if machine in ("x86_64", "amd64", "x64"):
        return "x86_64"
    elif machine in ("aarch64", "arm64"):
        return "aarch64"
    return machine


def host_triple_for(machine: str, system: str) -> Optional[str]:
    """
    Look up the target triple for a raw (machine, system) pair.

    Args:
        machine: Value as returned by ``platform.machine()``
        system: Value as returned by ``platform.system()``

    Returns:
        Target triple, or None if the host has no pre-built toolchains

    Example:
        >>> host_triple_for("arm64", "Darwin")
        'aarch64-apple-darwin'
    """
    return SUPPORTED_HOSTS.get((_normalize_arch(machine), _normalize_os(system)))


@functools.lru_cache(maxsize=1)
def detect_host_triple() -> str:
    """
    Detect the host target triple.

    This function is cached - it only runs detection once per process.

    Returns:
        Target triple of the running host

    Raises:
        UnsupportedHost: If the host is not in the supported table
    """
    machine = platform.machine()
    system = platform.system()
    triple = host_triple_for(machine, system)
    if triple is None:
        raise UnsupportedHost(_normalize_arch(machine), _normalize_os(system))
    return triple


def get_supported_hosts() -> List[str]:
    """Return all target triples that have pre-built toolchains."""
    return sorted(SUPPORTED_HOSTS.values())


def clear_platform_cache():
    """
    Clear the host detection cache.

    Forces the next call to detect_host_triple() to re-detect. Useful in tests.
    """
    detect_host_triple.cache_clear()


__all__ = [
    "SUPPORTED_HOSTS",
    "host_triple_for",
    "detect_host_triple",
    "get_supported_hosts",
    "clear_platform_cache",
]
