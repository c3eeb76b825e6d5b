"""
Directory structure management for rzup.

Directory Structure:
    rzup home ($RISC0_DATA_DIR or ~/.rzup/):
        - toolchains/  : One extracted directory per (family, host, tag)
        - rzup.lock    : Install lock file
        - cpp/         : Active direct-install C++ toolchain
        - config.yaml  : Optional user configuration
"""

import os
from pathlib import Path
from typing import Optional

HOME_ENV_VAR = "RISC0_DATA_DIR"
TOOLCHAINS_DIR_NAME = "toolchains"
LOCK_FILE_NAME = "rzup.lock"
CONFIG_FILE_NAME = "config.yaml"


def get_rzup_home(override: Optional[Path] = None) -> Path:
    """
    Get the rzup home directory.

    Args:
        override: Explicit home directory (wins over the environment)

    Returns:
        Path: ``override``, else ``$RISC0_DATA_DIR``, else ``~/.rzup``

    Example:
        >>> get_rzup_home()
        PosixPath('/home/user/.rzup')
    """
    if override is not None:
        return Path(override)

    env_dir = os.environ.get(HOME_ENV_VAR)
    if env_dir:
        return Path(env_dir)

    return Path.home() / ".rzup"


def get_toolchains_dir(home: Path) -> Path:
    """Directory holding per-version extracted toolchains."""
    return home / TOOLCHAINS_DIR_NAME


def get_lock_path(home: Path) -> Path:
    """Path of the install lock file."""
    return home / LOCK_FILE_NAME


def get_config_path(home: Path) -> Path:
    """Path of the optional user configuration file."""
    return home / CONFIG_FILE_NAME


__all__ = [
    "HOME_ENV_VAR",
    "get_rzup_home",
    "get_toolchains_dir",
    "get_lock_path",
    "get_config_path",
]
