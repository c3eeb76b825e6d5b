"""YAML configuration loader for rzup.

Settings come from three places, later ones winning:
built-in defaults, ``<rzup home>/config.yaml``, and the environment.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from rzup.core.directory import get_config_path, get_rzup_home
from rzup.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_RUST_TOOLCHAIN_NAME = "risc0"
DEFAULT_CPP_VERSION = "2024.01.05"
TOKEN_ENV_VAR = "GITHUB_TOKEN"


@dataclass
class RzupConfig:
    """Resolved rzup settings."""

    home: Path
    api_base_url: str = DEFAULT_API_BASE_URL
    github_token: Optional[str] = field(default=None, repr=False)
    http_timeout: float = 30
    lock_timeout: float = -1  # -1 blocks until the lock is free
    rust_toolchain_name: str = DEFAULT_RUST_TOOLCHAIN_NAME
    cpp_version: Optional[str] = DEFAULT_CPP_VERSION


_STR_KEYS = ("api_base_url", "github_token", "rust_toolchain_name", "cpp_version")
_NULLABLE_KEYS = ("github_token", "cpp_version")
_NUMBER_KEYS = ("http_timeout", "lock_timeout")


def _load_yaml(config_file: Path) -> Dict[str, Any]:
    """
    Read ``config_file`` if it exists.

    Returns:
        Mapping from the file, or an empty dict when the file is absent

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping
    """
    if not config_file.exists():
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file} must contain a mapping at top level")
    return data


def _apply(config: RzupConfig, data: Dict[str, Any], source: Path) -> None:
    for key, value in data.items():
        if key in _STR_KEYS:
            if value is None and key not in _NULLABLE_KEYS:
                raise ConfigError(f"{source}: '{key}' must be a string, not null")
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{source}: '{key}' must be a string")
            setattr(config, key, value)
        elif key in _NUMBER_KEYS:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{source}: '{key}' must be a number")
            setattr(config, key, value)
        else:
            logger.warning(f"{source}: ignoring unknown setting '{key}'")


def load_config(home: Optional[Path] = None) -> RzupConfig:
    """
    Build the effective configuration.

    Args:
        home: Explicit rzup home (default: $RISC0_DATA_DIR or ~/.rzup)

    Returns:
        RzupConfig with file and environment overrides applied

    Raises:
        ConfigError: If config.yaml is malformed

    Example:
        >>> config = load_config()
        >>> config.rust_toolchain_name
        'risc0'
    """
    resolved_home = get_rzup_home(home)
    config = RzupConfig(home=resolved_home)

    config_file = get_config_path(resolved_home)
    _apply(config, _load_yaml(config_file), config_file)

    token = os.environ.get(TOKEN_ENV_VAR)
    if token:
        config.github_token = token

    return config
