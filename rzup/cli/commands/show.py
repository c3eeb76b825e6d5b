"""
Show command: report the rzup home, active toolchains and installed versions.
"""

import logging
from typing import List, Tuple

from rzup.cli.utils import print_error
from rzup.config import RzupConfig, load_config
from rzup.core.directory import get_toolchains_dir
from rzup.core.exceptions import RzupError
from rzup.toolchain.extractor import split_install_dir_name
from rzup.toolchain.families import default_families
from rzup.toolchain.linking import create_linker

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the show command.

    Args:
        args: Parsed command-line arguments with:
            - home: rzup home override
            - what: None, 'home' or 'active-toolchain'
            - show_verbose: Print full paths of installed toolchains

    Returns:
        Exit code (0 for success)
    """
    try:
        config = load_config(args.home)
    except RzupError as e:
        print_error(str(e))
        return 1

    what = getattr(args, "what", None)
    if what == "home":
        print(config.home)
        return 0
    if what == "active-toolchain":
        _print_active(config)
        return 0

    print(f"rzup home: {config.home}")
    print()
    print("active toolchains")
    print("-----------------")
    _print_active(config)
    print()
    print("installed toolchains")
    print("--------------------")
    installed = list_installed(config)
    if not installed:
        print("(none)")
    for dir_name, path in installed:
        print(path if getattr(args, "show_verbose", False) else dir_name)
    return 0


def _print_active(config: RzupConfig) -> None:
    families = default_families(config.rust_toolchain_name, config.cpp_version)
    for family in families:
        linker = create_linker(family, config.home)
        try:
            active = linker.find_active(family)
        except RzupError as e:
            logger.debug(f"Could not query {family.name} toolchain: {e}")
            print(f"{family.name}: unknown ({e.__class__.__name__})")
            continue
        if active is None:
            print(f"{family.name}: not installed")
        else:
            print(f"{family.name}: {active.name} ({active.path})")


def list_installed(config: RzupConfig) -> List[Tuple[str, str]]:
    """
    List per-version toolchain directories under the rzup home.

    Returns:
        Sorted (directory name, full path) pairs
    """
    toolchains = get_toolchains_dir(config.home)
    if not toolchains.is_dir():
        return []
    return sorted(
        (entry.name, str(entry))
        for entry in toolchains.iterdir()
        if entry.is_dir() and split_install_dir_name(entry.name) is not None
    )
