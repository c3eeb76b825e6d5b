"""
Toolchain command: install, update or list a single toolchain family.
"""

import logging
from typing import List, Optional

from rzup.cli.commands.install import print_report
from rzup.cli.utils import print_error, progress_printer, safe_print
from rzup.config import RzupConfig, load_config
from rzup.core.directory import get_toolchains_dir
from rzup.core.exceptions import RzupError
from rzup.core.platform import detect_host_triple
from rzup.toolchain.extractor import installed_versions
from rzup.toolchain.families import ToolchainFamily
from rzup.toolchain.installer import InstallCoordinator
from rzup.toolchain.linking import create_linker

logger = logging.getLogger(__name__)


def _family_names(args) -> Optional[List[str]]:
    family = getattr(args, "family", None)
    return [family] if family else None


def _install(args, tag: Optional[str], summary: str) -> int:
    try:
        config = load_config(args.home)
        coordinator = InstallCoordinator(
            config, progress_callback=progress_printer(args.quiet)
        )
        report = coordinator.install_all(
            tag, families=_family_names(args), ignore_pins=tag is not None
        )
    except RzupError as e:
        print_error(str(e))
        return 1
    return print_report(report, summary)


def run_install(args) -> int:
    """
    Install one family at a release tag.

    An explicit tag overrides the family's pinned version.

    Args:
        args: Parsed command-line arguments with:
            - family: 'rust' or 'cpp'
            - tag: Release tag, or None for the default release

    Returns:
        Exit code (0 for success, 1 for error)
    """
    return _install(args, args.tag, f"{args.family} toolchain installed")


def run_update(args) -> int:
    """
    Install the default release of one family, or of all of them.

    Args:
        args: Parsed command-line arguments with:
            - family: 'rust', 'cpp' or None for every family

    Returns:
        Exit code (0 for success, 1 for error)
    """
    label = f"{args.family} toolchain" if args.family else "All toolchains"
    return _install(args, None, f"{label} updated")


def run_list(args) -> int:
    """
    List extracted versions per family, marking the active one.

    Args:
        args: Parsed command-line arguments with:
            - family: 'rust', 'cpp' or None for every family

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        config = load_config(args.home)
        host = detect_host_triple()
        families = InstallCoordinator(config).select_families(_family_names(args))
    except RzupError as e:
        print_error(str(e))
        return 1

    toolchains = get_toolchains_dir(config.home)
    for family in families:
        tags = installed_versions(toolchains, family, host)
        active_tag = _active_tag(config, family)
        safe_print(f"{family.name}:")
        if not tags:
            safe_print("  (none)")
        for tag in reversed(tags):
            marker = " (active)" if tag == active_tag else ""
            safe_print(f"  {tag}{marker}")
    return 0


def _active_tag(config: RzupConfig, family: ToolchainFamily) -> Optional[str]:
    try:
        active = create_linker(family, config.home).find_active(family)
    except RzupError as e:
        logger.debug(f"Could not query active {family.name} toolchain: {e}")
        return None
    return active.tag if active else None
