"""
Install command: download and activate every toolchain family.
"""

import logging

from rzup.cli.utils import print_error, progress_printer, safe_print
from rzup.config import load_config
from rzup.core.exceptions import RzupError
from rzup.toolchain.installer import InstallCoordinator, InstallReport

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments with:
            - home: rzup home override
            - toolchain_version: Release tag, or None for latest
            - quiet: Hide download progress

    Returns:
        Exit code (0 for success, 1 if any family failed)
    """
    try:
        config = load_config(args.home)
        coordinator = InstallCoordinator(
            config, progress_callback=progress_printer(args.quiet)
        )
        report = coordinator.install_all(args.toolchain_version)
    except RzupError as e:
        print_error(str(e))
        return 1

    return print_report(report)


def print_report(report: InstallReport, summary: str = "All toolchains installed") -> int:
    """Print one line per family of an install run and return its exit code."""
    for toolchain in report.installed:
        safe_print(f"✓ {toolchain}")

    if not report.ok:
        safe_print(f"✗ {report.failed_family}")
        print_error(str(report.error))
        return 1

    print(f"{summary} for {report.host}")
    return 0
