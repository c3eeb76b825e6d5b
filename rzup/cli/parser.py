"""
rzup CLI argument parser.

This module implements the command-line interface for rzup using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rzup import __version__

logger = logging.getLogger(__name__)

FAMILY_NAMES = ["rust", "cpp"]


class CLI:
    """rzup command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="rzup",
            description="rzup - RISC Zero toolchain installer",
            epilog='Use "rzup COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument("--version", action="version", version=f"rzup {__version__}")
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--home",
            type=Path,
            metavar="PATH",
            help="rzup home directory (default: $RISC0_DATA_DIR or ~/.rzup)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_show_command(subparsers)
        self._add_check_command(subparsers)
        self._add_toolchain_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install RISC Zero toolchains",
            description="Download and activate the RISC Zero C++ and Rust toolchains",
        )
        parser.add_argument(
            "--version",
            dest="toolchain_version",
            metavar="TAG",
            help="Rust toolchain release tag (default: latest)",
        )

    def _add_show_command(self, subparsers):
        """Add 'show' subcommand."""
        parser = subparsers.add_parser(
            "show",
            help="Show the active and installed toolchains",
            description="Show the rzup home, active toolchains and installed versions",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            dest="show_verbose",
            action="store_true",
            help="Print the full path of each installed toolchain",
        )
        parser.add_argument(
            "what",
            nargs="?",
            choices=["home", "active-toolchain"],
            help="Show only the rzup home or the active toolchains",
        )

    def _add_check_command(self, subparsers):
        """Add 'check' subcommand."""
        subparsers.add_parser(
            "check",
            help="Check for toolchain updates",
            description="Compare installed toolchains with the latest releases",
        )

    def _add_toolchain_command(self, subparsers):
        """Add 'toolchain' subcommand with sub-subcommands."""
        parser = subparsers.add_parser(
            "toolchain",
            help="Manage a single toolchain family",
            description="Install, update or list the rust and cpp toolchains",
        )

        toolchain_subparsers = parser.add_subparsers(
            dest="toolchain_command",
            help="Toolchain management commands",
            metavar="COMMAND",
        )

        # toolchain install
        install_parser = toolchain_subparsers.add_parser(
            "install",
            help="Install one toolchain family",
            description="Install a toolchain family, optionally at a release tag",
        )
        install_parser.add_argument("family", choices=FAMILY_NAMES)
        install_parser.add_argument(
            "tag", nargs="?", help="Release tag (default: latest or pinned version)"
        )

        # toolchain update
        update_parser = toolchain_subparsers.add_parser(
            "update",
            help="Update toolchains to the default release",
            description="Install the latest (or pinned) release of toolchain families",
        )
        update_parser.add_argument("family", nargs="?", choices=FAMILY_NAMES)

        # toolchain list
        list_parser = toolchain_subparsers.add_parser(
            "list",
            help="List installed toolchain versions",
            description="Show extracted toolchain versions and mark the active one",
        )
        list_parser.add_argument("family", nargs="?", choices=FAMILY_NAMES)

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Parse arguments and run the selected command.

        Args:
            argv: Command-line arguments (default: sys.argv[1:])

        Returns:
            Exit code
        """
        args = self.parser.parse_args(argv)
        self._configure_logging(args)

        if not args.command:
            self.parser.print_help()
            return 1

        return self._dispatch_command(args)

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        # Special handling for toolchain command (has sub-commands)
        if args.command == "toolchain":
            return self._dispatch_toolchain_command(args)

        command_map = {
            "install": "rzup.cli.commands.install",
            "show": "rzup.cli.commands.show",
            "check": "rzup.cli.commands.check",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)

    def _dispatch_toolchain_command(self, args) -> int:
        """
        Dispatch toolchain sub-commands.

        Args:
            args: Parsed arguments with toolchain_command field

        Returns:
            Exit code from command handler
        """
        if not getattr(args, "toolchain_command", None):
            logger.error("No toolchain sub-command specified")
            return 1

        from rzup.cli.commands import toolchain

        toolchain_command_map = {
            "install": toolchain.run_install,
            "update": toolchain.run_update,
            "list": toolchain.run_list,
        }
        return toolchain_command_map[args.toolchain_command](args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
