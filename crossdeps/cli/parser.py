"""
crossdeps CLI argument parser.

This module implements the command-line interface for crossdeps using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from crossdeps.cross.render import FORMATTERS

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("crossdeps")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """crossdeps command-line interface."""

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
            prog="crossdeps",
            description="crossdeps - cross-target build environment resolver",
            epilog='Use "crossdeps COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"crossdeps {__version__}"
        )
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
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to project configuration file (default: ./crossdeps.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            help="Project root directory (default: current directory)",
        )
        parser.add_argument(
            "--registry",
            type=Path,
            action="append",
            metavar="PATH",
            help="Registry file layered over the built-in one (repeatable)",
        )
        parser.add_argument(
            "--no-builtin",
            action="store_true",
            help="Do not load the built-in target registry",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_resolve_command(subparsers)
        self._add_targets_command(subparsers)
        self._add_validate_command(subparsers)

        return parser

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Resolve packages and environment for a target",
            description=(
                "Resolve the multi-arch package install list and the build "
                "environment for a target triple and a set of libraries"
            ),
        )
        parser.add_argument(
            "--target",
            "-t",
            action="append",
            metavar="TRIPLE",
            help=(
                "Target triple, e.g. armv7-unknown-linux-gnueabihf "
                "(can be used multiple times; falls back to CROSSDEPS_TARGET)"
            ),
        )
        parser.add_argument(
            "--deps",
            "-d",
            action="append",
            metavar="LIB,LIB,...",
            help="Comma-separated library names (can be used multiple times)",
        )
        parser.add_argument(
            "--format",
            "-f",
            dest="output_format",
            choices=sorted(FORMATTERS),
            default="text",
            metavar="FORMAT",
            help="Output format (text|json|shell) [default: text]",
        )

    def _add_targets_command(self, subparsers):
        """Add 'targets' subcommand."""
        parser = subparsers.add_parser(
            "targets",
            help="List supported targets",
            description="List the targets of the registry and their libraries",
        )
        parser.add_argument(
            "--libraries",
            "-l",
            action="store_true",
            help="Show the libraries mapped for each target",
        )

    def _add_validate_command(self, subparsers):
        """Add 'validate' subcommand."""
        subparsers.add_parser(
            "validate",
            help="Validate the registry",
            description="Check the registry for errors and questionable declarations",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

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

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "resolve": "crossdeps.cli.commands.resolve",
            "targets": "crossdeps.cli.commands.targets",
            "validate": "crossdeps.cli.commands.validate",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error(f"Failed to load command module: {e}")
            return 1

        if not hasattr(module, "run"):
            logger.error(f"Command module {module_name} has no run() function")
            return 1

        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
