"""
gup CLI argument parser.

This module implements the command-line interface for gup using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gup.config.parser import LATEST_SENTINEL, load_config
from gup.core.exceptions import GupError
from gup.core.progress import NullReporter, ProgressReporter, Spinner
from gup.updater.pipeline import GoUpdater

logger = logging.getLogger(__name__)


class CLI:
    """gup command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="gup",
            description="gup - replace a Go installation with a downloaded release",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version",
            default=LATEST_SENTINEL,
            metavar="VERSION",
            help='version to update to (default: "latest")',
        )
        parser.add_argument(
            "--goroot",
            default="",
            metavar="PATH",
            help="location of goroot; this directory is deleted and replaced",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="YAML file overriding download endpoints",
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

        return parser

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

        try:
            return self._run_update(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except GupError as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _run_update(self, args) -> int:
        """
        Build the updater from parsed arguments and run it.

        Args:
            args: Parsed arguments

        Returns:
            Exit code
        """
        config = load_config(args.config)
        updater = GoUpdater(config=config, reporter=self._create_reporter(args))

        result = updater.update(version=args.version, goroot=args.goroot)

        logger.info(
            f"installed {result.filename} into {result.goroot} "
            f"({result.files_installed} files)"
        )
        logger.debug(f"scratch directory left at {result.scratch_dir}")
        return 0

    def _create_reporter(self, args) -> ProgressReporter:
        """Spinner on an interactive stderr, otherwise a silent reporter."""
        if args.quiet or not sys.stderr.isatty():
            return NullReporter()
        return Spinner(final_message="\n")

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


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
