"""CLI argument parser for asb-fetch.

The command takes no positional arguments; every option overrides one
value of the settings file for a single run.
"""

import argparse
from argparse import Namespace
from collections.abc import Sequence
from pathlib import Path


class CLIParser:
    """Command-line argument parser for asb-fetch."""

    def __init__(self, argv: Sequence[str] | None = None) -> None:
        """Initialize the CLI parser.

        Args:
            argv: Arguments to parse (defaults to sys.argv[1:])

        """
        self.argv = argv

    def parse_args(self) -> Namespace:
        """Parse command-line arguments.

        Returns:
            Namespace: Parsed arguments namespace.

        """
        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_directory_options(parser)
        return parser.parse_args(self.argv)

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog="asb-fetch",
            description=(
                "Download and install the latest ASB and swap binaries "
                "for this machine"
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Install asb and swap into the configured directory (default ./bin)
  %(prog)s

  # Install somewhere else, one download at a time
  %(prog)s --install-dir ~/.local/bin --sequential

  # Raise the GitHub API rate limit with a stored token
  keyring set asb-fetch-github-token token
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show asb-fetch version and exit",
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show detailed logging on the console",
        )
        parser.add_argument(
            "--sequential",
            action="store_true",
            help="Download archives one at a time",
        )

    def _add_directory_options(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--install-dir",
            type=Path,
            help="Directory receiving the executables",
        )
        parser.add_argument(
            "--staging-dir",
            type=Path,
            help="Directory holding archives until they are extracted",
        )
        parser.add_argument(
            "--config-dir",
            type=Path,
            help="Directory holding settings.conf "
            "(default: ~/.config/asb-fetch)",
        )
