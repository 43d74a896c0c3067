"""CLI runner for asb-fetch.

Loads the settings file, applies command-line overrides and runs the
fetch-and-install workflow, translating failures into exit codes.
"""

import sys
from argparse import Namespace
from collections.abc import Sequence
from pathlib import Path

from asb_fetch import __version__
from asb_fetch.cli.parser import CLIParser
from asb_fetch.config import FetchConfig, Paths, SettingsManager
from asb_fetch.core.workflow import RunResult, run_install
from asb_fetch.exceptions import AsbFetchError, FilesystemError
from asb_fetch.logger import (
    ConfigurationError,
    get_logger,
    restore_console_level,
    set_console_level,
    update_logger_from_config,
)

logger = get_logger(__name__)


def display_path(path: Path) -> str:
    """Render ``path`` relative to the working directory when possible."""
    try:
        return f"./{path.relative_to(Path.cwd())}"
    except ValueError:
        return str(path)


class CLIRunner:
    """CLI runner and orchestrator."""

    def __init__(self, argv: Sequence[str] | None = None) -> None:
        """Initialize CLI runner.

        Args:
            argv: Arguments to parse (defaults to sys.argv[1:])

        """
        self.argv = argv

    async def run(self) -> None:
        """Run the CLI application.

        Exits with the failing error's exit code; returns normally on
        success.
        """
        args = CLIParser(self.argv).parse_args()

        if args.version:
            print(__version__)
            return

        try:
            config = self.load_config(args)
            try:
                update_logger_from_config(
                    config.console_log_level,
                    config.log_level,
                    config.logs_dir,
                )
            except ConfigurationError as e:
                msg = f"cannot open log directory: {e}"
                raise FilesystemError(msg, str(config.logs_dir)) from e
            if args.verbose:
                set_console_level("DEBUG")
            try:
                result = await run_install(config)
            finally:
                if args.verbose:
                    restore_console_level()
        except AsbFetchError as e:
            logger.error("Run failed: %s", e)
            prefix = f"[{e.stage}] " if e.stage else ""
            print(f"❌ {prefix}{e}")
            sys.exit(e.exit_code)
        except KeyboardInterrupt:
            print("\n⏹️  Operation cancelled by user")
            sys.exit(1)

        self.print_summary(config, result)

    @staticmethod
    def load_config(args: Namespace) -> FetchConfig:
        """Load the settings file and apply command-line overrides.

        Raises:
            ConfigError: If the settings file holds an invalid value
            FilesystemError: If the default settings cannot be written

        """
        config_dir = None
        if args.config_dir:
            config_dir = Paths.expand_path(str(args.config_dir))
        config = SettingsManager(config_dir).load()
        return config.with_overrides(
            install_dir=(
                Paths.expand_path(str(args.install_dir))
                if args.install_dir
                else None
            ),
            staging_dir=(
                Paths.expand_path(str(args.staging_dir))
                if args.staging_dir
                else None
            ),
            parallel_downloads=False if args.sequential else None,
        )

    @staticmethod
    def print_summary(config: FetchConfig, result: RunResult) -> None:
        """Print the installed binaries and how to start them."""
        print(f"✅ Installed {result.version} for {result.platform}")
        for path in result.installed:
            print(f"   {display_path(path)}")

        asb = display_path(config.install_dir / "asb")
        print()
        print("Next steps:")
        print("1) Start ASB on testnet:")
        print(f"   {asb} --testnet start")
