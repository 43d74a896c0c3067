"""Main CLI entry point for asb-fetch.

Delegates to the CLI runner, which owns argument parsing and error
reporting.
"""

import sys

import uvloop

from asb_fetch.cli.runner import CLIRunner
from asb_fetch.logger import get_logger

logger = get_logger(__name__)


async def async_main() -> None:
    """Run the CLI asynchronously."""
    logger.info("CLI started")
    runner = CLIRunner()
    try:
        await runner.run()
        logger.debug("CLI completed successfully")
    except Exception:
        logger.exception("CLI encountered an error")
        raise


def main() -> None:
    """Run the CLI application on the uvloop event loop.

    Raises:
        SystemExit: With the exit code of the failed stage.

    """
    try:
        uvloop.run(async_main())
    except KeyboardInterrupt:
        logger.info("CLI cancelled by user")
        sys.exit(1)
    except Exception:
        logger.exception("❌ Unexpected error")
        sys.exit(1)


if __name__ == "__main__":
    main()
