"""Logging utilities for asb-fetch.

This package provides structured logging with:
- Colored console output with ANSI color codes
- File rotation using standard RotatingFileHandler
- Async-safe logging via QueueHandler/QueueListener
- Hierarchical logger naming (e.g., asb_fetch.core.download)

Architecture:
    Application → QueueHandler → Queue → QueueListener Thread
                                              ↓
                                    Console + File Handlers

Usage:
    >>> from asb_fetch.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Resolved release %s", version)  # %-style formatting

Environment Variables:
    ASB_FETCH_LOG_DIR: Redirect the log file, used by the test suite.

RULES FOR CONTRIBUTORS:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Never attach handlers to child loggers
    4. Never use f-strings in log calls; use %-formatting
"""

from pathlib import Path

from asb_fetch.logger.config import (
    update_logger_from_config as _update_config,
)
from asb_fetch.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from asb_fetch.logger.handlers import ConfigurationError
from asb_fetch.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    restore_console_level,
    set_console_level,
    setup_logging,
)
from asb_fetch.logger.state import _state, get_state

__all__ = [
    "ColoredConsoleFormatter",
    "ConfigurationError",
    "HybridConsoleFormatter",
    "SimpleConsoleFormatter",
    "_state",  # For testing only
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "restore_console_level",
    "set_console_level",
    "setup_logging",
    "update_logger_from_config",
]


def update_logger_from_config(
    console_level: str,
    file_level: str,
    log_dir: Path | None = None,
) -> None:
    """Apply the run's logging settings to the global logger state.

    Example:
        >>> config = SettingsManager().load()
        >>> update_logger_from_config(
        ...     config.console_log_level, config.log_level, config.logs_dir
        ... )

    """
    _update_config(get_state(), console_level, file_level, log_dir)
