"""Configuration loading and updating for logging system.

Loggers are created at import time, before the settings file has been
read, so the root logger starts from bootstrap defaults and is updated
once the run's FetchConfig is known.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from asb_fetch.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    LOG_DIR_ENV_VAR,
    LOG_FILE_NAME,
)
from asb_fetch.logger.handlers import setup_root_logger

if TYPE_CHECKING:
    from asb_fetch.logger.state import _LoggerState


def load_log_settings() -> tuple[str, str, Path]:
    """Load bootstrap console level, file level, and file path.

    Environment Variable Override:
        ASB_FETCH_LOG_DIR: Overrides the log directory. Used by the test
        suite to keep test logs out of the user's config directory.

    Returns:
        Tuple of (console_level, file_level, log_path)

    """
    env_log_dir = os.getenv(LOG_DIR_ENV_VAR)
    if env_log_dir:
        log_dir = Path(env_log_dir).expanduser()
    else:
        log_dir = (
            Path.home() / DEFAULT_CONFIG_SUBDIR / CONFIG_DIR_NAME / "logs"
        )

    log_path = log_dir / LOG_FILE_NAME
    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_path


def _current_log_file(state: "_LoggerState") -> Path | None:
    if state.queue_listener is None:
        return None
    for handler in state.queue_listener.handlers:
        if isinstance(handler, RotatingFileHandler):
            return Path(handler.baseFilename)
    return None


def update_logger_from_config(
    state: "_LoggerState",
    console_level: str,
    file_level: str,
    log_dir: Path | None = None,
) -> None:
    """Apply configured log levels and log directory to the root logger.

    Handler levels are updated in place. When the configured log
    directory differs from the active one, the listener is rebuilt so the
    file handler writes to the new location. The ASB_FETCH_LOG_DIR
    override always wins over the configured directory.

    Args:
        state: Logger state object (from logger.state module)
        console_level: Console log level name
        file_level: File log level name
        log_dir: Configured log directory, or None to keep the current one

    """
    if os.getenv(LOG_DIR_ENV_VAR):
        log_dir = None

    current_file = _current_log_file(state)
    wanted_file = log_dir / LOG_FILE_NAME if log_dir is not None else None

    with state.lock:
        if (
            wanted_file is not None
            and current_file is not None
            and wanted_file.resolve() != current_file.resolve()
        ):
            setup_root_logger(
                state,
                console_level,
                file_level,
                wanted_file,
                enable_file_logging=True,
            )
        elif state.queue_listener is not None:
            for handler in state.queue_listener.handlers:
                if isinstance(handler, RotatingFileHandler):
                    handler.setLevel(
                        getattr(logging, file_level, logging.INFO)
                    )
                elif isinstance(handler, logging.StreamHandler):
                    handler.setLevel(
                        getattr(logging, console_level, logging.WARNING)
                    )
