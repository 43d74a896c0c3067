"""Main logger module providing public API functions.

- setup_logging(): Configure logging with async-safe QueueHandler architecture
- get_logger(): Get or create logger instance with singleton pattern
- set_console_level() / restore_console_level(): --verbose support
- flush_all_handlers(): Ensure all pending log records are written to disk
- clear_logger_state(): Clear global logger state for testing
"""

import atexit
import contextlib
import logging
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path

from asb_fetch.logger.config import load_log_settings
from asb_fetch.logger.handlers import ROOT_LOGGER_NAME, setup_root_logger
from asb_fetch.logger.state import get_state

FLUSH_TIMEOUT_SECONDS = 5.0


def flush_all_handlers() -> None:
    """Flush all handlers in the QueueListener to ensure writes complete.

    Waits for the queue to drain, then flushes each handler's buffer.
    """
    state = get_state()
    if state.queue_listener is not None and state.log_queue is not None:
        # QueueListener doesn't use task_done(), so poll the queue
        start_time = time.time()
        while not state.log_queue.empty():
            if time.time() - start_time > FLUSH_TIMEOUT_SECONDS:
                break
            time.sleep(0.01)

        time.sleep(0.1)

        for handler in state.queue_listener.handlers:
            with contextlib.suppress(OSError, ValueError):
                handler.flush()


def _cleanup_logging() -> None:
    """Stop the QueueListener on interpreter exit."""
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_cleanup_logging)


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Configure logging with async-safe QueueHandler architecture.

    The root ``asb_fetch`` logger is initialized exactly once; child
    loggers such as ``asb_fetch.core.download`` propagate to it.

    Args:
        name: Logger name, typically __name__ for module-level loggers
        console_level: Console log level ("DEBUG", "INFO", "WARNING")
        file_level: File log level ("DEBUG", "INFO")
        log_file: Path to log file
            (default: ~/.config/asb-fetch/logs/asb-fetch.log)
        enable_file_logging: Whether to enable file logging

    Returns:
        Logger instance (singleton per name via logging.getLogger)

    Raises:
        ConfigurationError: If file logging setup fails

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            if console_level is None or file_level is None or log_file is None:
                cfg_console, cfg_file, cfg_path = load_log_settings()
                console_level = console_level or cfg_console
                file_level = file_level or cfg_file
                log_file = log_file or cfg_path

            setup_root_logger(
                state,
                console_level,
                file_level,
                log_file,
                enable_file_logging,
            )

    return logging.getLogger(name)


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Get or create logger instance with singleton pattern.

    Use __name__ as the logger name for proper hierarchical logging:
        >>> logger = get_logger(__name__)

    """
    return setup_logging(
        name=name,
        enable_file_logging=enable_file_logging,
    )


def _console_handlers() -> list[logging.StreamHandler]:
    state = get_state()
    if state.queue_listener is None:
        return []
    return [
        handler
        for handler in state.queue_listener.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, RotatingFileHandler)
    ]


def set_console_level(level: str) -> None:
    """Temporarily change the console handler level.

    The previous level is remembered and put back by
    restore_console_level().

    Args:
        level: New console log level name (e.g., "DEBUG")

    """
    state = get_state()
    for handler in _console_handlers():
        if state.saved_console_level is None:
            state.saved_console_level = handler.level
        handler.setLevel(getattr(logging, level, logging.WARNING))


def restore_console_level() -> None:
    """Restore the console level saved by set_console_level()."""
    state = get_state()
    if state.saved_console_level is None:
        return
    for handler in _console_handlers():
        handler.setLevel(state.saved_console_level)
    state.saved_console_level = None


def clear_logger_state() -> None:
    """Clear global logger state for testing purposes.

    Stops the QueueListener, closes handlers and resets the state so
    the next test starts from a fresh logger. Only loggers in the
    ``asb_fetch`` namespace are touched.

    Warning:
        Intended for tests only.

    """
    state = get_state()
    with state.lock:
        if state.queue_listener is not None:
            flush_all_handlers()
            state.queue_listener.stop()
            state.queue_listener = None

        state.log_queue = None
        state.root_initialized = False
        state.saved_console_level = None

        for logger_name, log_instance in list(
            logging.Logger.manager.loggerDict.items()
        ):
            if logger_name.startswith(ROOT_LOGGER_NAME) and isinstance(
                log_instance, logging.Logger
            ):
                for handler in log_instance.handlers[:]:
                    handler.close()
                    log_instance.removeHandler(handler)
