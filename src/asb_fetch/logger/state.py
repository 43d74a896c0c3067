"""Logger state management module.

Holds the single logger state instance shared by the whole application so
the ``asb_fetch`` root logger is initialized exactly once.
"""

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import queue
    from logging.handlers import QueueListener


class _LoggerState:
    """Mutable logger state shared by the logger package."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.root_initialized = False
        self.queue_listener: QueueListener | None = None
        self.log_queue: queue.Queue | None = None
        self.saved_console_level: int | None = None


_state = _LoggerState()


def get_state() -> _LoggerState:
    """Return the process-wide logger state."""
    return _state
