"""
Progress callbacks for OLS runs.

Selection reports the 1-based iteration number to an optional callback
before each step. These implementations cover the usual sinks; none of
them affect the selection itself.
"""

import logging
import sys
from typing import Callable, Optional, TextIO

from .experimental_logging import log

logger = logging.getLogger(__name__)


class ConsoleProgress:
    """In-place "OLS m-term number: N" counter on a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, label: str = "OLS m-term number: "):
        self.stream = stream if stream is not None else sys.stderr
        self.label = label
        self.last = 0

    def __call__(self, iteration: int) -> None:
        self.stream.write(f"\r{self.label}{iteration}")
        self.stream.flush()
        self.last = iteration

    def close(self) -> None:
        """Finish the counter line."""
        if self.last:
            self.stream.write("\n")
            self.stream.flush()


class LoggingProgress:
    """Report iterations through the ``logging`` module."""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.log = log if log is not None else logger
        self.level = level

    def __call__(self, iteration: int) -> None:
        self.log.log(self.level, "OLS iteration %d", iteration)

    def close(self) -> None:
        pass


class JsonProgress:
    """Emit one ``ols_iteration`` JSON event per iteration."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def __call__(self, iteration: int) -> None:
        log("ols_iteration", stream=self.stream, iteration=iteration)

    def close(self) -> None:
        pass


_PROGRESS = {
    "console": ConsoleProgress,
    "log": LoggingProgress,
    "json": JsonProgress,
}


def make_progress(kind: str) -> Optional[Callable[[int], None]]:
    """Create a progress callback by name; "none" gives None."""
    if kind == "none":
        return None
    if kind not in _PROGRESS:
        available = ["none"] + list(_PROGRESS.keys())
        raise ValueError(f"Unknown progress reporter '{kind}'. Available: {available}")
    return _PROGRESS[kind]()
