"""Status messages for the command-line pipeline."""

import logging
import sys
from typing import Optional

LOGGER_NAME = "virtual_he"


class StatusLogger:
    """Prefix-formatted status output on top of the logging module.

    Messages go to a stdout handler as ``[OK] ...`` or ``[2/5] ...`` so they
    stay readable and greppable. Failures are not logged here; they are
    raised and reported by the command line entry point.
    """

    def __init__(self, name: str = LOGGER_NAME, verbose: bool = True):
        """Initialize the status logger.

        Args:
            name: Name of the underlying logging.Logger
            verbose: If False, info and progress messages are suppressed
        """
        self.verbose = verbose
        self._logger = logging.getLogger(name)

        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter('%(message)s'))
            self._logger.addHandler(handler)
            self._logger.setLevel(logging.DEBUG)

    def success(self, message: str) -> None:
        self._logger.info(f"[OK] {message}")

    def info(self, message: str, indent: int = 0) -> None:
        """Log an info message (suppressed when not verbose).

        Args:
            message: The message to log
            indent: Number of spaces to indent
        """
        if self.verbose:
            self._logger.info(f"{' ' * indent}{message}")

    def progress(self, current: int, total: int, message: str = "") -> None:
        """Log a pipeline step as ``[current/total] message``.

        Args:
            current: Current step number (1-indexed)
            total: Total number of steps
            message: Step description
        """
        if not self.verbose:
            return
        step = f"[{current}/{total}]"
        self._logger.info(f"{step} {message}" if message else step)

    def header(self, title: str, width: int = 60) -> None:
        if not self.verbose:
            return
        self._logger.info("=" * width)
        self._logger.info(title)
        self._logger.info("=" * width)

    def set_verbose(self, verbose: bool) -> None:
        self.verbose = verbose


_default_logger: Optional[StatusLogger] = None


def get_logger(verbose: bool = True) -> StatusLogger:
    """Get the shared status logger.

    Args:
        verbose: If False, info and progress messages are suppressed

    Returns:
        StatusLogger instance
    """
    global _default_logger
    if _default_logger is None:
        _default_logger = StatusLogger(verbose=verbose)
    else:
        _default_logger.set_verbose(verbose)
    return _default_logger
