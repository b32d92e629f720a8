"""Logging utilities for active-git-branches.

The discovery engine reports through an injected ``LogSink`` rather than a
process-wide logger, so it can be exercised without any logging setup. The
package logger configured here is the default sink, and the ``log_*``
helpers are what the CLI uses for user-facing messages.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Protocol

from active_branches.constants import get_debug


# Color codes - respect TERM environment variable
def _should_use_colors() -> bool:
    """Check if colors should be used based on TERM environment variable."""
    term = os.environ.get("TERM", "")
    if not term or term == "dumb":
        return False
    return sys.stderr.isatty()


_USE_COLORS = _should_use_colors()

# ANSI color codes
BOLD = "\033[1m" if _USE_COLORS else ""
RESET = "\033[0m" if _USE_COLORS else ""
YELLOW = "\033[93m" if _USE_COLORS else ""


class LogSink(Protocol):
    """Observability capability the discovery engine reports through.

    ``logging.Logger`` satisfies it, as does any test double with the same
    three methods.
    """

    def debug(self, msg: str, *args: Any) -> None: ...

    def info(self, msg: str, *args: Any) -> None: ...

    def warning(self, msg: str, *args: Any) -> None: ...


class BranchesFormatter(logging.Formatter):
    """Formatter with short level prefixes matching the CLI helpers."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record.

        Args:
            record: The log record to format.

        Returns:
            The formatted log message.
        """
        msg = record.getMessage()

        if record.levelno == logging.DEBUG:
            return f"DEBUG: {msg}"
        elif record.levelno >= logging.ERROR:
            return f"Error: {msg}"
        elif record.levelno == logging.WARNING:
            return f"Warning: {msg}"

        return msg


LOGGER_NAME = "active_branches"

_logger = logging.getLogger(LOGGER_NAME)

# Only add handler if one doesn't exist
if not _logger.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(BranchesFormatter())
    _logger.addHandler(_handler)
    _logger.setLevel(logging.WARNING)


def get_logger() -> logging.Logger:
    """Return the package logger, used as the default ``LogSink``."""
    return _logger


def configure_verbosity(verbose: bool = False) -> None:
    """Raise the package logger to INFO (or DEBUG with ACTIVE_BRANCHES_DEBUG=1)."""
    if get_debug():
        _logger.setLevel(logging.DEBUG)
    elif verbose:
        _logger.setLevel(logging.INFO)
    else:
        _logger.setLevel(logging.WARNING)


def log_debug(msg: str) -> None:
    """Log a debug message (only if ACTIVE_BRANCHES_DEBUG=1).

    Args:
        msg: The message to log.
    """
    if get_debug():
        print(f"DEBUG: {msg}", file=sys.stderr)


def log_info(msg: str) -> None:
    """Log an info message to stdout.

    Args:
        msg: The message to log.
    """
    print(msg)


def log_warn(msg: str) -> None:
    """Log a warning message to stderr.

    Args:
        msg: The message to log.
    """
    print(f"{YELLOW}Warning:{RESET} {msg}", file=sys.stderr)


def log_error(msg: str) -> None:
    """Log an error message to stderr.

    Args:
        msg: The message to log.
    """
    print(f"Error: {msg}", file=sys.stderr)


def format_branch_row(name: str, *cols: str, name_width: int = 40) -> str:
    """Format a branch table row with a fixed-width name column.

    Args:
        name: The branch name (leftmost column).
        *cols: Additional columns to display.
        name_width: Width of the name column (default 40 chars).

    Returns:
        Formatted table row string.
    """
    row = f"  {name:<{name_width}}"
    for col in cols:
        row += f" {col}"
    return row.rstrip()
