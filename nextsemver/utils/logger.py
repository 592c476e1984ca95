"""
Logging utilities for nextsemver.

Every module logs through a child of the ``nextsemver`` logger obtained
with :func:`get_logger`. Nothing is printed until :func:`setup_logging`
attaches a handler; library users therefore see no output by default.

Two renderings are available:

- local terminals get ``LEVEL: message`` lines, with a colored level name
  when the stream is a TTY;
- inside GitHub Actions, DEBUG records become ``::debug::`` workflow
  commands, so they only show up when step debug logging is enabled on
  the runner.

Diagnostic detail (configuration snapshots, intermediate versions, raw
release-host responses) belongs at DEBUG level and never in user-facing
failure messages.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Dict, Optional

from nextsemver.constants import (
    ENV_ACTIONS,
    ENV_RUNNER_DEBUG,
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "nextsemver"

_lock = threading.Lock()

LEVEL_COLORS: Dict[int, str] = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
RESET = "\033[0m"


def escape_command_data(value: str) -> str:
    """Escape a message for a GitHub Actions workflow command."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def in_github_actions() -> bool:
    """Return True when running as a GitHub Actions step."""
    return os.environ.get(ENV_ACTIONS) == "true"


def runner_debug_enabled() -> bool:
    """Return True when the GitHub runner has step debug logging enabled."""
    return os.environ.get(ENV_RUNNER_DEBUG) == "1"


class ConsoleFormatter(logging.Formatter):
    """Formatter for local terminals with an optionally colored level name.

    The record itself is never modified, so other handlers still see the
    plain level name.
    """

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = False,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def formatMessage(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno) if self.use_color else None
        if color is None:
            return super().formatMessage(record)

        tinted = logging.makeLogRecord(
            dict(record.__dict__, levelname=f"{color}{record.levelname}{RESET}")
        )
        return super().formatMessage(tinted)


class WorkflowFormatter(logging.Formatter):
    """Formatter for GitHub Actions logs.

    DEBUG records are emitted as ``::debug::`` commands; everything else is
    rendered like :class:`ConsoleFormatter` without colors.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno > logging.DEBUG:
            return super().format(record)

        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"::debug::{escape_command_data(message)}"


def _color_enabled(stream: IO[str]) -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return stream.isatty()
    except (AttributeError, OSError, ValueError):
        return False


def _build_formatter(stream: IO[str], *, verbose: bool, actions: bool) -> logging.Formatter:
    fmt = LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT
    if actions:
        return WorkflowFormatter(fmt, datefmt=LOG_DATE_FORMAT)
    return ConsoleFormatter(fmt, datefmt=LOG_DATE_FORMAT, use_color=_color_enabled(stream))


def setup_logging(
    *,
    level: int = logging.INFO,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
    actions: Optional[bool] = None,
) -> None:
    """Attach a single stream handler to the ``nextsemver`` logger.

    Calling it again replaces the previous handler.

    Args:
        level: Minimum level to emit.
        verbose: Include timestamps and logger names.
        stream: Destination; defaults to ``sys.stderr``.
        actions: Use workflow-command rendering. Detected from the
            environment when ``None``.
    """
    target = stream or sys.stderr
    if actions is None:
        actions = in_github_actions()

    handler = logging.StreamHandler(target)
    handler.setLevel(level)
    handler.setFormatter(_build_formatter(target, verbose=verbose, actions=actions))

    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.addHandler(handler)
        root_logger.setLevel(level)
        root_logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``nextsemver`` or one of its children.

    ``get_logger("core.releases")`` and
    ``get_logger("nextsemver.core.releases")`` name the same logger.
    """
    if not name or name == ROOT_LOGGER_NAME:
        qualified = ROOT_LOGGER_NAME
    elif name.startswith(ROOT_LOGGER_NAME + "."):
        qualified = name
    else:
        qualified = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(qualified)
    if not logger.handlers and not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        logger.addHandler(logging.NullHandler())
    return logger


def disable_logging() -> None:
    """Silence nextsemver logging until :func:`setup_logging` runs again."""
    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.addHandler(logging.NullHandler())
        root_logger.setLevel(logging.NOTSET)
