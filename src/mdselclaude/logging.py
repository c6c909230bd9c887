"""Logging for mdsel-claude.

Everything logs under the "mdselclaude" logger. Records go to a file when
logging.file or MDSEL_LOG names one, otherwise to stderr, and to stderr only
when it is attached to a terminal. Stdout is never touched: it carries the
MCP stream or the hook's JSON reply.

Lines look like:

    14:02:11 info executor: spawned pid=4242
"""

from __future__ import annotations

import copy
import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mdselclaude.config.schema import LoggingConfig

ROOT_LOGGER = "mdselclaude"
LOG_FILE_ENV = "MDSEL_LOG"

TRACE = 5
VERBOSE = 15
logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

# Index is the -v count; counts past the end mean TRACE
_VERBOSITY_LEVELS = (logging.ERROR, logging.WARNING, logging.INFO, VERBOSE, TRACE)

logger = logging.getLogger(ROOT_LOGGER)

# Handlers installed by setup_logging(), removed again by reset_logging()
_handlers: list[logging.Handler] = []


class _ShortFormatter(logging.Formatter):
    """Lowercase level name plus the logger name below mdselclaude."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(component)s: %(message)s", "%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        shown = copy.copy(record)
        shown.levelname = record.levelname.lower()
        _, _, component = record.name.partition(".")
        shown.component = component or ROOT_LOGGER
        return super().format(shown)


def resolve_level(config: LoggingConfig | None) -> int:
    """Effective level: a verbose count beats a level name; default INFO."""
    if config is None:
        return logging.INFO
    if config.verbose is not None:
        index = max(config.verbose, 0)
        return _VERBOSITY_LEVELS[min(index, len(_VERBOSITY_LEVELS) - 1)]
    if config.level:
        name = config.level.upper()
        if name == "WARN":
            name = "WARNING"
        level = logging.getLevelName(name)
        if isinstance(level, int):
            return level
    return logging.INFO


def _open_target(path: str | None) -> logging.Handler | None:
    if path:
        try:
            return logging.FileHandler(os.path.expanduser(path), encoding="utf-8")
        except OSError as e:
            if not sys.stderr.isatty():
                return None
            print(f"[mdsel-claude] cannot open log file: {e}", file=sys.stderr)
    if sys.stderr.isatty():
        return logging.StreamHandler(sys.stderr)
    return None


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Install the log handler once per process.

    Later calls do nothing until reset_logging() runs.
    """
    if _handlers:
        return
    level = resolve_level(config)
    logger.setLevel(level)

    path = config.file if config and config.file else os.environ.get(LOG_FILE_ENV)
    handler = _open_target(path)
    if handler is None:
        # Nothing to write to; keep records away from the root logger's stderr
        handler = logging.NullHandler()
    handler.setLevel(level)
    handler.setFormatter(_ShortFormatter())
    logger.addHandler(handler)
    _handlers.append(handler)


def reset_logging() -> None:
    """Detach and close whatever setup_logging() installed."""
    while _handlers:
        handler = _handlers.pop()
        logger.removeHandler(handler)
        handler.close()


def get_logger(name: str | None = None) -> logging.Logger:
    """The mdselclaude logger, or its child `name` (e.g. "executor")."""
    return logger.getChild(name) if name else logger
