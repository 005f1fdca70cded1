"""Diagnostics for grammardoc render passes.

Rendered documents may go to stdout, so everything logged here goes to
stderr. Verbosity is chosen on the command line (``-v``) and maps onto two
extra levels: PROGRESS summarizes each pass, DETAILS explains the
decisions made while rendering (which sections open, which lexer rules
are skipped).
"""

from __future__ import annotations

import logging
import sys
from enum import IntEnum
from typing import Any, TextIO

PROGRESS_LEVEL = 25  # between INFO and WARNING
DETAILS_LEVEL = 15  # between DEBUG and INFO

logging.addLevelName(PROGRESS_LEVEL, "PROGRESS")
logging.addLevelName(DETAILS_LEVEL, "DETAILS")


class Verbosity(IntEnum):
    """Values accepted by ``grammardoc -v``."""

    SILENT = 0
    PROGRESS = 1
    DETAILS = 2
    DEBUG = 3

    @property
    def level(self) -> int:
        return _LEVELS[self]


_LEVELS = {
    Verbosity.SILENT: logging.ERROR,
    Verbosity.PROGRESS: PROGRESS_LEVEL,
    Verbosity.DETAILS: DETAILS_LEVEL,
    Verbosity.DEBUG: logging.DEBUG,
}


class _DiagnosticFormatter(logging.Formatter):
    """Plain messages; warnings and errors get a ``warning:``/``error:`` prefix."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.WARNING:
            return f"{record.levelname.lower()}: {message}"
        return message


class GrammarDocLogger(logging.Logger):
    """Logger with one method per grammardoc verbosity level above silent."""

    def progress(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """What a pass did: rules loaded, rules documented."""
        if self.isEnabledFor(PROGRESS_LEVEL):
            self._log(PROGRESS_LEVEL, msg, args, **kwargs)

    def details(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Why the output looks the way it does: sections, skipped rules."""
        if self.isEnabledFor(DETAILS_LEVEL):
            self._log(DETAILS_LEVEL, msg, args, **kwargs)


def get_logger() -> GrammarDocLogger:
    """Return the shared ``grammardoc`` logger."""
    logging.setLoggerClass(GrammarDocLogger)
    logger = logging.getLogger("grammardoc")
    assert isinstance(logger, GrammarDocLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """(Re)configure the logger for ``verbosity``.

    Args:
        verbosity: 0=silent (errors only), 1=progress, 2=details, 3=debug;
            values past either end are clamped
        stream: Output stream, sys.stderr by default
    """
    clamped = Verbosity(min(max(verbosity, Verbosity.SILENT), Verbosity.DEBUG))
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(clamped.level)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(_DiagnosticFormatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and return to the silent level (used by tests)."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(Verbosity.SILENT.level)


def details_enabled() -> bool:
    """True when -v 2 or higher is in effect."""
    return get_logger().isEnabledFor(DETAILS_LEVEL)
