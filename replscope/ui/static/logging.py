#!/usr/bin/env python3
# replscope/ui/static/logging.py
from __future__ import annotations

"""
Logging setup for replscope sessions.

Diagnostics go to stderr so they never mix with command output on stdout.
Terminals get one color per level; pipes and log files get plain text.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, TextIO

from replscope.ui.utils import PRINT_MUTEX, colorize, strip_ansi, supports_color

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LEVEL_STYLES: dict[int, tuple[str, ...]] = {
    logging.DEBUG: ("bright_black",),
    logging.WARNING: ("yellow",),
    logging.ERROR: ("red",),
    logging.CRITICAL: ("magenta", "bold"),
}


class ColorizingStreamHandler(logging.StreamHandler):
    """Stream handler that styles whole records by level on color terminals."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__(stream)
        self.use_color = supports_color(self.stream)

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if not self.use_color:
            return strip_ansi(text)
        return colorize(text, *_LEVEL_STYLES.get(record.levelno, ()))

    def emit(self, record: logging.LogRecord) -> None:
        # Share the console lock with ConsoleWriter so lines do not interleave
        with PRINT_MUTEX:
            super().emit(record)


class PlainFormatter(logging.Formatter):
    """Formatter for log files: no escape sequences in the message."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        return strip_ansi(super().formatMessage(record))


def _has_handler(logger: logging.Logger, kind: type) -> bool:
    return any(type(handler) is kind for handler in logger.handlers)


def init_logger(
    name: str = "replscope",
    level: int | str = logging.WARNING,
    logfile: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the `name` logger for a shell session and return it.

    Records at `level` and above go to stderr. With `logfile`, every record
    (DEBUG included) is also appended to a rotating UTF-8 file. Calling this
    again does not add duplicate handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if logfile else level)
    logger.propagate = False

    if not _has_handler(logger, ColorizingStreamHandler):
        console = ColorizingStreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console)
    for handler in logger.handlers:
        if type(handler) is ColorizingStreamHandler:
            handler.setLevel(level)

    if logfile and not _has_handler(logger, RotatingFileHandler):
        file_handler = RotatingFileHandler(
            logfile, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(PlainFormatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    return logger
