#!/usr/bin/env python3
# replscope/interface/writer.py
from __future__ import annotations

"""
Output sinks for command output and diagnostics.

The run loop never prints directly; everything goes through a LineWriter so
sessions can be captured in memory.
"""

import io
import sys
from typing import TextIO

from replscope.ui import PRINT_MUTEX, colorize, supports_color


class LineWriter:
    """Base interface for output sinks. Subclasses implement write()."""

    def write(self, text: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def write_line(self, text: str = "") -> None:
        self.write(f"{text}\n")

    def write_error(self, text: str) -> None:
        """Write a one-line diagnostic."""
        self.write_line(text)

    def flush(self) -> None:
        pass


class ConsoleWriter(LineWriter):
    """Write to a console stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys replacement of sys.stdout is seen
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        with PRINT_MUTEX:
            self.stream.write(text)

    def write_line(self, text: str = "") -> None:
        with PRINT_MUTEX:
            self.stream.write(f"{text}\n")
            self.stream.flush()

    def write_error(self, text: str) -> None:
        if supports_color(self.stream):
            text = colorize(text, "red")
        self.write_line(text)

    def flush(self) -> None:
        self.stream.flush()


class BufferWriter(LineWriter):
    """Collect output in memory."""

    def __init__(self) -> None:
        self._buffer = io.StringIO()

    def write(self, text: str) -> None:
        self._buffer.write(text)

    def getvalue(self) -> str:
        return self._buffer.getvalue()

    def lines(self) -> list[str]:
        return self.getvalue().splitlines()

    def clear(self) -> None:
        self._buffer = io.StringIO()
