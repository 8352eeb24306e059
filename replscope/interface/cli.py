#!/usr/bin/env python3
# replscope/interface/cli.py
from __future__ import annotations

"""
Line sources for the command loop.

read_line(prompt) blocks until a line is available and returns it without
the trailing newline. Control conditions are raised as protocol errors:
    Ctrl-C          -> Interrupted
    Ctrl-D / EOF    -> EndOfInput
    other failures  -> LineReadFailure

Interactive selection order:
    1) prompt_toolkit (rich completion + history)
    2) readline (basic completion + history)
    3) plain input (last resort)
"""

import contextlib
import logging
import sys
from pathlib import Path
from typing import IO, TYPE_CHECKING, Iterator, Optional

from replscope.commands import CommandTable, EndOfInput, Interrupted, LineReadFailure
from replscope.config import DEFAULT_CONFIG, AppConfig
from replscope.interface.completion import split_current_token, suggest
from replscope.interface.writer import LineWriter

if TYPE_CHECKING:  # pragma: no cover - typing only
    from replscope.interface.scope import Scope

log = logging.getLogger(__name__)


def _format_prompt(prompt: str) -> str:
    return f"{prompt} "


@contextlib.contextmanager
def _translate_signals() -> Iterator[None]:
    """Turn terminal signals raised by input libraries into protocol errors."""
    try:
        yield
    except KeyboardInterrupt:
        raise Interrupted() from None
    except EOFError:
        raise EndOfInput() from None
    except OSError as exc:
        raise LineReadFailure(str(exc)) from exc


class LineReader:
    """
    Base interface for line sources.

    Subclasses implement read_line() and may implement setup()/teardown().
    attach() is called by the command loop with the scope that is about to
    read, so interactive readers can complete its commands.

    This base also provides context manager support to guarantee teardown.
    """

    _scope: Optional["Scope"] = None

    def setup(self) -> None:
        pass

    def read_line(self, prompt: str) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def teardown(self) -> None:
        pass

    def attach(self, scope: "Scope") -> None:
        self._scope = scope

    @property
    def table(self) -> Optional[CommandTable]:
        """Command table of the attached scope, if any."""
        return self._scope.commands() if self._scope is not None else None

    # Context manager helpers
    def __enter__(self) -> "LineReader":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.teardown()
        except OSError as teardown_exc:
            log.warning("Line reader teardown failed: %s", teardown_exc)


# ===== Preferred: prompt_toolkit =====
class PromptToolkitReader(LineReader):
    """Rich line editor with history and live completion."""

    def __init__(self, config: AppConfig = DEFAULT_CONFIG) -> None:
        from prompt_toolkit import PromptSession
        from prompt_toolkit.completion import Completer, Completion
        from prompt_toolkit.history import FileHistory, InMemoryHistory

        self._history_path = config.history_file_path
        history = FileHistory(str(self._history_path)) if self._history_path else InMemoryHistory()
        reader = self

        class _ScopeCompleter(Completer):
            def get_completions(self, document, complete_event):
                text_before_cursor = document.text_before_cursor
                _, current_prefix = split_current_token(text_before_cursor)
                for word in suggest(text_before_cursor, reader.table):
                    # replace exactly the current token
                    yield Completion(word, start_position=-len(current_prefix))

        self._session = PromptSession(
            history=history,
            completer=_ScopeCompleter() if config.enable_completion else None,
        )

    def setup(self) -> None:
        if self._history_path:
            self._history_path.parent.mkdir(parents=True, exist_ok=True)
            self._history_path.touch(exist_ok=True)

    def read_line(self, prompt: str) -> str:
        with _translate_signals():
            return self._session.prompt(_format_prompt(prompt))


# ===== Last resort: plain input =====
class PlainReader(LineReader):
    """input() without completion or history."""

    def read_line(self, prompt: str) -> str:
        with _translate_signals():
            return input(_format_prompt(prompt))


# ===== Fallback: readline =====
class ReadlineReader(PlainReader):
    """input() with readline history and tab completion."""

    def __init__(self, config: AppConfig = DEFAULT_CONFIG) -> None:
        import readline

        self.readline = readline
        self._history_path = config.history_file_path
        self._enable_completion = config.enable_completion

    def setup(self) -> None:
        if self._history_path:
            try:
                self._history_path.parent.mkdir(parents=True, exist_ok=True)
                self._history_path.touch(exist_ok=True)
                self.readline.read_history_file(str(self._history_path))
            except OSError as exc:
                log.debug("Could not read history file %s: %s", self._history_path, exc)

        if not self._enable_completion:
            return

        def _complete(text_fragment: str, state_index: int) -> Optional[str]:
            # Build the entire line buffer and return the Nth suggestion
            buffer_text = self.readline.get_line_buffer()
            matches = [word for word in suggest(buffer_text, self.table)
                       if word.startswith(text_fragment)]
            return matches[state_index] if state_index < len(matches) else None

        self.readline.set_completer_delims(" \t\n")
        self.readline.set_completer(_complete)
        self.readline.parse_and_bind("tab: complete")

    def teardown(self) -> None:
        self.readline.set_completer(None)
        if self._history_path:
            self.readline.write_history_file(str(self._history_path))


# ===== Non-interactive sources =====
class FileLineReader(LineReader):
    """Read lines from a text stream, e.g. a script file or a pipe."""

    def __init__(self, stream: IO[str], *, close: bool = False) -> None:
        self._stream = stream
        self._close = close

    @classmethod
    def open(cls, path: str | Path, encoding: str = "utf-8") -> "FileLineReader":
        """Read commands from a file; the file is closed on teardown."""
        return cls(open(path, "r", encoding=encoding), close=True)

    def read_line(self, prompt: str) -> str:
        try:
            line = self._stream.readline()
        except (OSError, ValueError) as exc:
            raise LineReadFailure(str(exc)) from exc
        if line == "":
            raise EndOfInput()
        return line.rstrip("\r\n")

    def teardown(self) -> None:
        if self._close:
            self._stream.close()


class EchoLineReader(LineReader):
    """Wrap another reader and echo every line read, prompt included."""

    def __init__(self, wrapped: LineReader, writer: LineWriter) -> None:
        self.wrapped = wrapped
        self.writer = writer

    def setup(self) -> None:
        self.wrapped.setup()

    def teardown(self) -> None:
        self.wrapped.teardown()

    def attach(self, scope: "Scope") -> None:
        super().attach(scope)
        self.wrapped.attach(scope)

    def read_line(self, prompt: str) -> str:
        line = self.wrapped.read_line(prompt)
        self.writer.write_line(f"{prompt} {line}")
        return line


def make_interactive_reader(config: AppConfig = DEFAULT_CONFIG) -> LineReader:
    """Select the best available interactive frontend at runtime."""
    try:
        return PromptToolkitReader(config)
    except Exception as exc:  # noqa: BLE001 - any frontend failure falls back
        log.debug("prompt_toolkit unavailable: %s", exc)
    try:
        return ReadlineReader(config)
    except ImportError as exc:
        log.debug("readline unavailable: %s", exc)
    return PlainReader()


def make_reader(
    config: AppConfig = DEFAULT_CONFIG,
    writer: Optional[LineWriter] = None,
    stdin: Optional[IO[str]] = None,
) -> LineReader:
    """
    Factory for the default line source.

    Interactive terminals get an editing frontend; piped input is read as a
    file. With ECHO enabled every line is echoed to `writer`.
    """
    stream = stdin if stdin is not None else sys.stdin
    isatty = getattr(stream, "isatty", lambda: False)
    reader = make_interactive_reader(config) if isatty() else FileLineReader(stream)
    if config.echo and writer is not None:
        reader = EchoLineReader(reader, writer)
    return reader
