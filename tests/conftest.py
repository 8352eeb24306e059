from __future__ import annotations

import io
import logging
from typing import Optional

import pytest

from replscope.commands import CommandResult
from replscope.config import AppConfig
from replscope.interface import BufferWriter, FileLineReader, Runner, Scope


class RecordingReader(FileLineReader):
    """FileLineReader over in-memory text that remembers the prompts it saw."""

    def __init__(self, *lines: str) -> None:
        text = "".join(f"{line}\n" for line in lines)
        super().__init__(io.StringIO(text))
        self.prompts: list[str] = []

    def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return super().read_line(prompt)

    @property
    def reads(self) -> int:
        return len(self.prompts)


class Session:
    """Result of running a scope against scripted input."""

    def __init__(self, result: CommandResult, reader: RecordingReader, writer: BufferWriter) -> None:
        self.result = result
        self.reader = reader
        self.writer = writer

    @property
    def output(self) -> list[str]:
        return self.writer.lines()


def run_script(scope: Scope, *lines: str, config: Optional[AppConfig] = None) -> Session:
    reader = RecordingReader(*lines)
    writer = BufferWriter()
    result = Runner(scope, reader=reader, writer=writer, config=config or AppConfig()).run()
    return Session(result, reader, writer)


@pytest.fixture
def script():
    return run_script


@pytest.fixture
def restore_logger():
    """run_scope configures the package logger; undo that after the test."""
    logger = logging.getLogger("replscope")
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
