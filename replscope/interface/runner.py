#!/usr/bin/env python3
# replscope/interface/runner.py
from __future__ import annotations

"""
Top-level driver.

Runs a scope with one reader and writer for the whole session. When a scope
ends with NewScope the driver drops it and runs the new one, until the
session ends with Done, Quit or an unresolved error. exit_code() turns that
result into a process exit status.
"""

import logging
from typing import Optional

from replscope.commands import CommandError, CommandResult, Fatal, Interrupted, NewScope
from replscope.config import AppConfig, load_config
from replscope.interface.cli import LineReader, make_reader
from replscope.interface.scope import Scope, Session
from replscope.interface.writer import ConsoleWriter, LineWriter
from replscope.ui import init_logger

log = logging.getLogger(__name__)

# Conventional shell status for termination by SIGINT
INTERRUPTED_EXIT_CODE = 130


class Runner:
    """Wraps a reader, a writer and a scope, and runs commands until done."""

    def __init__(
        self,
        scope: Scope,
        reader: Optional[LineReader] = None,
        writer: Optional[LineWriter] = None,
        config: Optional[AppConfig] = None,
    ) -> None:
        self.config = config if config is not None else AppConfig()
        self.writer = writer if writer is not None else ConsoleWriter()
        self.reader = reader if reader is not None else make_reader(self.config, self.writer)
        self.scope = scope

    def run(self) -> CommandResult:
        """Start reading lines and executing them. Returns the final result."""
        session = Session(reader=self.reader, writer=self.writer, config=self.config)
        with self.reader:
            try:
                result = self._run_scopes(session)
            except KeyboardInterrupt:
                # Ctrl-C while a command was running; the prompt-time case is
                # handled by the readers. Hooks of the unwound scopes do not run.
                log.info("Interrupted while running a command in %s", type(self.scope).__name__)
                result = Interrupted()
        self.writer.flush()
        return result

    def _run_scopes(self, session: Session) -> CommandResult:
        result = self.scope.run_lines(session)
        while isinstance(result, NewScope):
            log.debug("Switching scope %s -> %s",
                      type(self.scope).__name__, type(result.scope).__name__)
            self.scope = result.scope
            result = self.scope.run_lines(session)
        return result


def exit_code(result: CommandResult) -> int:
    """Process exit status for the final result of a session."""
    if isinstance(result, Fatal):
        return result.code
    if isinstance(result, Interrupted):
        return INTERRUPTED_EXIT_CODE
    if isinstance(result, CommandError):
        return 1
    return 0


def cmd_loop(
    scope: Scope,
    *,
    reader: Optional[LineReader] = None,
    writer: Optional[LineWriter] = None,
    config: Optional[AppConfig] = None,
) -> CommandResult:
    """Execute a command loop for `scope`. Main entry point for embedding."""
    return Runner(scope, reader=reader, writer=writer, config=config).run()


def run_scope(
    scope: Scope,
    *,
    reader: Optional[LineReader] = None,
    writer: Optional[LineWriter] = None,
    config: Optional[AppConfig] = None,
) -> int:
    """
    Load configuration, set up logging, run `scope` and return an exit code.

    Intended for `sys.exit(run_scope(MyScope()))`.
    """
    if config is None:
        config = load_config()
    init_logger(
        "replscope",
        level=config.log_level,
        logfile=str(config.log_file_path) if config.log_file_path else None,
    )
    result = cmd_loop(scope, reader=reader, writer=writer, config=config)
    if isinstance(result, CommandError):
        log.info("Session ended with %r", result)
    return exit_code(result)
