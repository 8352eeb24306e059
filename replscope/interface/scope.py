#!/usr/bin/env python3
# replscope/interface/scope.py
from __future__ import annotations

"""
Scopes and the per-scope command loop.

A Scope is a host-defined bundle of commands (methods decorated with @cmd)
plus overridable hooks. run_lines() reads lines from the session's reader,
dispatches them and interprets the resulting actions until the scope ends:

    before_loop
    repeat:
        read_line(prompt)           control signals -> error path
        parse -> before_command     may replace the line
        empty() or dispatch()
        error path                  handle_error, then built-in defaults
        SubScope -> run it          same reader and writer
        after_command               its result is authoritative
        sub-scope left an error     error path once, unless Fatal
    until Quit / Exit / NewScope / unresolved error
    after_loop

Exit only ends the scope it came from: the caller receives Done.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Sequence

from replscope.commands import (
    RECOVERABLE_ERRORS,
    CommandError,
    CommandResult,
    CommandTable,
    Done,
    EmptyLine,
    EndOfInput,
    Exit,
    Fatal,
    Interrupted,
    InvalidCommand,
    NewScope,
    Quit,
    SubScope,
    build_table,
    is_terminal,
    normalize_result,
)
from replscope.config import DEFAULT_CONFIG, INTERRUPT_ACTIONS, AppConfig
from replscope.interface.handler import describe_error, dispatch, format_help
from replscope.interface.parser import CommandLine, Line, parse
from replscope.interface.writer import ConsoleWriter, LineWriter

if TYPE_CHECKING:  # pragma: no cover - typing only
    from replscope.interface.cli import LineReader

log = logging.getLogger(__name__)

# Used by scopes that are not currently running in a session
_FALLBACK_WRITER = ConsoleWriter()


@dataclass(slots=True)
class Session:
    """
    The collaborators shared by every scope of one run.

    One Session is created by the top-level driver and handed down unchanged
    to every sub-scope, so the reader's history and the writer are shared.
    """
    reader: "LineReader"
    writer: LineWriter
    config: AppConfig = DEFAULT_CONFIG


class Scope:
    """
    Base class for command scopes.

    Class attributes a host scope may set:
        prompt_text: Prompt shown by this scope (None -> configured prompt).
        scope_help: Text shown by `help` (None -> class docstring or a banner).
        help_command: Name of the help command, None disables help.
        empty_line_is_error: Route empty lines through handle_error
            (None -> configured policy).
        interrupt_action: 'quit' or 'exit' for Ctrl-C (None -> configured).
    """

    prompt_text: Optional[str] = None
    scope_help: Optional[str] = None
    help_command: Optional[str] = "help"
    empty_line_is_error: Optional[bool] = None
    interrupt_action: Optional[str] = None

    # Set while the scope runs; hosts do not need to call Scope.__init__
    _session: Optional[Session] = None

    # ---------------- Command table ----------------

    @classmethod
    def commands(cls) -> CommandTable:
        """The command table of this scope type, built on first use."""
        table = cls.__dict__.get("_command_table")
        if table is None:
            table = build_table(cls)
            setattr(cls, "_command_table", table)
        return table

    # ---------------- Session access ----------------

    @property
    def writer(self) -> LineWriter:
        return self._session.writer if self._session is not None else _FALLBACK_WRITER

    @property
    def config(self) -> AppConfig:
        return self._session.config if self._session is not None else DEFAULT_CONFIG

    # ---------------- Overridable behavior ----------------

    def prompt(self) -> str:
        return self.prompt_text if self.prompt_text is not None else self.config.prompt

    def interrupt_policy(self) -> str:
        """'quit' or 'exit': what Ctrl-C at this scope's prompt does."""
        policy = self.interrupt_action
        if policy is None:
            return self.config.interrupt_action
        normalized = policy.strip().lower()
        if normalized not in INTERRUPT_ACTIONS:
            raise ValueError(
                f"{type(self).__name__}.interrupt_action must be one of "
                f"{', '.join(INTERRUPT_ACTIONS)}, got {policy!r}")
        return normalized

    def help(self, args: Sequence[str]) -> CommandResult:
        """Write help for the scope or one command."""
        text = format_help(self.commands(), args)
        self.writer.write_line()
        self.writer.write_line(text.rstrip("\n"))
        return Done()

    def empty(self) -> CommandResult:
        """An empty line was entered. No-op unless empty lines are errors."""
        policy = self.empty_line_is_error
        if policy is None:
            policy = self.config.empty_line_is_error
        return EmptyLine() if policy else Done()

    def default(self, line: CommandLine) -> CommandResult:
        """The command is not in the table."""
        return InvalidCommand(line.command)

    def handle_error(self, error: CommandError) -> Any:
        """
        Host error hook. Return an Action to resolve the error, or a
        CommandError (default: the same one) for the built-in handling.
        None counts as Done.
        """
        return error

    def before_loop(self) -> None:
        pass

    def before_command(self, line: Line) -> Line:
        """Called with every parsed line; the returned line is dispatched."""
        return line

    def after_command(self, line: Line, result: CommandResult) -> Any:
        """Called after every command; the returned result is used (None keeps it)."""
        return result

    def after_loop(self) -> None:
        pass

    # ---------------- Error handling ----------------

    def handle_error_internal(self, error: CommandError) -> CommandResult:
        """Let the host handle `error`, then apply the built-in defaults."""
        try:
            result = normalize_result(self.handle_error(error))
        except CommandError as raised:
            result = raised

        if not isinstance(result, CommandError):
            return result

        if isinstance(result, RECOVERABLE_ERRORS):
            self.writer.write_error(describe_error(result, self.commands()))
            return Done()
        if isinstance(result, Interrupted):
            return Exit() if self.interrupt_policy() == "exit" else Quit()
        if isinstance(result, EndOfInput):
            return Exit()

        log.warning("Unhandled error in %s: %r", type(self).__name__, result)
        return result

    # ---------------- Command loop ----------------

    def run_lines(self, session: Session) -> CommandResult:
        """
        Run the command loop of this scope until it terminates.

        Returns Done (also for Exit), Quit, NewScope or an unresolved error.
        """
        previous = self._session
        self._session = session
        try:
            return self._command_loop(session)
        finally:
            self._session = previous

    def _command_loop(self, session: Session) -> CommandResult:
        table = self.commands()
        session.reader.attach(self)
        self.interrupt_policy()  # reject a misconfigured scope before it reads
        log.debug("Entering scope %s", type(self).__name__)
        self.before_loop()

        result: CommandResult = Done()
        while not is_terminal(result):
            result = self._run_once(session, table)
            if isinstance(result, Fatal):
                # No further hooks once a fatal error is selected
                log.debug("Fatal error %s in scope %s", result.code, type(self).__name__)
                return result

        self.after_loop()
        log.debug("Leaving scope %s with %r", type(self).__name__, result)
        return Done() if isinstance(result, Exit) else result

    def _run_once(self, session: Session, table: CommandTable) -> CommandResult:
        try:
            raw = session.reader.read_line(self.prompt())
        except CommandError as signal:
            # Control signal: nothing to parse, no after_command
            return self._run_sub_scope(self.handle_error_internal(signal), session)

        line: Line = parse(raw)
        try:
            line = self.before_command(line)
            if isinstance(line, CommandLine):
                result = dispatch(table, line, self)
            else:
                result = normalize_result(self.empty())
        except CommandError as error:
            result = error

        if isinstance(result, CommandError):
            result = self.handle_error_internal(result)

        entered = isinstance(result, SubScope)
        result = self._enter_sub_scope(result, session)
        if isinstance(result, Fatal):
            return result

        try:
            returned = self.after_command(line, result)
            final = result if returned is None else normalize_result(returned)
        except CommandError as error:
            final = error

        if final is not result:
            # A result introduced by after_command goes through the same path
            if isinstance(final, CommandError):
                final = self.handle_error_internal(final)
            final = self._run_sub_scope(final, session)
        elif entered:
            final = self._recover_sub_scope_error(final, session)
        return final

    def _enter_sub_scope(self, result: CommandResult, session: Session) -> CommandResult:
        if not isinstance(result, SubScope):
            return result
        result = run_nested(result.scope, session)
        session.reader.attach(self)
        return result

    def _recover_sub_scope_error(self, result: CommandResult, session: Session) -> CommandResult:
        # An error a sub-scope left unresolved gets one pass through this
        # scope's error path; Fatal is never handled again
        if isinstance(result, CommandError) and not isinstance(result, Fatal):
            log.debug("Sub scope of %s ended with %r", type(self).__name__, result)
            result = self._enter_sub_scope(self.handle_error_internal(result), session)
        return result

    def _run_sub_scope(self, result: CommandResult, session: Session) -> CommandResult:
        if not isinstance(result, SubScope):
            return result
        return self._recover_sub_scope_error(self._enter_sub_scope(result, session), session)


def run_nested(scope: Scope, session: Session) -> CommandResult:
    """
    Run a sub-scope to completion.

    A sub-scope that ends with NewScope is replaced by the new scope at the
    same depth; the caller gets Done, Quit or an unresolved error.
    """
    log.debug("Pushing sub scope %s", type(scope).__name__)
    result = scope.run_lines(session)
    while isinstance(result, NewScope):
        log.debug("Sub scope %s replaced by %s", type(scope).__name__, type(result.scope).__name__)
        scope = result.scope
        result = scope.run_lines(session)
    return result
