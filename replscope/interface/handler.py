#!/usr/bin/env python3
# replscope/interface/handler.py
from __future__ import annotations

"""
Command dispatch and help formatting.

dispatch() routes one parsed command to the help command, a registered entry
or the scope's default-command hook. format_help() renders the scope and
command help and signals the same error kinds as ordinary dispatch so the
scope's error hook can handle help failures uniformly.
"""

import difflib
import logging
from typing import TYPE_CHECKING, Sequence

from replscope.commands import (
    CommandError,
    CommandResult,
    CommandTable,
    InvalidCommand,
    InvalidNumberOfArguments,
    NoHelpForCommand,
    normalize_result,
)
from replscope.interface.parser import CommandLine

if TYPE_CHECKING:  # pragma: no cover - typing only
    from replscope.interface.scope import Scope

log = logging.getLogger(__name__)

# Shown when a scope has no help text of its own
DEFAULT_SCOPE_HELP = "These are the valid commands in this scope:"


# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------


def _format_scope_help(table: CommandTable) -> str:
    lines = [table.scope_help or DEFAULT_SCOPE_HELP]
    lines.extend(f"- {entry.name}" for entry in table.all())
    return "\n".join(lines) + "\n"


def format_help(table: CommandTable, args: Sequence[str]) -> str:
    """
    Render help for `help [command]`.

    Raises:
        InvalidCommand: the named command does not exist.
        NoHelpForCommand: the command exists but has no help text.
        InvalidNumberOfArguments: more than one argument was given.
    """
    if len(args) == 0:
        return _format_scope_help(table)

    if len(args) == 1:
        entry = table.get(args[0])
        if entry is None:
            raise InvalidCommand(args[0])
        if entry.help_text is None:
            raise NoHelpForCommand(args[0])
        return entry.help_text

    raise InvalidNumberOfArguments(table.help_command or "help")


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


def suggest_similar(name: str, table: CommandTable) -> list[str]:
    """Return close matches for a misspelled command name."""
    universe = table.names()
    if table.help_command:
        universe.append(table.help_command)
    return difflib.get_close_matches(name, universe, n=3, cutoff=0.6)


def describe_error(error: CommandError, table: CommandTable | None = None) -> str:
    """One-line diagnostic written to the output for a recoverable error."""
    message = error.message or type(error).__name__
    if isinstance(error, InvalidCommand) and table is not None:
        matches = suggest_similar(error.command, table)
        if matches:
            message += f". Did you mean: {', '.join(matches)}?"
    return message


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def dispatch(table: CommandTable, line: CommandLine, scope: "Scope") -> CommandResult:
    """
    Run a single parsed command against `scope`.

    A CommandError raised by a handler is returned like any other result.
    Other exceptions are host bugs and propagate.
    """
    try:
        if table.is_help_command(line.command):
            log.debug("Dispatching help %s", list(line.args))
            return normalize_result(scope.help(list(line.args)))

        entry = table.get(line.command)
        if entry is None:
            log.debug("No command '%s', using default hook", line.command)
            return normalize_result(scope.default(line))

        log.debug("Dispatching '%s' -> %s", line.command, entry.name)
        return normalize_result(entry.execute(scope, line.args))
    except CommandError as error:
        return error
