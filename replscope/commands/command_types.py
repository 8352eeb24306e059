#!/usr/bin/env python3
# replscope/commands/command_types.py
from __future__ import annotations

"""
Command result protocol.

This module defines:
- Action: what the run loop should do after a command (Done, Quit, Exit,
  NewScope, SubScope).
- CommandError: the error kinds a command, hook or line reader can produce.
- CommandResult: either of the above, returned by every handler and hook.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:  # pragma: no cover - typing only
    from replscope.interface.scope import Scope


class Action:
    """Base class for the non-error outcomes of a command."""

    __slots__ = ()

    @staticmethod
    def new_scope(scope: "Scope") -> "NewScope":
        """End the current scope and continue in `scope` (no way back)."""
        return NewScope(scope)

    @staticmethod
    def sub_scope(scope: "Scope") -> "SubScope":
        """Run `scope` until it exits, then resume the calling scope."""
        return SubScope(scope)


@dataclass(slots=True, frozen=True)
class Done(Action):
    """Ready for the next line."""


@dataclass(slots=True, frozen=True)
class Quit(Action):
    """Stop the whole run, including every enclosing scope."""


@dataclass(slots=True, frozen=True)
class Exit(Action):
    """Stop the innermost scope and return to its caller."""


@dataclass(slots=True, eq=False)
class NewScope(Action):
    """Replace the current scope with `scope`."""
    scope: "Scope"


@dataclass(slots=True, eq=False)
class SubScope(Action):
    """Push `scope` and run it to completion."""
    scope: "Scope"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class CommandError(Exception):
    """
    Base class for every protocol error.

    Errors are values: a handler may return one or raise it, the run loop
    treats both the same. Two errors are equal when kind and payload match.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def _key(self) -> tuple:
        return ()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._key()))

    def __repr__(self) -> str:
        payload = ", ".join(repr(v) for v in self._key())
        return f"{type(self).__name__}({payload})"


class _CommandNamedError(CommandError):
    """An error about one particular command name."""

    template = "{command}"

    def __init__(self, command: str) -> None:
        super().__init__(self.template.format(command=command))
        self.command = command

    def _key(self) -> tuple:
        return (self.command,)


class InvalidCommand(_CommandNamedError):
    template = "Unknown command: {command}"


class InvalidNumberOfArguments(_CommandNamedError):
    template = "Invalid number of arguments for command: {command}"


class NoHelpForCommand(_CommandNamedError):
    template = "No help available for command: {command}"


class EmptyLine(CommandError):
    def __init__(self) -> None:
        super().__init__("Empty line")


class Interrupted(CommandError):
    """Ctrl-C at the prompt."""

    def __init__(self) -> None:
        super().__init__("Interrupted")


class EndOfInput(CommandError):
    """Ctrl-D at the prompt or the end of an input file."""

    def __init__(self) -> None:
        super().__init__("End of input")


class LineReadFailure(CommandError):
    """The line source failed for any other reason."""

    def __init__(self, reason: str = "") -> None:
        super().__init__(
            f"Failed to read line: {reason}" if reason else "Failed to read line")
        self.reason = reason

    def _key(self) -> tuple:
        return (self.reason,)


class Fatal(CommandError):
    """Terminate the whole session with process exit status `code`."""

    def __init__(self, code: int) -> None:
        super().__init__(f"Fatal error (exit code {code})")
        self.code = code

    def _key(self) -> tuple:
        return (self.code,)


# Errors that are reported to the user and then ignored by default
RECOVERABLE_ERRORS: tuple[type[CommandError], ...] = (
    InvalidCommand,
    InvalidNumberOfArguments,
    NoHelpForCommand,
    EmptyLine,
)

CommandResult = Union[Action, CommandError]


def normalize_result(value: Any) -> CommandResult:
    """Map a handler return value onto the result protocol (None -> Done)."""
    if value is None:
        return Done()
    if isinstance(value, (Action, CommandError)):
        return value
    raise TypeError(
        f"Commands must return an Action, a CommandError or None, got {type(value).__name__}")


def is_terminal(result: CommandResult) -> bool:
    """True when `result` ends the loop of the scope that produced it."""
    return isinstance(result, (Quit, Exit, NewScope, CommandError))
