#!/usr/bin/env python3
# replscope/commands/__init__.py
from __future__ import annotations

"""
Package for the command result protocol and command tables.

Provides:
- Result protocol (`Action` variants, `CommandError` kinds, `CommandResult`).
- Per-scope registry (`CommandEntry`, `CommandTable`) and the `cmd` decorator.

This package re-exports public APIs from:
- command_types.py
- commands.py
"""


# Re-export from submodules
from .command_types import (
    Action,
    Done,
    Quit,
    Exit,
    NewScope,
    SubScope,
    CommandError,
    InvalidCommand,
    InvalidNumberOfArguments,
    NoHelpForCommand,
    EmptyLine,
    Interrupted,
    EndOfInput,
    LineReadFailure,
    Fatal,
    RECOVERABLE_ERRORS,
    CommandResult,
    normalize_result,
    is_terminal,
)
from .commands import CommandEntry, CommandTable, cmd, build_table

__all__ = [
    "Action",
    "Done",
    "Quit",
    "Exit",
    "NewScope",
    "SubScope",
    "CommandError",
    "InvalidCommand",
    "InvalidNumberOfArguments",
    "NoHelpForCommand",
    "EmptyLine",
    "Interrupted",
    "EndOfInput",
    "LineReadFailure",
    "Fatal",
    "RECOVERABLE_ERRORS",
    "CommandResult",
    "normalize_result",
    "is_terminal",
    "CommandEntry",
    "CommandTable",
    "cmd",
    "build_table",
]
