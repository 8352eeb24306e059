#!/usr/bin/env python3
# replscope/__init__.py
from __future__ import annotations
"""
replscope: line-oriented, interactive command shells built from scopes.

A host defines Scope subclasses with @cmd methods; the run loop reads lines,
dispatches them and follows the returned actions (continue, quit, exit,
switch scope, enter sub-scope) until the session ends.
"""

__version__ = "0.4.0"

from replscope.commands import (  # noqa: F401
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
    CommandResult,
    CommandEntry,
    CommandTable,
    cmd,
    build_table,
)
from replscope.config import AppConfig, load_config  # noqa: F401
from replscope.interface import (  # noqa: F401
    EMPTY,
    CommandLine,
    Line,
    parse,
    Scope,
    Session,
    Runner,
    cmd_loop,
    run_scope,
    exit_code,
    LineReader,
    LineWriter,
    ConsoleWriter,
    BufferWriter,
    FileLineReader,
    EchoLineReader,
    make_reader,
)
