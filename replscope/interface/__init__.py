#!/usr/bin/env python3
# replscope/interface/__init__.py
from __future__ import annotations

"""
Package for the interactive command loop.

Provides:
- Line parsing (`parse`, `CommandLine`, `EMPTY`).
- Command dispatch and help formatting.
- Scopes, sessions and the per-scope run loop.
- Line readers (prompt_toolkit / readline / plain / file / echo) and writers.
- The top-level driver (`Runner`, `cmd_loop`, `run_scope`, `exit_code`).
"""


# Parser FIRST (everything else depends on it)
from .parser import EMPTY, CommandLine, EmptyInput, Line, parse, tokenize

# Output sinks
from .writer import LineWriter, ConsoleWriter, BufferWriter

# Completion
from .completion import suggest, split_current_token

# Command dispatcher / help
from .handler import dispatch, format_help, describe_error, suggest_similar, DEFAULT_SCOPE_HELP

# Scopes and the run loop
from .scope import Scope, Session, run_nested

# Line sources
from .cli import (
    LineReader,
    PromptToolkitReader,
    ReadlineReader,
    PlainReader,
    FileLineReader,
    EchoLineReader,
    make_interactive_reader,
    make_reader,
)

# Driver
from .runner import Runner, cmd_loop, run_scope, exit_code

__all__ = [
    # parser
    "EMPTY",
    "CommandLine",
    "EmptyInput",
    "Line",
    "parse",
    "tokenize",
    # writer
    "LineWriter",
    "ConsoleWriter",
    "BufferWriter",
    # completion
    "suggest",
    "split_current_token",
    # handler
    "dispatch",
    "format_help",
    "describe_error",
    "suggest_similar",
    "DEFAULT_SCOPE_HELP",
    # scope
    "Scope",
    "Session",
    "run_nested",
    # cli
    "LineReader",
    "PromptToolkitReader",
    "ReadlineReader",
    "PlainReader",
    "FileLineReader",
    "EchoLineReader",
    "make_interactive_reader",
    "make_reader",
    # runner
    "Runner",
    "cmd_loop",
    "run_scope",
    "exit_code",
]
