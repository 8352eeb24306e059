#!/usr/bin/env python3
# replscope/interface/parser.py
from __future__ import annotations

"""
Line parsing.

A raw input line is split on runs of whitespace. The first token is the
command (case preserved), the rest are its arguments. There is no quoting or
escaping: arguments are exactly the whitespace-delimited tokens.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class EmptyInput:
    """A line with no tokens."""

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class CommandLine:
    """A command token followed by its argument tokens."""
    command: str
    args: tuple[str, ...] = ()

    def __str__(self) -> str:
        return " ".join((self.command, *self.args))


Line = Union[EmptyInput, CommandLine]

EMPTY = EmptyInput()


def tokenize(raw: str) -> list[str]:
    """Split a raw line into whitespace-delimited tokens (no empty tokens)."""
    return raw.split()


def parse(raw: str) -> Line:
    """Turn a raw line into EMPTY or a CommandLine."""
    tokens = tokenize(raw)
    if not tokens:
        return EMPTY
    command, *args = tokens
    return CommandLine(command, tuple(args))
