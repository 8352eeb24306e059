#!/usr/bin/env python3
# replscope/interface/completion.py
from __future__ import annotations

"""
Command line completion utilities.

Suggestions come from the command table of the scope currently running:
- First token: the help command plus every command name and alias.
- 'help <partial>': command names and aliases.
- Arguments are free-form and get no suggestions.
"""

from replscope.commands import CommandTable
from replscope.interface.parser import tokenize


def split_current_token(raw_input: str) -> tuple[list[str], str]:
    """
    Return (parts, current_prefix).

    If the input ends in whitespace, an empty token is appended to signal
    that a new token has started.
    """
    if not raw_input:
        return [], ""
    parts = tokenize(raw_input)
    if raw_input[-1].isspace():
        parts.append("")
    current_prefix = parts[-1] if parts else ""
    return parts, current_prefix


def suggest(text_before_cursor: str, table: CommandTable | None) -> list[str]:
    """Produce sorted suggestions for the token under the cursor."""
    if table is None:
        return []

    parts, current_prefix = split_current_token(text_before_cursor.lstrip())

    if len(parts) <= 1:
        universe = set(table.names())
        if table.help_command:
            universe.add(table.help_command)
        return sorted(w for w in universe if w.startswith(current_prefix))

    if table.is_help_command(parts[0]) and len(parts) == 2:
        return sorted(w for w in table.names() if w.startswith(current_prefix))

    return []
