#!/usr/bin/env python3
# replscope/demo.py
from __future__ import annotations

"""
Demo scopes used by `python -m replscope`.

GreeterScope greets people and can open a nested counter scope or switch to
a different scope for good.
"""

from typing import Sequence

from replscope.commands import Action, CommandResult, Done, Exit, Fatal, Quit, cmd
from replscope.interface import Scope


class GreeterScope(Scope):
    """Greet people, count things or switch to the settings scope."""

    prompt_text = "greeter>"

    def __init__(self) -> None:
        self.greeted: list[str] = []

    @cmd(aliases=["hello"], min_args=1)
    def greet(self, args: Sequence[str]) -> CommandResult:
        """
        Greet someone.

        Usage: greet <name> [<name> ...]
        """
        for name in args:
            self.greeted.append(name)
            self.writer.write_line(f"Hello {name}")
        return Done()

    @cmd(max_args=0)
    def count(self, args: Sequence[str]) -> CommandResult:
        """Open a nested counter scope; `exit` comes back here."""
        return Action.sub_scope(CounterScope(depth=1))

    @cmd(max_args=0)
    def settings(self, args: Sequence[str]) -> CommandResult:
        """Leave the greeter and continue in the settings scope."""
        return Action.new_scope(SettingsScope())

    @cmd(aliases=["exit", "q"], max_args=0)
    def quit(self, args: Sequence[str]) -> CommandResult:
        """Quit the application."""
        self.writer.write_line("Quitting")
        return Quit()

    @cmd(max_args=1)
    def fail(self, args: Sequence[str]) -> CommandResult:
        """Quit with an exit status (default 1)."""
        if args and not args[0].isdigit():
            self.writer.write_error(f"Not an exit status: {args[0]}")
            return Done()
        return Fatal(int(args[0]) if args else 1)


class CounterScope(Scope):
    scope_help = "Counter commands:"

    def __init__(self, depth: int) -> None:
        self.depth = depth
        self.value = 0

    def prompt(self) -> str:
        return f"counter {self.depth}>"

    @cmd(aliases=["+"], max_args=1)
    def inc(self, args: Sequence[str]) -> CommandResult:
        """Increment the counter by one or by the given amount."""
        self.value += int(args[0]) if args else 1
        self.writer.write_line(str(self.value))
        return Done()

    @cmd(max_args=0)
    def deeper(self, args: Sequence[str]) -> CommandResult:
        """Open another counter one level down."""
        return Action.sub_scope(CounterScope(self.depth + 1))

    @cmd(aliases=["up"], max_args=0)
    def exit(self, args: Sequence[str]) -> CommandResult:
        """Go back to the calling scope."""
        return Exit()

    @cmd(max_args=0)
    def quit(self, args: Sequence[str]) -> CommandResult:
        return Quit()


class SettingsScope(Scope):
    """Settings commands."""

    prompt_text = "settings>"

    @cmd(max_args=0)
    def back(self, args: Sequence[str]) -> CommandResult:
        """Switch back to the greeter."""
        return Action.new_scope(GreeterScope())

    @cmd(max_args=0)
    def quit(self, args: Sequence[str]) -> CommandResult:
        return Quit()
