#!/usr/bin/env python3
# replscope/commands/commands.py
from __future__ import annotations

"""
Command tables and the decorator used to declare commands on a scope.

This module provides:
- CommandEntry: one command (name, aliases, help text, handler).
- CommandTable: the ordered per-scope registry with name/alias lookup.
- cmd: decorator marking a scope method as a command.
- build_table: collects the decorated methods of a scope class.
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Optional, Sequence

from replscope.commands.command_types import CommandResult, InvalidNumberOfArguments

if TYPE_CHECKING:  # pragma: no cover - typing only
    from replscope.interface.scope import Scope

log = logging.getLogger(__name__)

# Attribute set on functions decorated with @cmd
_CMD_MARKER = "__replscope_cmd__"

CommandHandler = Callable[["Scope", Sequence[str]], Any]


@dataclass(slots=True)
class CommandEntry:
    """
    A command registered in a scope.

    Important fields:
        name: Primary command name, case-sensitive and unique in its scope.
        handler: Called as handler(scope, args) and returns a CommandResult
            (or None, meaning Done).
        aliases: Extra names resolving to the same command.
        help_text: Free-form, possibly multi-line help shown by `help <name>`.
        min_args / max_args: Optional bounds checked before the handler runs.
    """

    name: str
    handler: CommandHandler = field(repr=False)
    aliases: list[str] = field(default_factory=list)
    help_text: Optional[str] = None
    min_args: Optional[int] = None
    max_args: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Command name must not be empty.")
        self.aliases = list(self.aliases)

    def handles(self, token: str) -> bool:
        """True if `token` is this command's name or one of its aliases."""
        return token == self.name or token in self.aliases

    def keys(self) -> list[str]:
        """All lookup keys, primary name first."""
        return [self.name, *self.aliases]

    def check_arity(self, args: Sequence[str]) -> None:
        count = len(args)
        if self.min_args is not None and count < self.min_args:
            raise InvalidNumberOfArguments(self.name)
        if self.max_args is not None and count > self.max_args:
            raise InvalidNumberOfArguments(self.name)

    def execute(self, scope: "Scope", args: Sequence[str]) -> Any:
        """Check the argument count and invoke the handler."""
        self.check_arity(args)
        return self.handler(scope, list(args))


class CommandTable:
    """Ordered command registry of one scope type."""

    def __init__(
        self,
        entries: Iterable[CommandEntry] = (),
        scope_help: Optional[str] = None,
        help_command: Optional[str] = "help",
    ) -> None:
        self._entries: list[CommandEntry] = []
        # Name or alias -> entry (first registration wins)
        self._index: Dict[str, CommandEntry] = {}
        self.scope_help = scope_help
        self.help_command = help_command
        for entry in entries:
            self.register(entry)

    # ---------------- Registration ----------------

    def register(self, entry: CommandEntry) -> None:
        """Append an entry. Keys already claimed stay with the earlier entry."""
        self._entries.append(entry)
        for key in entry.keys():
            owner = self._index.get(key)
            if owner is not None:
                log.warning(
                    "Command key '%s' of '%s' is shadowed by '%s'", key, entry.name, owner.name)
                continue
            self._index[key] = entry

    # ---------------- Lookup ----------------

    def get(self, name: str) -> Optional[CommandEntry]:
        """Return the entry for a primary name or alias, or None."""
        return self._index.get(name)

    lookup = get

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._entries)

    def all(self) -> list[CommandEntry]:
        """Entries in registration order."""
        return list(self._entries)

    def names(self) -> list[str]:
        """All primary names and aliases, for completion."""
        return list(self._index.keys())

    # ---------------- Help command ----------------

    @property
    def help_enabled(self) -> bool:
        return bool(self.help_command)

    def is_help_command(self, token: str) -> bool:
        return self.help_enabled and token == self.help_command

    def __repr__(self) -> str:
        return f"CommandTable({[e.name for e in self._entries]!r}, help_command={self.help_command!r})"


def _command_name_from(func_name: str) -> str:
    """do_show_all -> show-all"""
    if func_name.startswith("do_") and len(func_name) > 3:
        func_name = func_name[3:]
    return func_name.replace("_", "-")


def cmd(
    name: str | None = None,
    *,
    aliases: Sequence[str] = (),
    help: str | None = None,
    min_args: int | None = None,
    max_args: int | None = None,
) -> Callable[[Callable[..., CommandResult]], Callable[..., CommandResult]]:
    """
    Decorator to declare a scope method as a command.

    - The command name defaults to the method name, without a `do_` prefix and
      with underscores turned into dashes.
    - The help text defaults to the method docstring.
    - The method is called as method(self, args) with the argument tokens.

    Usable bare (`@cmd`) or with arguments (`@cmd("name", aliases=["n"])`).
    """
    if callable(name):
        # Bare @cmd
        return cmd()(name)  # type: ignore[return-value]

    def wrapper(func: Callable[..., CommandResult]) -> Callable[..., CommandResult]:
        doc = inspect.cleandoc(func.__doc__) if func.__doc__ else None
        setattr(func, _CMD_MARKER, {
            "name": name or _command_name_from(func.__name__),
            "aliases": list(aliases),
            "help_text": help if help is not None else (doc or None),
            "min_args": min_args,
            "max_args": max_args,
        })
        return func

    return wrapper


def _handler_for(attribute: str) -> CommandHandler:
    # Late-bound so subclasses overriding the method are honored
    def handler(scope: "Scope", args: Sequence[str]) -> Any:
        return getattr(scope, attribute)(args)

    handler.__name__ = attribute
    return handler


def build_table(scope_cls: type) -> CommandTable:
    """
    Collect the @cmd methods of `scope_cls` into a CommandTable.

    Base classes are visited first, then definition order within each class.
    A method redefined in a subclass keeps the position of the original and
    uses the subclass's metadata; redefining it without @cmd removes it.
    """
    ordered: Dict[str, dict[str, Any]] = {}
    for klass in reversed(scope_cls.__mro__):
        for attribute, value in vars(klass).items():
            meta = getattr(value, _CMD_MARKER, None)
            if meta is not None:
                ordered[attribute] = meta
            elif attribute in ordered:
                del ordered[attribute]

    entries = [
        CommandEntry(handler=_handler_for(attribute), **meta)
        for attribute, meta in ordered.items()
    ]

    scope_help = getattr(scope_cls, "scope_help", None)
    if scope_help is None and scope_cls.__doc__:
        scope_help = inspect.cleandoc(scope_cls.__doc__)

    table = CommandTable(
        entries,
        scope_help=scope_help,
        help_command=getattr(scope_cls, "help_command", "help"),
    )
    log.debug("Built command table for %s: %s", scope_cls.__name__, table)
    return table
