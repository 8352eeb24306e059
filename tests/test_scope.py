from __future__ import annotations

from typing import Sequence

import pytest

from replscope.commands import (
    Action,
    CommandError,
    Done,
    EmptyLine,
    EndOfInput,
    Exit,
    Fatal,
    Interrupted,
    InvalidCommand,
    LineReadFailure,
    Quit,
    cmd,
)
from replscope.config import AppConfig
from replscope.interface import BufferWriter, ConsoleWriter, Runner, Scope
from replscope.interface.parser import EMPTY, CommandLine
from tests.conftest import RecordingReader, run_script


class SignalReader(RecordingReader):
    """Scripted reader where special lines stand for terminal signals."""

    SIGNALS = {
        "<ctrl-c>": Interrupted,
        "<ctrl-d>": EndOfInput,
        "<broken>": lambda: LineReadFailure("broken pipe"),
    }

    def read_line(self, prompt: str) -> str:
        line = super().read_line(prompt)
        if line in self.SIGNALS:
            raise self.SIGNALS[line]()
        return line


def run_signals(scope: Scope, *lines: str, config: AppConfig | None = None):
    reader = SignalReader(*lines)
    writer = BufferWriter()
    result = Runner(scope, reader=reader, writer=writer, config=config or AppConfig()).run()
    return result, reader, writer


class Greeter(Scope):
    """Greeter commands:"""

    @cmd(min_args=1)
    def greet(self, args: Sequence[str]):
        """Greet someone."""
        self.writer.write_line(f"Hello {args[0]}")
        return Done()

    @cmd(aliases=["exit", "q"])
    def quit(self, args: Sequence[str]):
        return Quit()


# ---------------------------------------------------------------------------
# Basic loop
# ---------------------------------------------------------------------------


def test_greet_then_quit_scenario() -> None:
    session = run_script(Greeter(), "greet world", "quit", "greet again")
    assert session.output == ["Hello world"]
    assert session.result == Quit()
    assert session.reader.reads == 2


def test_quit_stops_without_another_read() -> None:
    session = run_script(Greeter(), "q", "greet nobody")
    assert session.reader.reads == 1
    assert session.output == []


def test_end_of_input_ends_the_scope() -> None:
    session = run_script(Greeter(), "greet a", "greet b")
    assert session.output == ["Hello a", "Hello b"]
    assert session.reader.reads == 3
    assert session.result == Done()


def test_default_prompt_and_override() -> None:
    session = run_script(Greeter(), "quit")
    assert session.reader.prompts == [">"]

    class Prompted(Greeter):
        prompt_text = "main>"

    assert run_script(Prompted(), "quit").reader.prompts == ["main>"]
    assert run_script(Greeter(), "quit", config=AppConfig(prompt="$")).reader.prompts == ["$"]


def test_unknown_command_is_reported_and_loop_continues() -> None:
    session = run_script(Greeter(), "bogus", "quit")
    assert session.output == ["Unknown command: bogus"]
    assert session.result == Quit()


def test_wrong_argument_count_is_reported() -> None:
    session = run_script(Greeter(), "greet", "quit")
    assert session.output == ["Invalid number of arguments for command: greet"]


def test_help_output() -> None:
    session = run_script(Greeter(), "help", "help greet", "help quit", "quit")
    assert session.output == [
        "",
        "Greeter commands:",
        "- greet",
        "- quit",
        "",
        "Greet someone.",
        "No help available for command: quit",
    ]


def test_commands_are_case_sensitive() -> None:
    session = run_script(Greeter(), "Quit", "quit")
    assert session.output[0].startswith("Unknown command: Quit")
    assert session.reader.reads == 2


# ---------------------------------------------------------------------------
# Empty lines
# ---------------------------------------------------------------------------


class ErrorRecorder(Greeter):
    def __init__(self) -> None:
        self.errors: list[CommandError] = []

    def handle_error(self, error: CommandError):
        self.errors.append(error)
        return error


def test_empty_line_is_a_no_op_by_default() -> None:
    scope = ErrorRecorder()
    session = run_script(scope, "", "   ", "quit")
    assert session.output == []
    assert scope.errors == []
    assert session.reader.reads == 3


def test_empty_line_as_error_from_config() -> None:
    scope = ErrorRecorder()
    session = run_script(scope, "", "quit", config=AppConfig(empty_line_is_error=True))
    assert scope.errors == [EmptyLine()]
    assert session.output == ["Empty line"]
    assert session.result == Quit()


def test_empty_line_policy_on_the_scope_wins() -> None:
    class Strict(ErrorRecorder):
        empty_line_is_error = True

    scope = Strict()
    run_script(scope, "", "quit")
    assert scope.errors == [EmptyLine()]


def test_empty_hook_override() -> None:
    class EmptyQuits(Greeter):
        def empty(self):
            return Quit()

    session = run_script(EmptyQuits(), "greet a", "", "greet b")
    assert session.output == ["Hello a"]
    assert session.result == Quit()


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------


class Hooked(Greeter):
    def __init__(self) -> None:
        self.events: list[str] = []

    def before_loop(self) -> None:
        self.events.append("before_loop")

    def before_command(self, line):
        self.events.append(f"before_command:{line}")
        return line

    def after_command(self, line, result):
        self.events.append(f"after_command:{type(result).__name__}")
        return result

    def after_loop(self) -> None:
        self.events.append("after_loop")


def test_hook_order() -> None:
    scope = Hooked()
    run_script(scope, "greet x", "quit")
    assert scope.events == [
        "before_loop",
        "before_command:greet x",
        "after_command:Done",
        "before_command:quit",
        "after_command:Quit",
        "after_loop",
    ]


def test_after_command_sees_recovered_result() -> None:
    scope = Hooked()
    run_script(scope, "nope", "quit")
    assert "after_command:Done" in scope.events


def test_control_signals_skip_command_hooks() -> None:
    scope = Hooked()
    result, _, _ = run_signals(scope, "<ctrl-d>")
    assert result == Done()
    assert scope.events == ["before_loop", "after_loop"]


def test_before_command_can_rewrite_the_line() -> None:
    class Rewriting(Greeter):
        def before_command(self, line):
            if line == EMPTY:
                return CommandLine("greet", ("nobody",))
            return line

    session = run_script(Rewriting(), "", "quit")
    assert session.output == ["Hello nobody"]


def test_after_command_result_is_authoritative() -> None:
    class QuitAfterFirst(Greeter):
        def after_command(self, line, result):
            return Quit()

    session = run_script(QuitAfterFirst(), "greet a", "greet b")
    assert session.output == ["Hello a"]
    assert session.reader.reads == 1
    assert session.result == Quit()


def test_after_command_returning_none_keeps_result() -> None:
    class Passive(Greeter):
        def after_command(self, line, result):
            return None

    session = run_script(Passive(), "greet a", "quit", "greet b")
    assert session.result == Quit()
    assert session.reader.reads == 2


def test_error_from_after_command_goes_through_error_path() -> None:
    class Complaining(Greeter):
        def after_command(self, line, result):
            if line == CommandLine("greet", ("a",)):
                return InvalidCommand("rewritten")
            return result

    session = run_script(Complaining(), "greet a", "quit")
    assert session.output == ["Hello a", "Unknown command: rewritten"]
    assert session.result == Quit()


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


def test_handle_error_can_translate_messages() -> None:
    class Dutch(Greeter):
        def handle_error(self, error):
            if isinstance(error, InvalidCommand):
                self.writer.write_line(f"Onbekend commando: {error.command}")
                return Done()
            return error

    session = run_script(Dutch(), "bogus", "quit")
    assert session.output == ["Onbekend commando: bogus"]


def test_handle_error_may_return_another_error() -> None:
    class Strict(Greeter):
        def handle_error(self, error):
            if isinstance(error, InvalidCommand):
                return Fatal(4)
            return error

    session = run_script(Strict(), "bogus", "quit")
    assert session.result == Fatal(4)
    assert session.reader.reads == 1


def test_interrupt_quits_by_default() -> None:
    result, reader, _ = run_signals(Greeter(), "<ctrl-c>", "greet x")
    assert result == Quit()
    assert reader.reads == 1


def test_read_failure_is_unresolved() -> None:
    scope = Hooked()
    result, _, _ = run_signals(scope, "<broken>", "greet x")
    assert result == LineReadFailure("broken pipe")
    assert scope.events[-1] == "after_loop"


def test_fatal_skips_remaining_hooks() -> None:
    class Failing(Hooked):
        @cmd
        def fail(self, args):
            return Fatal(9)

    scope = Failing()
    session = run_script(scope, "fail", "greet x")
    assert session.result == Fatal(9)
    assert session.reader.reads == 1
    assert scope.events == ["before_loop", "before_command:fail"]


# ---------------------------------------------------------------------------
# Sub scopes
# ---------------------------------------------------------------------------


class Child(Scope):
    prompt_text = "child>"

    def __init__(self, log: list[str]) -> None:
        self.log = log
        self.count = 0

    @cmd
    def inc(self, args):
        self.count += 1
        self.log.append(f"child:{self.count}")

    @cmd
    def up(self, args):
        return Exit()

    @cmd
    def quit(self, args):
        return Quit()

    @cmd
    def replace(self, args):
        return Action.new_scope(Child(self.log))

    @cmd
    def fail(self, args):
        return Fatal(3)


class Parent(Hooked):
    prompt_text = "parent>"

    def __init__(self) -> None:
        super().__init__()
        self.count = 0
        self.log: list[str] = []

    @cmd
    def inc(self, args):
        self.count += 1

    @cmd
    def sub(self, args):
        return Action.sub_scope(Child(self.log))

    @cmd
    def show(self, args):
        self.writer.write_line(f"count={self.count}")


def test_sub_scope_round_trip_keeps_parent_state() -> None:
    scope = Parent()
    session = run_script(scope, "inc", "sub", "inc", "inc", "up", "show", "quit")
    assert session.output == ["count=1"]
    assert scope.log == ["child:1", "child:2"]
    assert session.reader.prompts == [
        "parent>", "parent>", "child>", "child>", "child>", "parent>", "parent>"]
    assert session.result == Quit()


def test_after_command_receives_sub_scope_result() -> None:
    scope = Parent()
    run_script(scope, "sub", "up", "quit")
    assert "after_command:Done" in scope.events
    assert "after_command:SubScope" not in scope.events


def test_quit_in_sub_scope_ends_everything() -> None:
    scope = Parent()
    session = run_script(scope, "sub", "quit", "show")
    assert session.result == Quit()
    assert session.reader.reads == 2
    assert scope.events[-1] == "after_loop"


def test_end_of_input_in_sub_scope_returns_to_parent() -> None:
    result, reader, _ = run_signals(Parent(), "sub", "<ctrl-d>", "show", "quit")
    assert result == Quit()
    assert reader.prompts == ["parent>", "child>", "parent>", "parent>"]


def test_interrupt_in_sub_scope_quits_everything() -> None:
    result, reader, _ = run_signals(Parent(), "sub", "<ctrl-c>", "show")
    assert result == Quit()
    assert reader.reads == 2


def test_interrupt_policy_exit_leaves_only_the_sub_scope() -> None:
    config = AppConfig(interrupt_action="exit")
    result, reader, writer = run_signals(Parent(), "sub", "<ctrl-c>", "show", "quit", config=config)
    assert result == Quit()
    assert writer.lines() == ["count=0"]


def test_new_scope_inside_sub_scope_replaces_it_at_same_depth() -> None:
    scope = Parent()
    session = run_script(scope, "sub", "inc", "replace", "inc", "up", "show", "quit")
    # the replacement starts counting from zero
    assert scope.log == ["child:1", "child:1"]
    assert session.output == ["count=0"]
    assert session.reader.prompts[-2:] == ["parent>", "parent>"]


def test_fatal_in_sub_scope_bypasses_parent_hooks() -> None:
    scope = Parent()
    session = run_script(scope, "sub", "fail", "show")
    assert session.result == Fatal(3)
    assert scope.events == ["before_loop", "before_command:sub"]


class Flaky(Child):
    @cmd
    def boom(self, args):
        return LineReadFailure("disk")


class Recovering(Parent):
    def __init__(self) -> None:
        super().__init__()
        self.errors: list[CommandError] = []

    def handle_error(self, error):
        self.errors.append(error)
        if isinstance(error, LineReadFailure):
            return Done()
        return error

    @cmd
    def flaky(self, args):
        return Action.sub_scope(Flaky(self.log))


def test_unresolved_sub_scope_error_reaches_parent_hook() -> None:
    scope = Recovering()
    session = run_script(scope, "flaky", "boom", "show", "quit")
    assert scope.errors == [LineReadFailure("disk")]
    assert session.output == ["count=0"]
    assert session.result == Quit()
    assert session.reader.reads == 4


def test_after_command_sees_sub_scope_error_before_recovery() -> None:
    scope = Recovering()
    run_script(scope, "flaky", "boom", "quit")
    assert "after_command:LineReadFailure" in scope.events


def test_unrecovered_sub_scope_error_ends_parent() -> None:
    class Strict(Parent):
        @cmd
        def flaky(self, args):
            return Action.sub_scope(Flaky(self.log))

    session = run_script(Strict(), "flaky", "boom", "show")
    assert session.result == LineReadFailure("disk")
    assert session.reader.reads == 2


def test_fatal_from_sub_scope_skips_parent_error_hook() -> None:
    scope = Recovering()
    session = run_script(scope, "sub", "fail", "show")
    assert session.result == Fatal(3)
    assert scope.errors == []


def test_scope_interrupt_action_is_case_insensitive() -> None:
    class Leaving(Child):
        interrupt_action = "EXIT"

    class Top(Parent):
        @cmd
        def leave(self, args):
            return Action.sub_scope(Leaving(self.log))

    result, _, writer = run_signals(Top(), "leave", "<ctrl-c>", "show", "quit")
    assert result == Quit()
    assert writer.lines() == ["count=0"]


def test_unknown_scope_interrupt_action_is_rejected() -> None:
    class Confused(Greeter):
        interrupt_action = "leave"

    with pytest.raises(ValueError, match="interrupt_action"):
        run_script(Confused(), "quit")


def test_nested_sub_scopes_share_the_writer() -> None:
    class Talkative(Child):
        @cmd
        def say(self, args):
            self.writer.write_line(" ".join(args))

    class Top(Scope):
        @cmd
        def sub(self, args):
            return Action.sub_scope(Talkative([]))

    session = run_script(Top(), "sub", "say hi there", "up")
    assert session.output == ["hi there"]
    assert session.result == Done()


# ---------------------------------------------------------------------------
# Session access
# ---------------------------------------------------------------------------


def test_writer_outside_a_session_is_console() -> None:
    assert isinstance(Greeter().writer, ConsoleWriter)


def test_session_is_released_after_the_run() -> None:
    scope = Greeter()
    run_script(scope, "quit")
    assert scope._session is None
