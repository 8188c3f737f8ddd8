# tests/test_command.py

from __future__ import annotations

import pytest

from console_kernel.core.command import BaseCommand, Input
from console_kernel.core.metadata import ArgumentSpec, CommandMetadata

from .fakes import FakeOutput


class Copy(BaseCommand):
    name = "copy"
    description = "Copy a file"
    metadata = CommandMetadata(arguments=(ArgumentSpec("source"), ArgumentSpec("target")))

    def execute(self) -> int:
        return self.SUCCESS


def test_class_level_name_and_description() -> None:
    cmd = Copy()
    assert cmd.name == "copy"
    assert cmd.description == "Copy a file"


def test_constructor_overrides_name() -> None:
    assert Copy("cp").name == "cp"


def test_name_is_required() -> None:
    class Nameless(BaseCommand):
        pass

    with pytest.raises(ValueError):
        Nameless()


def test_arguments_by_index_and_declared_name() -> None:
    cmd = Copy()
    cmd.set_arguments(["a.txt", "b.txt", "extra"])

    assert cmd.get_argument(0) == "a.txt"
    assert cmd.get_argument("source") == "a.txt"
    assert cmd.get_argument("target") == "b.txt"
    assert cmd.get_argument(2) == "extra"
    assert cmd.get_argument(3, "default") == "default"


def test_set_arguments_replaces_previous_values() -> None:
    cmd = Copy()
    cmd.set_arguments(["a", "b"])
    cmd.set_arguments(["c"])

    assert cmd.get_input().get_arguments() == {"0": "c", "source": "c"}


def test_none_arguments_are_skipped() -> None:
    cmd = Copy()
    cmd.set_arguments([None, "b"])

    assert cmd.get_argument("source") is None
    assert cmd.get_argument("target") == "b"


def test_set_options_replaces_and_set_option_adds() -> None:
    cmd = Copy()
    cmd.set_options({"force": True})
    cmd.set_options({"verbose": 2})
    cmd.set_option("dry_run", False)

    assert cmd.get_input().get_options() == {"verbose": 2, "dry_run": False}
    assert cmd.get_input().has_option("dry_run")


def test_input_object_can_be_replaced() -> None:
    cmd = Copy()
    cmd.set_input(Input({"0": "x"}, {"y": 1}))

    assert cmd.get_argument(0) == "x"
    assert cmd.get_option("y") == 1


def test_output_helpers_route_to_sink() -> None:
    cmd = Copy()
    out = FakeOutput()
    cmd.set_output(out)

    cmd.line("plain")
    cmd.info("i")
    cmd.success("s")
    cmd.error("e")
    cmd.warning("w")
    cmd.comment("c")

    assert out.lines == [
        ("writeln", "plain"),
        ("info", "i"),
        ("success", "s"),
        ("error", "e"),
        ("warning", "w"),
        ("comment", "c"),
    ]


def test_output_helpers_are_silent_without_a_sink() -> None:
    Copy().info("nobody listens")


def test_execute_must_be_implemented() -> None:
    class Todo(BaseCommand):
        name = "todo"

    with pytest.raises(NotImplementedError, match="Todo must implement execute"):
        Todo().execute()
