# src/console_kernel/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The registry, dispatcher and scheduler depend on Protocols instead of concrete classes.
This keeps the output sink, argument parser and metadata source swappable and makes
testing easier.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from .metadata import ArgumentSpec, CommandMetadata, OptionSpec

ExitCode = int | None
# None means "success"; a non-zero int is a failure status.


class Output(Protocol):
    """Side-effecting text sinks. Return values are ignored by the core."""

    def write(self, message: str) -> None: ...
    def writeln(self, message: str = "") -> None: ...
    def error(self, message: str) -> None: ...
    def success(self, message: str) -> None: ...
    def info(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def comment(self, message: str) -> None: ...


class Command(Protocol):
    """
    A named unit of work.

    `execute`, `before_execute` and `after_execute` may be plain functions or coroutines.
    The two hooks are optional: the lifecycle only calls them when present.
    """

    name: str
    description: str

    def configure(self) -> None: ...
    def execute(self) -> ExitCode | Awaitable[ExitCode]: ...

    def set_input(self, input: Any) -> None: ...
    def get_input(self) -> Any: ...
    def set_output(self, output: Output) -> None: ...
    def get_output(self) -> Output: ...
    def set_arguments(self, args: Sequence[str]) -> None: ...
    def set_options(self, options: dict[str, Any]) -> None: ...


class MetadataProvider(Protocol):
    def describe(self, command: object) -> CommandMetadata: ...


SubcommandHandler = Callable[[list[Any], dict[str, Any]], Awaitable[int]]


@dataclass(slots=True)
class ParsedGlobals:
    """Result of scanning argv for global flags only."""

    operands: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class Resolution:
    """A subcommand picked out of argv, with its parsed arguments and options."""

    name: str
    handler: SubcommandHandler
    arguments: list[Any] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)


class ArgumentParser(Protocol):
    def add_global_flag(self, flags: Sequence[str], description: str, default: Any = None) -> str | None:
        """Register a global flag; returns its option key, or None if every string is taken."""
        ...

    def option_key(self, flag: str) -> str | None: ...
    def parse_globals(self, argv: Sequence[str]) -> ParsedGlobals: ...

    def add_subcommand(
            self,
            name: str,
            description: str,
            handler: SubcommandHandler,
            *,
            aliases: Sequence[str] = (),
            arguments: Sequence[ArgumentSpec] = (),
            options: Sequence[OptionSpec] = (),
    ) -> None: ...

    def resolve(self, argv: Sequence[str]) -> Resolution | None: ...
    def format_help(self) -> str: ...
    def reset(self) -> None: ...
