# src/console_kernel/core/command.py

"""
Base class for commands.

Subclasses set `name`/`description` (and usually `metadata`) at class level and implement
`execute`. Positional arguments are stored by index ("0", "1", ...) and by declared name
when the command's metadata lists its arguments.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, ClassVar

from .metadata import EMPTY_METADATA, CommandMetadata
from .ports import ExitCode, Output


class Input:
    """Arguments and options of a single invocation."""

    def __init__(
            self,
            args: dict[str, Any] | None = None,
            opts: dict[str, Any] | None = None,
    ) -> None:
        self.args: dict[str, Any] = dict(args or {})
        self.opts: dict[str, Any] = dict(opts or {})

    def get_argument(self, key: str | int, default: Any = None) -> Any:
        return self.args.get(str(key), default)

    def get_arguments(self) -> dict[str, Any]:
        return dict(self.args)

    def get_option(self, name: str, default: Any = None) -> Any:
        return self.opts.get(name, default)

    def get_options(self) -> dict[str, Any]:
        return dict(self.opts)

    def has_option(self, name: str) -> bool:
        return name in self.opts


class _NullOutput:
    def write(self, message: str) -> None: ...
    def writeln(self, message: str = "") -> None: ...
    def error(self, message: str) -> None: ...
    def success(self, message: str) -> None: ...
    def info(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def comment(self, message: str) -> None: ...


class BaseCommand:
    SUCCESS: ClassVar[int] = 0
    FAILURE: ClassVar[int] = 1
    INVALID: ClassVar[int] = 2

    name: str = ""
    description: str = ""
    metadata: ClassVar[CommandMetadata] = EMPTY_METADATA

    def __init__(self, name: str | None = None, description: str | None = None) -> None:
        if name:
            self.name = name
        if description is not None:
            self.description = description
        if not self.name:
            raise ValueError(f"{type(self).__name__}: command name is required.")

        self.input = Input()
        self.output: Output = _NullOutput()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    # ---- collaborators ----

    def set_input(self, input: Input) -> None:
        self.input = input

    def get_input(self) -> Input:
        return self.input

    def set_output(self, output: Output) -> None:
        self.output = output

    def get_output(self) -> Output:
        return self.output

    # ---- invocation values ----

    def set_arguments(self, args: Sequence[str]) -> None:
        """Replace positional arguments. Declared argument names become aliases of their index."""
        declared = [a.name for a in self.metadata.arguments]
        fresh: dict[str, Any] = {}
        for index, value in enumerate(args):
            if value is None:
                continue
            fresh[str(index)] = value
            if index < len(declared):
                fresh[declared[index]] = value
        self.input.args = fresh

    def set_argument(self, key: str, value: Any) -> None:
        self.input.args[key] = value

    def get_argument(self, key: str | int, default: Any = None) -> Any:
        return self.input.get_argument(key, default)

    def set_options(self, options: dict[str, Any]) -> None:
        """Replace options for this invocation; use set_option to add a single one."""
        self.input.opts = dict(options)

    def set_option(self, key: str, value: Any) -> None:
        self.input.opts[key] = value

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.input.get_option(key, default)

    # ---- lifecycle ----

    def configure(self) -> None:
        pass

    def execute(self) -> ExitCode:
        """
        The command body; every concrete command overrides this.

        May be a coroutine. Return an exit code, or None for success.
        """
        raise NotImplementedError(f"{type(self).__name__} must implement execute()")

    def before_execute(self) -> bool:
        return True

    def after_execute(self, exit_code: ExitCode) -> None:
        pass

    # ---- output helpers ----

    def line(self, message: str = "") -> None:
        self.output.writeln(message)

    def info(self, message: str) -> None:
        self.output.info(message)

    def success(self, message: str) -> None:
        self.output.success(message)

    def error(self, message: str) -> None:
        self.output.error(message)

    def warning(self, message: str) -> None:
        self.output.warning(message)

    def comment(self, message: str) -> None:
        self.output.comment(message)
