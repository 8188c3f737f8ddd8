# src/console_kernel/cli/application.py

"""
Console application: resolves argv to exactly one command execution.

Precedence (fixed):
1. built-in global flags, in BUILTIN_FLAGS order;
2. shortcut flags declared in command metadata, in registration order;
3. subcommand resolution by name or alias through the argument parser.

A built-in flag wins even when a later command declares a shortcut with the same flag string.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..core.errors import ExecutionError
from ..core.lifecycle import prepare_command, run_lifecycle
from ..core.metadata import Shortcut
from ..core.ports import ArgumentParser, Command, MetadataProvider, Output, ParsedGlobals
from ..core.registry import CommandRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BuiltinFlag:
    flags: tuple[str, ...]
    command: str
    description: str
    # pass a string flag value to the command as its first argument
    value_as_argument: bool = False


BUILTIN_FLAGS: tuple[BuiltinFlag, ...] = (
    BuiltinFlag(("--list",), "list", "List all available commands"),
    BuiltinFlag(("--greet",), "greet", "Greet someone (optionally by NAME)", value_as_argument=True),
    BuiltinFlag(
        ("--schedule",),
        "schedule",
        "Run a scheduler action (list, run, start, stop)",
        value_as_argument=True,
    ),
)


@dataclass(frozen=True, slots=True)
class ShortcutMapping:
    flag: str
    command: str
    key: str
    args: tuple[str, ...] = ()
    options: dict[str, Any] = field(default_factory=dict)


def _exit_status(code: Any) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


class Application:
    def __init__(
            self,
            registry: CommandRegistry,
            parser: ArgumentParser,
            output: Output,
            metadata: MetadataProvider,
            *,
            name: str = "console",
            version: str = "0.1.0",
            commands: Iterable[Command] = (),
    ) -> None:
        self._registry = registry
        self._parser = parser
        self._output = output
        self._metadata = metadata
        self._name = name
        self._version = version

        self._builtin_keys: list[tuple[BuiltinFlag, str | None]] = []
        self._shortcuts: dict[str, ShortcutMapping] = {}

        self._add_global_options()
        self.register_commands(commands)

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return self._version

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def shortcuts(self) -> dict[str, ShortcutMapping]:
        return dict(self._shortcuts)

    # ---- registration ----

    def _add_global_options(self) -> None:
        self._builtin_keys = [
            (flag, self._parser.add_global_flag(flag.flags, flag.description))
            for flag in BUILTIN_FLAGS
        ]

    def register(self, command: Command) -> Application:
        """Add a command. A duplicate name raises DuplicateCommandError and should abort startup."""
        self._registry.add(command)
        command.configure()
        self._wire(command)
        return self

    def register_commands(self, commands: Iterable[Command]) -> Application:
        for command in commands:
            self.register(command)
        return self

    def get_commands(self) -> list[Command]:
        return self._registry.get_all()

    def set_commands(self, commands: Iterable[Command]) -> Application:
        """Replace the whole command set (registry, shortcuts and parser wiring)."""
        self._registry.clear()
        self._shortcuts.clear()
        self._parser.reset()
        self._add_global_options()
        return self.register_commands(commands)

    def _wire(self, command: Command) -> None:
        meta = self._metadata.describe(command)
        if meta.hidden:
            # Still in the registry: resolvable and schedulable, just not user-facing.
            logger.debug("Command %s is hidden; not wired into the parser.", command.name)
            return

        self._parser.add_subcommand(
            command.name,
            command.description,
            self._make_handler(command.name),
            aliases=meta.aliases,
            arguments=meta.arguments,
            options=meta.options,
        )
        for shortcut in meta.shortcuts:
            self._register_shortcut(command.name, shortcut)

    def _register_shortcut(self, command_name: str, shortcut: Shortcut) -> None:
        strings = shortcut.flag_strings()
        self._parser.add_global_flag(
            strings,
            f'{shortcut.description} (shortcut for "{command_name}")',
            shortcut.default_value,
        )
        for flag in strings:
            existing = self._shortcuts.get(flag)
            if existing is not None:
                # First registration keeps the flag.
                logger.warning(
                    "Shortcut %s of %s is already taken by %s; ignored.",
                    flag, command_name, existing.command,
                )
                continue
            # A string already taken by a built-in maps to the existing key.
            key = self._parser.option_key(flag)
            if key is None:
                continue
            self._shortcuts[flag] = ShortcutMapping(
                flag=flag,
                command=command_name,
                key=key,
                args=tuple(shortcut.args),
                options=dict(shortcut.options),
            )

    def _make_handler(self, command_name: str):
        async def handler(arguments: list[Any], options: dict[str, Any]) -> int:
            command = self._registry.get(command_name)
            if command is None:
                self._output.error(f'Command "{command_name}" not found.')
                return 1
            return await self._execute(command, list(arguments), options)

        return handler

    # ---- dispatch ----

    async def _execute(
            self,
            command: Command,
            args: Sequence[str],
            options: dict[str, Any] | None,
    ) -> int:
        """Lifecycle boundary for dispatcher runs: errors are reported here and become exit 1."""
        try:
            prepare_command(command, self._output, args, options)
            result = await run_lifecycle(command)
        except ExecutionError as exc:
            logger.debug("Command %s failed in %s.", exc.command_name, exc.state, exc_info=True)
            self._output.error(f"Error: {exc}")
            return 1

        if result.aborted:
            return 0
        return result.exit_code or 0

    async def _handle_global_options(self, parsed: ParsedGlobals) -> int | None:
        options = parsed.options

        for flag, key in self._builtin_keys:
            if key is None or key not in options:
                continue
            command = self._registry.get(flag.command)
            if command is None:
                continue
            value = options[key]
            args = [value] if flag.value_as_argument and isinstance(value, str) else []
            logger.debug("Built-in flag %s -> %s", flag.flags[0], flag.command)
            return await self._execute(command, args, None)

        for mapping in self._shortcuts.values():
            if mapping.key not in options:
                continue
            command = self._registry.get(mapping.command)
            if command is None:
                continue
            value = options[mapping.key]
            args = list(mapping.args)
            if isinstance(value, str):
                args[:1] = [value]
            logger.debug("Shortcut %s -> %s", mapping.flag, mapping.command)
            return await self._execute(command, args, mapping.options or None)

        return None

    async def run(self, argv: Sequence[str] | None = None) -> int:
        """Dispatch argv (without the program name). Returns the process exit status."""
        argv = list(sys.argv[1:] if argv is None else argv)
        try:
            handled = await self._handle_global_options(self._parser.parse_globals(argv))
            if handled is not None:
                return handled

            resolution = self._parser.resolve(argv)
            if resolution is None:
                self._output.write(self._parser.format_help())
                return 0

            return await resolution.handler(resolution.arguments, resolution.options)
        except SystemExit as exc:
            # argparse usage errors, --help and --version
            return _exit_status(exc.code)
        except Exception as exc:
            logger.debug("Dispatch failed.", exc_info=True)
            self._output.error(f"Fatal error: {exc}")
            return 1
