# src/console_kernel/cli/commands.py

"""Built-in commands: list, help, greet, schedule."""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Awaitable, Callable
from datetime import datetime

from rich.table import Table
from rich.text import Text

from ..core.command import BaseCommand
from ..core.metadata import ArgumentSpec, CommandMetadata, OptionSpec, Shortcut
from ..core.ports import Command, MetadataProvider
from ..core.registry import CommandRegistry
from ..tasks.task_scheduler import DEFAULT_INTERVAL_SECONDS, CommandScheduler

logger = logging.getLogger(__name__)

GREETING_COLORS = ("red", "green", "blue", "yellow", "cyan")


def _ts_local(value: datetime | None, fallback: str) -> str:
    if value is None:
        return fallback
    return value.strftime("%Y-%m-%d %H:%M:%S")


class ListCommand(BaseCommand):
    name = "list"
    description = "List all available commands"
    metadata = CommandMetadata(
        aliases=("commands",),
        shortcuts=(Shortcut("-l, --list", "List all available commands"),),
    )

    def __init__(self, registry: CommandRegistry, metadata: MetadataProvider) -> None:
        super().__init__()
        self._registry = registry
        self._metadata = metadata

    def _groups(self) -> dict[str, list[Command]]:
        groups: dict[str, list[Command]] = {}
        for command in self._registry.get_all():
            if self._metadata.describe(command).hidden:
                continue
            name = command.name
            category = name.split(":", 1)[0] if ":" in name else "general"
            groups.setdefault(category, []).append(command)
        for commands in groups.values():
            commands.sort(key=lambda c: c.name)
        return groups

    def execute(self) -> int:
        groups = self._groups()

        self.line("Available commands:")
        self.comment("Use command name, alias, or shortcut to run a command")
        self.line()

        if not groups:
            self.line("  No commands registered.")
            return self.SUCCESS

        render = getattr(self.output, "render", None)
        for category, commands in groups.items():
            self.line(f"{category.capitalize()} Commands:")
            table = Table("Command", "Aliases", "Shortcuts", "Description")
            for command in commands:
                meta = self._metadata.describe(command)
                aliases = ", ".join(meta.aliases)
                shortcuts = ", ".join(s.flag_strings()[0] for s in meta.shortcuts if s.flag_strings())
                if render is not None:
                    table.add_row(
                        Text(command.name, style="green"),
                        Text(aliases, style="yellow"),
                        Text(shortcuts, style="magenta"),
                        command.description,
                    )
                else:
                    self.line(f"  {command.name:<20} {aliases:<16} {shortcuts:<10} {command.description}")
            if render is not None:
                render(table)
            self.line()

        return self.SUCCESS


class HelpCommand(BaseCommand):
    """Describe one command from its metadata: aliases, shortcut flags, arguments and options."""

    name = "help"
    description = "Display help for a command"
    metadata = CommandMetadata(
        shortcuts=(Shortcut("--help-cmd", "Display help for a specific command"),),
        arguments=(ArgumentSpec("command", "Name or alias of the command"),),
    )

    def __init__(self, registry: CommandRegistry, metadata: MetadataProvider) -> None:
        super().__init__()
        self._registry = registry
        self._metadata = metadata

    def _find(self, name: str) -> Command | None:
        command = self._registry.get(name)
        if command is not None:
            return command
        for candidate in self._registry.get_all():
            if name in self._metadata.describe(candidate).aliases:
                return candidate
        return None

    def execute(self) -> int:
        name = self.get_argument("command") or self.get_argument(0)
        if not name:
            self.error("Command name is required.")
            self.line()
            self.line(f"Usage: {self.name} <command>")
            return self.INVALID

        command = self._find(name)
        if command is None:
            self.error(f'Command "{name}" not found.')
            return self.FAILURE

        meta = self._metadata.describe(command)
        sections = (
            ("Aliases", "yellow", [(alias, "") for alias in meta.aliases]),
            ("Shortcuts", "magenta", [(s.flag, s.description) for s in meta.shortcuts]),
            ("Arguments", "green", [(a.name, a.description or "No description") for a in meta.arguments]),
            ("Options", "green", [(o.flags, o.description or "No description") for o in meta.options]),
        )

        render = getattr(self.output, "render", None)
        header = f"{command.name}: {command.description}"
        if render is not None:
            render(Text(header, style="bold"))
        else:
            self.line(header)
        self.line()

        for title, style, rows in sections:
            if not rows:
                continue
            if render is not None:
                table = Table(
                    title=f"{title}:",
                    title_justify="left",
                    title_style="cyan",
                    show_header=False,
                    box=None,
                )
                for label, text in rows:
                    table.add_row(Text(f"  {label}", style=style), Text(text))
                render(table)
            else:
                self.line(f"{title}:")
                for label, text in rows:
                    self.line(f"  {label}: {text}" if text else f"  {label}")
            self.line()

        return self.SUCCESS


class GreetCommand(BaseCommand):
    name = "greet"
    description = "Greet the user"
    metadata = CommandMetadata(
        shortcuts=(Shortcut("-g", "Greet the user"),),
        arguments=(ArgumentSpec("name", "Who to greet"),),
        options=(
            OptionSpec("-u, --uppercase", "Convert the greeting to uppercase"),
            OptionSpec(
                "-c, --color",
                f"The color of the greeting ({', '.join(GREETING_COLORS)})",
                default="green",
                takes_value=True,
            ),
        ),
    )

    def execute(self) -> int:
        who = self.get_argument(0) or "World"
        uppercase = self.get_option("uppercase") is True
        color = self.get_option("color") or "green"
        if color not in GREETING_COLORS:
            color = "green"

        greeting = f"Hello, {who}!"
        if uppercase:
            greeting = greeting.upper()

        self.line()
        render = getattr(self.output, "render", None)
        if render is not None:
            render(Text(greeting, style=color))
        else:
            self.line(greeting)
        self.line()
        return self.SUCCESS


ShutdownWaiter = Callable[[], Awaitable[None]]


async def wait_for_shutdown_signal() -> None:
    """Block until SIGINT or SIGTERM."""
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # Not supported on every platform; Ctrl+C then surfaces as KeyboardInterrupt.
            pass
    try:
        await stop.wait()
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


class ScheduleCommand(BaseCommand):
    name = "schedule"
    description = "Manage scheduled tasks"
    metadata = CommandMetadata(
        arguments=(ArgumentSpec("action", "The action to perform (list, run, start, stop)", default="list"),),
    )

    ACTIONS = ("list", "run", "start", "stop")

    def __init__(
            self,
            scheduler: CommandScheduler,
            *,
            interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
            wait_for_shutdown: ShutdownWaiter = wait_for_shutdown_signal,
    ) -> None:
        super().__init__()
        self._scheduler = scheduler
        self._interval_seconds = interval_seconds
        self._wait_for_shutdown = wait_for_shutdown

    async def execute(self) -> int:
        action = self.get_argument("action") or self.get_argument(0) or "list"

        if action == "list":
            return self._list_tasks()
        if action == "run":
            ran = await self._scheduler.tick()
            self.info(f"{ran} due task(s) run.")
            return self.SUCCESS
        if action == "start":
            return await self._start()
        if action == "stop":
            if not self._scheduler.is_running:
                self.comment("Scheduler is not running.")
            self._scheduler.stop()
            return self.SUCCESS

        self.error(f"Unknown action: {action}")
        self.line(f"Available actions: {', '.join(self.ACTIONS)}")
        return self.INVALID

    def _list_tasks(self) -> int:
        tasks = self._scheduler.get_tasks()
        if not tasks:
            self.info("No scheduled tasks.")
            return self.SUCCESS

        render = getattr(self.output, "render", None)
        table = Table("Command", "Schedule", "Last Run", "Next Run")
        self.line()
        for task in tasks:
            row = (
                task.command_name,
                task.expression.format(),
                _ts_local(task.last_run, "Never"),
                _ts_local(task.next_run, "Unknown"),
            )
            if render is not None:
                table.add_row(*row)
            else:
                self.line("  " + "  ".join(row))
        if render is not None:
            render(table)
        self.line()
        return self.SUCCESS

    async def _start(self) -> int:
        self._scheduler.start(self._interval_seconds)
        logger.info("Scheduler running in the foreground with %d task(s).", len(self._scheduler.get_tasks()))
        self.comment("Press Ctrl+C to stop.")
        try:
            await self._wait_for_shutdown()
        finally:
            self._scheduler.stop()
        return self.SUCCESS
