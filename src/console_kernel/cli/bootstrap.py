# src/console_kernel/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes settings (injectable, defaults to get_settings()),
- builds the output sink, registry, metadata provider, parser, scheduler and application,
- registers the built-in commands plus any extra ones,
- loads schedule definitions from the schedules file.

Nothing is registered as a side effect of importing a command class.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from ..config import Settings, get_settings
from ..core.metadata import MetadataRegistry
from ..core.ports import Command, Output
from ..core.registry import CommandRegistry
from ..tasks.schedule_file import apply_schedule_definitions, load_schedule_definitions
from ..tasks.task_scheduler import Clock, CommandScheduler
from .application import Application
from .commands import GreetCommand, HelpCommand, ListCommand, ScheduleCommand
from .output import ConsoleOutput
from .parser import ArgparseParser

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ConsoleKernel:
    settings: Settings
    output: Output
    registry: CommandRegistry
    metadata: MetadataRegistry
    parser: ArgparseParser
    scheduler: CommandScheduler
    application: Application


def builtin_commands(
        registry: CommandRegistry,
        metadata: MetadataRegistry,
        scheduler: CommandScheduler,
        settings: Settings,
) -> list[Command]:
    return [
        ListCommand(registry, metadata),
        HelpCommand(registry, metadata),
        GreetCommand(),
        ScheduleCommand(scheduler, interval_seconds=settings.scheduler_interval_seconds),
    ]


def create_kernel(
        *,
        settings: Settings | None = None,
        output: Output | None = None,
        commands: Iterable[Command] = (),
        clock: Clock = datetime.now,
        load_schedules: bool = True,
) -> ConsoleKernel:
    """
    Wire every collaborator explicitly.

    Raises DuplicateCommandError on clashing names, ScheduleFileError on a malformed schedules
    file and CommandNotFoundError when a schedule names an unknown command. All of them should
    abort startup.
    """
    if settings is None:
        settings = get_settings()

    output = output if output is not None else ConsoleOutput()
    registry = CommandRegistry()
    metadata = MetadataRegistry()
    parser = ArgparseParser(
        prog=settings.app_name,
        description=f"{settings.app_name} - command console with a recurring scheduler",
        version=settings.app_version,
    )
    scheduler = CommandScheduler(registry, output, clock=clock)

    application = Application(
        registry,
        parser,
        output,
        metadata,
        name=settings.app_name,
        version=settings.app_version,
        commands=[*builtin_commands(registry, metadata, scheduler, settings), *commands],
    )

    if load_schedules:
        definitions = load_schedule_definitions(settings.schedules_path)
        count = apply_schedule_definitions(scheduler, definitions)
        logger.debug("Scheduled %d task(s) from %s", count, settings.schedules_path)

    return ConsoleKernel(
        settings=settings,
        output=output,
        registry=registry,
        metadata=metadata,
        parser=parser,
        scheduler=scheduler,
        application=application,
    )
