"""Console application kernel: command registry, argv dispatcher and recurring scheduler."""

from .core.command import BaseCommand, Input
from .core.errors import (
    CommandNotFoundError,
    ConsoleKernelError,
    DuplicateCommandError,
    ExecutionError,
    InvalidScheduleExpression,
    ScheduleFileError,
)
from .core.metadata import ArgumentSpec, CommandMetadata, MetadataRegistry, OptionSpec, Shortcut
from .core.registry import CommandRegistry
from .tasks.task_models import ScheduledTask, ScheduleExpression
from .tasks.task_scheduler import CommandScheduler, calculate_next_run

__all__ = [
    "ArgumentSpec",
    "BaseCommand",
    "CommandMetadata",
    "CommandNotFoundError",
    "CommandRegistry",
    "CommandScheduler",
    "ConsoleKernelError",
    "DuplicateCommandError",
    "ExecutionError",
    "Input",
    "InvalidScheduleExpression",
    "MetadataRegistry",
    "OptionSpec",
    "ScheduleExpression",
    "ScheduleFileError",
    "ScheduledTask",
    "Shortcut",
    "calculate_next_run",
]
