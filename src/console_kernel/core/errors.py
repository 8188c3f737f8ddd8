# src/console_kernel/core/errors.py

"""
Error taxonomy.

- DuplicateCommandError: registration-time, fatal at startup.
- CommandNotFoundError: raised by the scheduler; the dispatcher treats "not found" as a branch.
- ExecutionError: wraps anything raised inside the BEFORE/RUN/AFTER lifecycle states.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lifecycle import LifecycleState


class ConsoleKernelError(Exception):
    """Base class for every error raised by console_kernel."""


class DuplicateCommandError(ConsoleKernelError):
    def __init__(self, name: str) -> None:
        super().__init__(f'Command "{name}" already exists.')
        self.name = name


class CommandNotFoundError(ConsoleKernelError):
    def __init__(self, name: str) -> None:
        super().__init__(f'Command "{name}" not found.')
        self.name = name


class ExecutionError(ConsoleKernelError):
    """A command hook or body raised; `__cause__` holds the original exception."""

    def __init__(self, command_name: str, state: LifecycleState, cause: BaseException) -> None:
        super().__init__(f"{cause}" if str(cause) else type(cause).__name__)
        self.command_name = command_name
        self.state = state
        self.cause = cause


class InvalidScheduleExpression(ConsoleKernelError, ValueError):
    pass


class ScheduleFileError(ConsoleKernelError):
    pass
