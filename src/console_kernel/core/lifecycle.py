# src/console_kernel/core/lifecycle.py

"""
Execution lifecycle shared by the dispatcher and the scheduler.

    INIT -> BEFORE -> RUN -> AFTER -> DONE

- BEFORE calls the optional `before_execute` hook; a falsy result jumps straight to DONE.
- RUN calls `execute` and captures its exit code (None means success).
- AFTER calls the optional `after_execute` hook whenever RUN was entered, even if RUN raised.

Anything raised in BEFORE/RUN/AFTER leaves this module as ExecutionError. Catching and
reporting it is the caller's job (the boundary that started the run).
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .errors import ExecutionError
from .ports import Command, ExitCode, Output

logger = logging.getLogger(__name__)


class LifecycleState(StrEnum):
    INIT = "init"
    BEFORE = "before"
    RUN = "run"
    AFTER = "after"
    DONE = "done"


@dataclass(slots=True)
class LifecycleResult:
    command_name: str
    exit_code: ExitCode = None
    aborted: bool = False
    transitions: list[LifecycleState] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.exit_code is not None and self.exit_code != 0


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def prepare_command(
        command: Command,
        output: Output,
        args: Sequence[str] | None = None,
        options: dict[str, Any] | None = None,
) -> None:
    """
    INIT step: hand the command its output sink and invocation values.

    Passing either args or options starts a fresh invocation: both are replaced, so values
    from an earlier run of the same command instance never leak into this one.
    """
    command.set_output(output)
    if args is None and options is None:
        return
    command.set_arguments(list(args or []))
    command.set_options(dict(options or {}))


async def run_lifecycle(command: Command) -> LifecycleResult:
    name = command.name
    result = LifecycleResult(command_name=name, transitions=[LifecycleState.INIT])

    before = getattr(command, "before_execute", None)
    if before is not None:
        result.transitions.append(LifecycleState.BEFORE)
        try:
            proceed = await _maybe_await(before())
        except Exception as exc:
            raise ExecutionError(name, LifecycleState.BEFORE, exc) from exc

        if not proceed:
            logger.debug("Command %s aborted by before_execute.", name)
            result.aborted = True
            result.transitions.append(LifecycleState.DONE)
            return result

    result.transitions.append(LifecycleState.RUN)
    run_error: Exception | None = None
    try:
        result.exit_code = await _maybe_await(command.execute())
    except Exception as exc:
        run_error = exc

    after = getattr(command, "after_execute", None)
    if after is not None:
        result.transitions.append(LifecycleState.AFTER)
        try:
            await _maybe_await(after(result.exit_code))
        except Exception as exc:
            if run_error is None:
                raise ExecutionError(name, LifecycleState.AFTER, exc) from exc
            # RUN already failed; that error is the one reported.
            logger.debug("after_execute failed for %s after a failed run.", name, exc_info=True)

    if run_error is not None:
        raise ExecutionError(name, LifecycleState.RUN, run_error) from run_error

    result.transitions.append(LifecycleState.DONE)
    logger.debug("Command %s finished with exit code %s.", name, result.exit_code)
    return result
