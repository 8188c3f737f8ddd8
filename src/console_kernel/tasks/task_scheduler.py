# src/console_kernel/tasks/task_scheduler.py

from __future__ import annotations

"""
Recurring command scheduler.

A small polling loop that:
- sleeps for the configured interval,
- captures "now" once per tick,
- runs every due task sequentially through the shared command lifecycle,
- advances last_run/next_run on success, or leaves the task due so the next tick retries it.

Ticks are serialized: the loop only sleeps after a tick has finished, and tick() holds a lock
so a manual tick cannot interleave with the loop's.
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from typing import Any

from ..core.errors import CommandNotFoundError
from ..core.lifecycle import prepare_command, run_lifecycle
from ..core.ports import Output
from ..core.registry import CommandRegistry
from .task_models import ScheduledTask, ScheduleExpression, SchedulerState

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DEFAULT_INTERVAL_SECONDS = 60.0


def _with_date(dt: datetime, year: int, month: int, day: int) -> datetime:
    """Set the calendar date, carrying month/day overflow forward (Jan 32 -> Feb 1)."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return dt.replace(year=year, month=month, day=1) + timedelta(days=day - 1)


def _cron_weekday(dt: datetime) -> int:
    # cron counts from Sunday = 0; datetime.weekday() from Monday = 0
    return (dt.weekday() + 1) % 7


def calculate_next_run(expression: ScheduleExpression, now: datetime) -> datetime:
    """
    Next run time for `expression`, strictly after `now` for single-field expressions.

    Fields are applied one at a time (minute, hour, day_of_month, month), each rolling the
    next coarser unit forward once when the candidate is not in the future. day_of_week is
    resolved last and independently, so combining it with day_of_month can land on a date
    that matches neither in the cron sense.
    """
    candidate = now.replace(second=0, microsecond=0) + timedelta(minutes=1)

    minute = expression.value("minute")
    if minute is not None:
        candidate = candidate.replace(minute=minute)
        if candidate <= now:
            candidate += timedelta(hours=1)

    hour = expression.value("hour")
    if hour is not None:
        candidate = candidate.replace(hour=hour)
        if candidate <= now:
            candidate += timedelta(days=1)

    day = expression.value("day_of_month")
    if day is not None:
        candidate = _with_date(candidate, candidate.year, candidate.month, day)
        if candidate <= now:
            candidate = _with_date(candidate, candidate.year, candidate.month + 1, candidate.day)

    month = expression.value("month")
    if month is not None:
        candidate = _with_date(candidate, candidate.year, month, candidate.day)
        if candidate <= now:
            candidate = _with_date(candidate, candidate.year + 1, candidate.month, candidate.day)

    weekday = expression.value("day_of_week")
    if weekday is not None:
        delta = (weekday - _cron_weekday(candidate) + 7) % 7
        if delta > 0:
            candidate += timedelta(days=delta)
        elif candidate <= now:
            candidate += timedelta(days=7)

    return candidate


class CommandScheduler:
    def __init__(
            self,
            registry: CommandRegistry,
            output: Output,
            *,
            clock: Clock = datetime.now,
    ) -> None:
        self._registry = registry
        self._output = output
        self._clock = clock
        self._tasks: list[ScheduledTask] = []
        self._runner: asyncio.Task[None] | None = None
        self._tick_lock = asyncio.Lock()

    @property
    def state(self) -> SchedulerState:
        if self._runner is not None and not self._runner.done():
            return SchedulerState.RUNNING
        return SchedulerState.STOPPED

    @property
    def is_running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    def schedule(
            self,
            command_name: str,
            expression: ScheduleExpression | Mapping[str, Any] | str,
            args: list[str] | None = None,
            options: dict[str, Any] | None = None,
    ) -> CommandScheduler:
        command = self._registry.get(command_name)
        if command is None:
            raise CommandNotFoundError(command_name)

        expr = ScheduleExpression.coerce(expression)
        task = ScheduledTask(
            command=command,
            expression=expr,
            args=list(args or []),
            options=dict(options or {}),
            next_run=calculate_next_run(expr, self._clock()),
        )
        self._tasks.append(task)
        logger.info("Scheduled %s (%s), next run %s", command_name, expr, task.next_run)
        return self

    def start(self, interval_seconds: float = DEFAULT_INTERVAL_SECONDS) -> CommandScheduler:
        """Start (or restart) the polling loop. Must be called with a running event loop."""
        sleep_s = float(interval_seconds)
        if sleep_s <= 0:
            raise ValueError("interval_seconds must be positive")

        if self._runner is not None:
            self._runner.cancel()

        loop = asyncio.get_running_loop()
        self._runner = loop.create_task(self._run_loop(sleep_s), name="command-scheduler")
        logger.info("Scheduler started (interval=%.3fs, tasks=%d).", sleep_s, len(self._tasks))
        self._output.info("Scheduler started.")
        return self

    def stop(self) -> CommandScheduler:
        if self._runner is not None:
            self._runner.cancel()
            self._runner = None
            logger.info("Scheduler stopped.")
            self._output.info("Scheduler stopped.")
        return self

    def get_tasks(self) -> list[ScheduledTask]:
        return list(self._tasks)

    def clear_tasks(self) -> CommandScheduler:
        self._tasks = []
        return self

    async def _run_loop(self, sleep_s: float) -> None:
        while True:
            await asyncio.sleep(sleep_s)
            try:
                # Shielded: stop() cancels the loop, never a command that is already running.
                await asyncio.shield(self.tick())
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Scheduler tick failed.")

    async def tick(self) -> int:
        """Run every task due at the moment the tick starts. Returns how many were run."""
        async with self._tick_lock:
            now = self._clock()
            ran = 0
            for task in list(self._tasks):
                if task.is_due(now):
                    await self.run_task(task)
                    ran += 1
            return ran

    async def run_task(self, task: ScheduledTask) -> bool:
        """
        Run one task through the lifecycle. Returns True on a clean success.

        On an exception the task keeps its last_run/next_run and stays due (retried next tick).
        """
        name = task.command_name
        started_at = self._clock()
        self._output.info(f"Running scheduled command: {name}")

        try:
            prepare_command(task.command, self._output, task.args, task.options)
            result = await run_lifecycle(task.command)
        except Exception as exc:
            logger.warning("Scheduled command %s failed; it stays due.", name, exc_info=True)
            self._output.error(f"Error running command {name}: {exc}")
            return False

        if result.aborted:
            self._output.warning(f"Command {name} execution aborted by before_execute hook.")
            return False

        task.last_run = started_at
        task.next_run = calculate_next_run(task.expression, self._clock())
        logger.debug("Task %s -> next run %s", name, task.next_run)

        if result.failed:
            self._output.error(f"Command {name} exited with status {result.exit_code}.")
            return False

        self._output.success(f"Command {name} executed successfully.")
        return True
