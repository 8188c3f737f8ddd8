# src/console_kernel/tasks/schedule_file.py

"""
Schedule definitions loaded from a JSON file.

Format:

    {
      "schedules": [
        {"command": "greet", "expression": "0 9 * * 1", "args": ["team"],
         "options": {"uppercase": true}, "enabled": true}
      ]
    }

`expression` may also be an object with the five field names. Only definitions are read
here; scheduler state (last/next run) is never written back.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.errors import InvalidScheduleExpression, ScheduleFileError
from .task_models import ScheduleExpression
from .task_scheduler import CommandScheduler

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScheduleDefinition:
    command: str
    expression: ScheduleExpression
    args: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)
    enabled: bool = True


def _parse_entry(index: int, raw: Any) -> ScheduleDefinition:
    if not isinstance(raw, dict):
        raise ScheduleFileError(f"schedules[{index}]: expected an object")

    command = raw.get("command")
    if not isinstance(command, str) or not command.strip():
        raise ScheduleFileError(f"schedules[{index}]: 'command' is required")

    try:
        expression = ScheduleExpression.coerce(raw.get("expression", {}))
    except InvalidScheduleExpression as exc:
        raise ScheduleFileError(f"schedules[{index}] ({command}): {exc}") from exc

    args = raw.get("args", [])
    if not isinstance(args, list):
        raise ScheduleFileError(f"schedules[{index}] ({command}): 'args' must be a list")

    options = raw.get("options", {})
    if not isinstance(options, dict):
        raise ScheduleFileError(f"schedules[{index}] ({command}): 'options' must be an object")

    return ScheduleDefinition(
        command=command.strip(),
        expression=expression,
        args=[str(a) for a in args],
        options=options,
        enabled=bool(raw.get("enabled", True)),
    )


def load_schedule_definitions(path: str | Path) -> list[ScheduleDefinition]:
    path = Path(path)
    if not path.exists():
        logger.debug("No schedule file at %s", path)
        return []

    try:
        data = json.loads(path.read_text("utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ScheduleFileError(f"Failed to read schedules from {path}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("schedules", []), list):
        raise ScheduleFileError(f"{path}: expected an object with a 'schedules' list")

    out = [_parse_entry(i, raw) for i, raw in enumerate(data.get("schedules", []))]
    logger.info("Loaded %d schedule definition(s) from %s", len(out), path)
    return out


def apply_schedule_definitions(
        scheduler: CommandScheduler,
        definitions: list[ScheduleDefinition],
) -> int:
    """Schedule every enabled definition. Unknown commands raise CommandNotFoundError."""
    count = 0
    for definition in definitions:
        if not definition.enabled:
            logger.debug("Skipping disabled schedule for %s", definition.command)
            continue
        scheduler.schedule(
            definition.command,
            definition.expression,
            args=definition.args,
            options=definition.options,
        )
        count += 1
    return count
