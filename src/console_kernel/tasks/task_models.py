# src/console_kernel/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..core.errors import InvalidScheduleExpression
from ..core.ports import Command

WILDCARD = "*"

# field -> (min, max), inclusive
FIELD_RANGES: dict[str, tuple[int, int]] = {
    "minute": (0, 59),
    "hour": (0, 23),
    "day_of_month": (1, 31),
    "month": (1, 12),
    "day_of_week": (0, 6),  # 0 = Sunday
}
FIELD_ORDER = ("minute", "hour", "day_of_month", "month", "day_of_week")

_CAMEL_KEYS = {"dayOfMonth": "day_of_month", "dayOfWeek": "day_of_week"}


class SchedulerState(StrEnum):
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass(frozen=True, slots=True)
class ScheduleExpression:
    """
    Five independent cron-like fields.

    Each field is None, the wildcard "*", or an exact integer written as a string.
    Ranges, lists and steps are not supported.
    """

    minute: str | None = None
    hour: str | None = None
    day_of_month: str | None = None
    month: str | None = None
    day_of_week: str | None = None

    def __post_init__(self) -> None:
        for name in FIELD_ORDER:
            raw = getattr(self, name)
            if raw is None:
                continue
            if isinstance(raw, int) and not isinstance(raw, bool):
                raw = str(raw)
                object.__setattr__(self, name, raw)
            if not isinstance(raw, str):
                raise InvalidScheduleExpression(f"{name}: expected a string, got {type(raw).__name__}")
            raw = raw.strip()
            object.__setattr__(self, name, raw)
            if raw == WILDCARD:
                continue
            # isdigit() alone also accepts non-ASCII digits such as "²"
            if not (raw.isascii() and raw.isdigit()):
                raise InvalidScheduleExpression(f"{name}: {raw!r} is neither '*' nor an integer")
            lo, hi = FIELD_RANGES[name]
            if not lo <= int(raw) <= hi:
                raise InvalidScheduleExpression(f"{name}: {raw} is outside {lo}-{hi}")

    def value(self, name: str) -> int | None:
        """Numeric value of a field, or None when it is unset or a wildcard."""
        raw = getattr(self, name)
        if raw is None or raw == WILDCARD:
            return None
        return int(raw)

    @classmethod
    def parse(cls, text: str) -> ScheduleExpression:
        """Parse the classic five-field form: 'minute hour day_of_month month day_of_week'."""
        parts = text.split()
        if len(parts) != 5:
            raise InvalidScheduleExpression(f"expected 5 fields, got {len(parts)}: {text!r}")
        return cls(**dict(zip(FIELD_ORDER, parts)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ScheduleExpression:
        kwargs: dict[str, Any] = {}
        for key, raw in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in FIELD_RANGES:
                raise InvalidScheduleExpression(f"unknown field: {key!r}")
            kwargs[name] = raw
        return cls(**kwargs)

    @classmethod
    def coerce(cls, value: ScheduleExpression | Mapping[str, Any] | str) -> ScheduleExpression:
        if isinstance(value, ScheduleExpression):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        raise InvalidScheduleExpression(f"unsupported expression type: {type(value).__name__}")

    def format(self) -> str:
        return " ".join(getattr(self, name) or WILDCARD for name in FIELD_ORDER)

    def __str__(self) -> str:
        return self.format()


@dataclass(slots=True)
class ScheduledTask:
    # Looked up once at schedule time; the registry owns the command.
    command: Command
    expression: ScheduleExpression
    args: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)
    last_run: datetime | None = None
    next_run: datetime | None = None

    @property
    def command_name(self) -> str:
        return self.command.name

    def is_due(self, now: datetime) -> bool:
        return self.next_run is not None and self.next_run <= now
