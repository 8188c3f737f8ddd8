# src/console_kernel/core/registry.py

from __future__ import annotations

import logging
from collections.abc import Iterator

from .errors import DuplicateCommandError
from .ports import Command

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Name-keyed command store. Names are unique; insertion order is kept for listing."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def add(self, command: Command) -> None:
        name = command.name
        if name in self._commands:
            raise DuplicateCommandError(name)
        self._commands[name] = command
        logger.debug("Registered command %s", name)

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def has(self, name: str) -> bool:
        return name in self._commands

    def get_all(self) -> list[Command]:
        return list(self._commands.values())

    def remove(self, name: str) -> bool:
        return self._commands.pop(name, None) is not None

    def clear(self) -> None:
        self._commands.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.get_all())
