# src/console_kernel/core/metadata.py

"""
Command metadata descriptors.

A command type describes itself with a `CommandMetadata` value: either as a class-level
`metadata` attribute or through an explicit `MetadataRegistry.attach(...)` call made by the
composition root. The core only reads these values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Shortcut:
    """A global flag that runs one command directly, e.g. `-l, --list`."""

    flag: str
    description: str = ""
    default_value: Any = None
    args: tuple[str, ...] = ()
    options: dict[str, Any] = field(default_factory=dict)

    def flag_strings(self) -> list[str]:
        return [part.strip() for part in self.flag.split(",") if part.strip()]


@dataclass(frozen=True, slots=True)
class ArgumentSpec:
    name: str
    description: str = ""
    default: str | None = None
    required: bool = False


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """
    A per-command option.

    `flags` uses the usual comma form ("-c, --color"). Options that do not take a value
    are boolean switches.
    """

    flags: str
    description: str = ""
    default: Any = None
    takes_value: bool = False

    def flag_strings(self) -> list[str]:
        return [part.strip() for part in self.flags.split(",") if part.strip()]


@dataclass(frozen=True, slots=True)
class CommandMetadata:
    hidden: bool = False
    aliases: tuple[str, ...] = ()
    shortcuts: tuple[Shortcut, ...] = ()
    arguments: tuple[ArgumentSpec, ...] = ()
    options: tuple[OptionSpec, ...] = ()


EMPTY_METADATA = CommandMetadata()


class MetadataRegistry:
    """
    Default MetadataProvider.

    Lookup order: explicitly attached metadata (walking the MRO), then the `metadata`
    class attribute, then an empty descriptor.
    """

    def __init__(self) -> None:
        self._by_type: dict[type, CommandMetadata] = {}

    def attach(self, command_type: type, metadata: CommandMetadata) -> None:
        self._by_type[command_type] = metadata

    def describe(self, command: object) -> CommandMetadata:
        for klass in type(command).__mro__:
            found = self._by_type.get(klass)
            if found is not None:
                return found

        attr = getattr(type(command), "metadata", None)
        if isinstance(attr, CommandMetadata):
            return attr
        return EMPTY_METADATA
