# src/console_kernel/cli/parser.py

"""
argparse-backed argument-parsing collaborator.

Two parsers are kept in sync:
- a flags-only parser used to scan argv for global/shortcut flags (unknown tokens are kept),
- the full program parser with one subparser per visible command.

Global flag destinations are prefixed so they never collide with a subcommand's own options,
which argparse stores on the same namespace.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from typing import Any

from ..core.metadata import ArgumentSpec, OptionSpec
from ..core.ports import ParsedGlobals, Resolution, SubcommandHandler

_RESERVED_FLAGS = frozenset({"-h", "--help", "-V", "--version"})
_GLOBAL_PREFIX = "_g_"
_COMMAND_DEST = "_command"
_NAME_DEST = "_command_name"


def _dest_for(flags: Sequence[str]) -> str:
    long_flags = [f for f in flags if f.startswith("--")]
    raw = (long_flags or list(flags))[0]
    return _GLOBAL_PREFIX + raw.lstrip("-").replace("-", "_")


class ArgparseParser:
    def __init__(self, prog: str, description: str = "", version: str | None = None) -> None:
        self.prog = prog
        self.description = description
        self.version = version
        self.reset()

    def reset(self) -> None:
        """Drop every registered flag and subcommand."""
        self._globals = argparse.ArgumentParser(prog=self.prog, add_help=False, allow_abbrev=False)
        self._program = argparse.ArgumentParser(
            prog=self.prog,
            description=self.description,
            allow_abbrev=False,
        )
        if self.version:
            self._program.add_argument(
                "-V", "--version", action="version", version=f"%(prog)s {self.version}"
            )
        self._global_group = self._program.add_argument_group("shortcuts")
        self._subparsers = self._program.add_subparsers(
            dest=_COMMAND_DEST, metavar="COMMAND", title="commands"
        )

        self._flag_keys: dict[str, str] = {}
        self._handlers: dict[str, SubcommandHandler] = {}
        self._argument_dests: dict[str, list[str]] = {}

    # ---- global flags ----

    def add_global_flag(self, flags: Sequence[str], description: str, default: Any = None) -> str | None:
        free = [f for f in flags if f not in self._flag_keys and f not in _RESERVED_FLAGS]
        if not free:
            return None

        dest = _dest_for(free)
        kwargs: dict[str, Any] = {
            "dest": dest,
            "nargs": "?",
            "const": True if default is None else default,
            "default": None,
            "help": description,
        }
        self._globals.add_argument(*free, **kwargs)
        self._global_group.add_argument(*free, **kwargs)
        for flag in free:
            self._flag_keys[flag] = dest
        return dest

    def option_key(self, flag: str) -> str | None:
        return self._flag_keys.get(flag)

    def parse_globals(self, argv: Sequence[str]) -> ParsedGlobals:
        namespace, rest = self._globals.parse_known_args(list(argv))
        options = {k: v for k, v in vars(namespace).items() if v is not None}
        return ParsedGlobals(operands=rest, options=options)

    # ---- subcommands ----

    def add_subcommand(
            self,
            name: str,
            description: str,
            handler: SubcommandHandler,
            *,
            aliases: Sequence[str] = (),
            arguments: Sequence[ArgumentSpec] = (),
            options: Sequence[OptionSpec] = (),
    ) -> None:
        sub = self._subparsers.add_parser(
            name,
            aliases=list(aliases),
            help=description,
            description=description,
            allow_abbrev=False,
        )
        sub.set_defaults(**{_NAME_DEST: name})

        dests: list[str] = []
        for spec in arguments:
            if spec.required:
                sub.add_argument(spec.name, help=spec.description)
            else:
                sub.add_argument(spec.name, nargs="?", default=spec.default, help=spec.description)
            dests.append(spec.name)

        for spec in options:
            strings = spec.flag_strings()
            if spec.takes_value:
                sub.add_argument(*strings, default=spec.default, help=spec.description)
            else:
                sub.add_argument(
                    *strings,
                    action="store_true",
                    default=bool(spec.default),
                    help=spec.description,
                )

        self._handlers[name] = handler
        self._argument_dests[name] = dests

    def resolve(self, argv: Sequence[str]) -> Resolution | None:
        """Parse argv fully. Returns None when no subcommand was given; usage errors raise SystemExit."""
        namespace = self._program.parse_args(list(argv))
        values = vars(namespace)
        name = values.get(_NAME_DEST)
        if name is None:
            return None

        dests = self._argument_dests.get(name, [])
        arguments = [values.get(d) for d in dests]
        while arguments and arguments[-1] is None:
            arguments.pop()

        options = {
            k: v for k, v in values.items()
            if not k.startswith("_") and k not in dests
        }
        return Resolution(name=name, handler=self._handlers[name], arguments=arguments, options=options)

    def format_help(self) -> str:
        return self._program.format_help()
