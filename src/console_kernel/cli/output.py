# src/console_kernel/cli/output.py

"""Console output sink built on rich. Errors go to stderr, everything else to stdout."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text


class ConsoleOutput:
    def __init__(self, console: Console | None = None, error_console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)

    def _labelled(self, label: str, style: str, message: str) -> Text:
        # Text.assemble keeps user text literal (no markup parsing).
        return Text.assemble((label, style), ": ", message)

    def write(self, message: str) -> None:
        self.console.print(Text(message), end="")

    def writeln(self, message: str = "") -> None:
        self.console.print(Text(message))

    def error(self, message: str) -> None:
        self.error_console.print(self._labelled("ERROR", "bold red", message))

    def success(self, message: str) -> None:
        self.console.print(self._labelled("SUCCESS", "bold green", message))

    def info(self, message: str) -> None:
        self.console.print(self._labelled("INFO", "bold blue", message))

    def warning(self, message: str) -> None:
        self.console.print(self._labelled("WARNING", "bold yellow", message))

    def comment(self, message: str) -> None:
        self.console.print(Text(f"// {message}", style="dim"))

    def render(self, renderable) -> None:
        """Print any rich renderable (tables, panels)."""
        self.console.print(renderable)
