# src/console_kernel/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "console_kernel"
LOG_FILE_NAME = "console.log"

_FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


class _ConsoleNoiseFilter(logging.Filter):
    """
    stderr is shared with command error output, so only our own records get through
    at the handler's level. Everything else (asyncio, py.warnings, libraries) needs ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == PACKAGE_LOGGER or record.name.startswith(PACKAGE_LOGGER + "."):
            return True
        return record.levelno >= logging.ERROR


def _level(value: int | str) -> int:
    if isinstance(value, int):
        return value
    resolved = logging.getLevelName(value.strip().upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(
    *,
    log_dir: str | Path | None = ".local/console",
    console_level: int | str = logging.WARNING,
    file_level: int | str = logging.DEBUG,
) -> Path | None:
    """
    Configure the root logger once, before any command runs.

    - stderr handler at `console_level`, filtered (see _ConsoleNoiseFilter)
    - file handler at `file_level` in `log_dir/console.log`; skipped when log_dir is None

    Returns the log file path, if any.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Re-running replaces handlers instead of stacking them.
    for h in list(root.handlers):
        root.removeHandler(h)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(_level(console_level))
    ch.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    log_file: Path | None = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(_level(file_level))
        fh.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
