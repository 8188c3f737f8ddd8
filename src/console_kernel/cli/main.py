# src/console_kernel/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the kernel, dispatches argv and exits with the command's status.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Sequence

from ..config import get_settings
from ..core.errors import ConsoleKernelError
from ..logging_setup import setup_logging
from .bootstrap import create_kernel
from .output import ConsoleOutput

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> None:
    settings = get_settings()

    log_file = setup_logging(
        log_dir=settings.data_dir if settings.log_to_file else None,
        console_level=settings.log_level,
    )
    logger.debug("Starting %s %s (log file: %s)", settings.app_name, settings.app_version, log_file)

    try:
        kernel = create_kernel(settings=settings)
    except ConsoleKernelError as exc:
        logger.debug("Bootstrap failed.", exc_info=True)
        ConsoleOutput().error(f"Bootstrap error: {exc}")
        sys.exit(1)

    try:
        code = asyncio.run(kernel.application.run(argv))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        code = 130

    sys.exit(code)


if __name__ == "__main__":
    main()
