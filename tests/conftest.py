# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from console_kernel.cli.application import Application
from console_kernel.cli.parser import ArgparseParser
from console_kernel.config import Settings
from console_kernel.core.metadata import MetadataRegistry
from console_kernel.core.registry import CommandRegistry
from console_kernel.tasks.task_scheduler import CommandScheduler

from .fakes import FakeClock, FakeOutput

# Monday, 10:15:00
MONDAY_1015 = datetime(2024, 5, 13, 10, 15, 0)


@pytest.fixture()
def output() -> FakeOutput:
    return FakeOutput()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(MONDAY_1015)


@pytest.fixture()
def registry() -> CommandRegistry:
    return CommandRegistry()


@pytest.fixture()
def metadata() -> MetadataRegistry:
    return MetadataRegistry()


@pytest.fixture()
def scheduler(registry: CommandRegistry, output: FakeOutput, clock: FakeClock) -> CommandScheduler:
    return CommandScheduler(registry, output, clock=clock)


@pytest.fixture()
def app(registry: CommandRegistry, output: FakeOutput, metadata: MetadataRegistry) -> Application:
    """Application without built-in commands; tests register what they need."""
    return Application(registry, ArgparseParser("console"), output, metadata)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings built directly rather than from the environment,
    to keep unit tests isolated and deterministic.
    """
    return Settings(
        app_name="console",
        app_version="0.0.0-test",
        log_level="WARNING",
        log_to_file=False,
        scheduler_interval_seconds=0.01,
        data_dir=tmp_path,
        schedules_path=tmp_path / "schedules.json",
    )
