# tests/test_schedule_file.py

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from console_kernel.core.errors import CommandNotFoundError, ScheduleFileError
from console_kernel.core.registry import CommandRegistry
from console_kernel.tasks.schedule_file import apply_schedule_definitions, load_schedule_definitions
from console_kernel.tasks.task_scheduler import CommandScheduler

from .fakes import RecordingCommand


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_missing_file_means_no_schedules(tmp_path: Path) -> None:
    assert load_schedule_definitions(tmp_path / "nope.json") == []


def test_load_text_and_mapping_expressions(tmp_path: Path) -> None:
    path = _write(tmp_path / "s.json", {
        "schedules": [
            {"command": "greet", "expression": "0 9 * * 1", "args": ["team"], "options": {"uppercase": True}},
            {"command": "report", "expression": {"minute": "30", "dayOfWeek": "5"}, "enabled": False},
        ],
    })

    first, second = load_schedule_definitions(path)

    assert first.command == "greet"
    assert first.expression.format() == "0 9 * * 1"
    assert first.args == ["team"]
    assert first.options == {"uppercase": True}
    assert first.enabled
    assert second.expression.day_of_week == "5"
    assert not second.enabled


def test_apply_skips_disabled_entries(
        tmp_path: Path, registry: CommandRegistry, scheduler: CommandScheduler,
) -> None:
    registry.add(RecordingCommand("greet"))
    registry.add(RecordingCommand("report"))
    path = _write(tmp_path / "s.json", {
        "schedules": [
            {"command": "greet", "expression": {"minute": "30"}},
            {"command": "report", "expression": {"minute": "45"}, "enabled": False},
        ],
    })

    count = apply_schedule_definitions(scheduler, load_schedule_definitions(path))

    assert count == 1
    (task,) = scheduler.get_tasks()
    assert task.command_name == "greet"
    assert task.next_run == datetime(2024, 5, 13, 10, 30)


def test_apply_unknown_command_raises(tmp_path: Path, scheduler: CommandScheduler) -> None:
    path = _write(tmp_path / "s.json", {"schedules": [{"command": "ghost", "expression": "* * * * *"}]})

    with pytest.raises(CommandNotFoundError):
        apply_schedule_definitions(scheduler, load_schedule_definitions(path))


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        json.dumps([]),
        json.dumps({"schedules": {}}),
        json.dumps({"schedules": ["greet"]}),
        json.dumps({"schedules": [{"expression": "* * * * *"}]}),
        json.dumps({"schedules": [{"command": "greet", "expression": "61 * * * *"}]}),
        json.dumps({"schedules": [{"command": "greet", "expression": "* *"}]}),
        json.dumps({"schedules": [{"command": "greet", "expression": {"minute": "²"}}]}, ensure_ascii=False),
        json.dumps({"schedules": [{"command": "greet", "args": "nope"}]}),
        json.dumps({"schedules": [{"command": "greet", "options": []}]}),
    ],
)
def test_malformed_files_raise(tmp_path: Path, payload: str) -> None:
    path = tmp_path / "s.json"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(ScheduleFileError):
        load_schedule_definitions(path)
