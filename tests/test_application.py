# tests/test_application.py

from __future__ import annotations

import pytest

from console_kernel.cli.application import Application
from console_kernel.core.errors import DuplicateCommandError
from console_kernel.core.metadata import ArgumentSpec, CommandMetadata, OptionSpec, Shortcut
from console_kernel.core.registry import CommandRegistry

from .fakes import FakeOutput, RecordingCommand


class DeployCommand(RecordingCommand):
    metadata = CommandMetadata(
        aliases=("ship",),
        shortcuts=(Shortcut("-D, --deploy", "Deploy now"),),
        arguments=(ArgumentSpec("target", "Where to deploy"),),
        options=(
            OptionSpec("-f, --force", "Skip checks"),
            OptionSpec("--region", "Region", default="eu", takes_value=True),
        ),
    )

    def __init__(self, **kwargs) -> None:
        super().__init__("deploy", **kwargs)


class InventoryCommand(RecordingCommand):
    # collides with the built-in --list flag
    metadata = CommandMetadata(shortcuts=(Shortcut("-i, --list", "Inventory"),))

    def __init__(self) -> None:
        super().__init__("inventory")


class SecretCommand(RecordingCommand):
    metadata = CommandMetadata(hidden=True, shortcuts=(Shortcut("--secret", "Hidden"),))

    def __init__(self) -> None:
        super().__init__("secret")


class PresetCommand(RecordingCommand):
    metadata = CommandMetadata(
        shortcuts=(Shortcut("-p, --preset", "Preset run", args=("base",), options={"mode": "fast"}),),
    )

    def __init__(self) -> None:
        super().__init__("preset")


def test_register_configures_and_stores(app: Application) -> None:
    deploy = DeployCommand()
    app.register(deploy)

    assert deploy.configured == 1
    assert app.get_commands() == [deploy]
    assert set(app.shortcuts) == {"-D", "--deploy"}


def test_duplicate_registration_is_fatal(app: Application) -> None:
    app.register(DeployCommand())

    with pytest.raises(DuplicateCommandError):
        app.register(DeployCommand())


@pytest.mark.asyncio
async def test_subcommand_by_name_with_arguments_and_options(app: Application) -> None:
    deploy = DeployCommand()
    app.register(deploy)

    code = await app.run(["deploy", "prod", "--force"])

    assert code == 0
    assert deploy.seen_args == [{"0": "prod", "target": "prod"}]
    assert deploy.seen_options == [{"force": True, "region": "eu"}]


@pytest.mark.asyncio
async def test_subcommand_by_alias(app: Application) -> None:
    deploy = DeployCommand()
    app.register(deploy)

    assert await app.run(["ship", "staging", "--region", "us"]) == 0
    assert deploy.seen_args == [{"0": "staging", "target": "staging"}]
    assert deploy.seen_options[0]["region"] == "us"


@pytest.mark.asyncio
async def test_optional_argument_may_be_omitted(app: Application) -> None:
    deploy = DeployCommand()
    app.register(deploy)

    assert await app.run(["deploy"]) == 0
    assert deploy.seen_args == [{}]


@pytest.mark.asyncio
async def test_shortcut_flag_runs_its_command(app: Application) -> None:
    deploy = DeployCommand()
    app.register(deploy)

    assert await app.run(["-D"]) == 0
    assert deploy.runs == 1
    assert deploy.seen_args == [{}]


@pytest.mark.asyncio
async def test_shortcut_value_becomes_first_argument(app: Application) -> None:
    deploy = DeployCommand()
    app.register(deploy)

    assert await app.run(["--deploy", "staging"]) == 0
    assert deploy.seen_args == [{"0": "staging", "target": "staging"}]


@pytest.mark.asyncio
async def test_shortcut_preset_args_and_options(app: Application) -> None:
    preset = PresetCommand()
    app.register(preset)

    assert await app.run(["-p"]) == 0
    assert preset.seen_args == [{"0": "base"}]
    assert preset.seen_options == [{"mode": "fast"}]


@pytest.mark.asyncio
async def test_builtin_flag_beats_shortcut(app: Application) -> None:
    greet = RecordingCommand("greet")
    deploy = DeployCommand()
    app.register_commands([greet, deploy])

    assert await app.run(["--greet", "-D"]) == 0
    assert greet.runs == 1
    assert deploy.runs == 0


@pytest.mark.asyncio
async def test_builtin_flag_value_is_passed_as_argument(app: Application) -> None:
    greet = RecordingCommand("greet")
    app.register(greet)

    assert await app.run(["--greet", "Ada"]) == 0
    assert greet.seen_args == [{"0": "Ada"}]


@pytest.mark.asyncio
async def test_builtin_wins_over_colliding_shortcut(app: Application) -> None:
    listing = RecordingCommand("list")
    inventory = InventoryCommand()
    app.register_commands([listing, inventory])

    # the colliding string is mapped but the built-in is checked first
    assert app.shortcuts["--list"].command == "inventory"
    assert await app.run(["--list"]) == 0
    assert listing.runs == 1
    assert inventory.runs == 0

    # the non-colliding flag still reaches the shortcut's own command
    assert await app.run(["-i"]) == 0
    assert inventory.runs == 1


@pytest.mark.asyncio
async def test_builtin_without_its_command_falls_through_to_shortcut(app: Application) -> None:
    inventory = InventoryCommand()
    app.register(inventory)

    assert await app.run(["--list"]) == 0
    assert inventory.runs == 1


@pytest.mark.asyncio
async def test_exit_code_is_propagated(app: Application) -> None:
    app.register(RecordingCommand("fail", exit_code=3))

    assert await app.run(["fail"]) == 3


@pytest.mark.asyncio
async def test_none_exit_code_maps_to_zero(app: Application) -> None:
    app.register(RecordingCommand("quiet", exit_code=None))

    assert await app.run(["quiet"]) == 0


@pytest.mark.asyncio
async def test_command_exception_is_reported_and_maps_to_one(app: Application, output: FakeOutput) -> None:
    app.register(RecordingCommand("boom", error=RuntimeError("kaput")))

    assert await app.run(["boom"]) == 1
    assert output.of("error") == ["Error: kaput"]


@pytest.mark.asyncio
async def test_aborted_command_exits_zero(app: Application) -> None:
    cmd = RecordingCommand("careful", proceed=False)
    app.register(cmd)

    assert await app.run(["careful"]) == 0
    assert cmd.runs == 0


@pytest.mark.asyncio
async def test_hidden_command_is_registered_but_not_dispatchable(
        app: Application, registry: CommandRegistry,
) -> None:
    secret = SecretCommand()
    app.register(secret)

    assert registry.get("secret") is secret
    assert app.shortcuts == {}
    assert await app.run(["secret"]) == 2
    assert secret.runs == 0


@pytest.mark.asyncio
async def test_unknown_subcommand_is_a_usage_error(app: Application) -> None:
    app.register(DeployCommand())

    assert await app.run(["nope"]) == 2


@pytest.mark.asyncio
async def test_removed_command_reports_not_found(
        app: Application, registry: CommandRegistry, output: FakeOutput,
) -> None:
    app.register(DeployCommand())
    registry.remove("deploy")

    assert await app.run(["deploy"]) == 1
    assert output.of("error") == ['Command "deploy" not found.']


@pytest.mark.asyncio
async def test_no_command_prints_help(app: Application, output: FakeOutput) -> None:
    app.register(DeployCommand())

    assert await app.run([]) == 0
    assert "deploy" in "".join(output.of("write"))


@pytest.mark.asyncio
async def test_set_commands_replaces_everything(app: Application) -> None:
    app.register(DeployCommand())
    other = RecordingCommand("other")

    app.set_commands([other])

    assert [c.name for c in app.get_commands()] == ["other"]
    assert app.shortcuts == {}
    assert await app.run(["deploy"]) == 2
    assert await app.run(["other"]) == 0
    assert other.runs == 1


@pytest.mark.asyncio
async def test_set_commands_allows_reusing_names(app: Application) -> None:
    app.register(DeployCommand())
    fresh = DeployCommand()

    app.set_commands([fresh])

    assert await app.run(["-D"]) == 0
    assert fresh.runs == 1


class FirstCommand(RecordingCommand):
    metadata = CommandMetadata(shortcuts=(Shortcut("-x", "First"),))

    def __init__(self) -> None:
        super().__init__("first")


class SecondCommand(RecordingCommand):
    metadata = CommandMetadata(shortcuts=(Shortcut("-x, --second", "Second"),))

    def __init__(self) -> None:
        super().__init__("second")


@pytest.mark.asyncio
async def test_shared_shortcut_stays_with_first_registration(app: Application) -> None:
    first, second = FirstCommand(), SecondCommand()
    app.register_commands([first, second])

    assert app.shortcuts["-x"].command == "first"
    assert await app.run(["-x"]) == 0
    assert first.runs == 1
    assert second.runs == 0

    # the second command keeps its other, unshared flag
    assert await app.run(["--second"]) == 0
    assert second.runs == 1
