from __future__ import annotations

from pathlib import Path

import pytest

from nodebb_bootstrap.config import Settings
from nodebb_bootstrap.dispatch import (
    ReplaceProcess,
    RunForeground,
    choose_action,
    perform,
    start_forum,
)
from nodebb_bootstrap.errors import SubprocessError
from nodebb_bootstrap.packages import PackageManager


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(config_dir=tmp_path / "config", app_dir=tmp_path / "app")


def _with(settings: Settings, **changes) -> Settings:
    return settings.model_copy(update=changes)


def _write_config(settings: Settings) -> None:
    settings.config_dir.mkdir(parents=True, exist_ok=True)
    settings.config_path.write_text("{}")


def test_setup_override_wins_over_existing_config(settings) -> None:
    _write_config(settings)

    action = choose_action(_with(settings, setup="1"))

    assert isinstance(action, ReplaceProcess)
    assert action.command.argv == (
        str(settings.nodebb_binary),
        "setup",
        f"--config={settings.config_path}",
    )


def test_missing_config_starts_installation_with_init_verb(settings) -> None:
    action = choose_action(settings)

    assert isinstance(action, ReplaceProcess)
    assert action.command.argv[1:] == ("install", f"--config={settings.config_path}")


def test_custom_init_verb(settings) -> None:
    action = choose_action(_with(settings, nodebb_init_verb="upgrade"))

    assert isinstance(action, ReplaceProcess)
    assert action.command.argv[1] == "upgrade"


def test_existing_config_starts_forum(settings) -> None:
    _write_config(settings)

    action = choose_action(_with(settings, package_manager=PackageManager.YARN))

    assert isinstance(action, RunForeground)
    assert [command.argv[:2] for command in action.commands] == [("yarn", "start")]
    assert action.commands[0].cwd == settings.app_dir


def test_start_forum_builds_first_when_enabled() -> None:
    config = Path("/opt/config/config.json")

    action = start_forum(config, True, "npm", Path("/usr/src/app/nodebb"))

    build, start = action.commands
    assert build.argv == ("/usr/src/app/nodebb", "build", f"--config={config}")
    assert start.argv == ("npm", "start", "--", f"--config={config}", "--no-silent", "--no-daemon")


def test_start_forum_never_builds_when_disabled() -> None:
    action = start_forum(Path("/opt/config/config.json"), False)

    assert len(action.commands) == 1
    assert action.commands[0].argv[:2] == ("npm", "start")


def test_failed_build_aborts_before_start(monkeypatch) -> None:
    ran = []

    def fake_run(command, env=None):
        ran.append(command.argv[1])
        if command.argv[1] == "build":
            raise SubprocessError(command.failure_message)

    monkeypatch.setattr("nodebb_bootstrap.dispatch.run_command", fake_run)
    action = start_forum(Path("/opt/config/config.json"), True)

    with pytest.raises(SubprocessError, match="Failed to build NodeBB"):
        perform(action)

    assert ran == ["build"]


def test_perform_runs_foreground_commands_in_order(monkeypatch) -> None:
    ran = []
    monkeypatch.setattr(
        "nodebb_bootstrap.dispatch.run_command",
        lambda command, env=None: ran.append((command.argv[1], env)),
    )

    status = perform(start_forum(Path("/c/config.json"), True, "pnpm"), env={"A": "1"})

    assert status == 0
    assert ran == [("build", {"A": "1"}), ("start", {"A": "1"})]


def test_perform_replaces_process(monkeypatch, settings) -> None:
    replaced = []
    monkeypatch.setattr(
        "nodebb_bootstrap.dispatch.replace_process",
        lambda command, env=None: replaced.append(command.argv),
    )
    monkeypatch.setattr(
        "nodebb_bootstrap.dispatch.run_command",
        lambda command, env=None: pytest.fail("nothing should run in the foreground"),
    )

    perform(choose_action(settings))

    assert replaced == [(str(settings.nodebb_binary), "install", f"--config={settings.config_path}")]
