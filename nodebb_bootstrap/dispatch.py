from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .config import Settings
from .packages import PackageManager
from .process import Command, replace_process, run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReplaceProcess:
    """Hand the container over to ``command``; control never comes back."""

    command: Command


@dataclass(frozen=True, slots=True)
class RunForeground:
    """Run ``commands`` one after another; the first failure is fatal."""

    commands: tuple[Command, ...]


Action = ReplaceProcess | RunForeground


def nodebb_command(
    binary: Path,
    verb: str,
    config: Path,
    *,
    failure_message: str,
    cwd: Path | None = None,
    announce: str | None = None,
) -> Command:
    return Command(
        argv=(str(binary), verb, f"--config={config}"),
        failure_message=failure_message,
        cwd=cwd,
        announce=announce,
    )


def setup_session(settings: Settings) -> ReplaceProcess:
    logger.info("Starting setup session")
    return ReplaceProcess(
        nodebb_command(
            settings.nodebb_binary,
            "setup",
            settings.config_path,
            failure_message="Failed to start setup session",
            cwd=settings.app_dir,
        )
    )


def installation_session(settings: Settings) -> ReplaceProcess:
    logger.info("Config file not found at %s", settings.config_path)
    logger.info("Starting installation session")
    return ReplaceProcess(
        nodebb_command(
            settings.nodebb_binary,
            settings.nodebb_init_verb,
            settings.config_path,
            failure_message=f"Failed to start installation session ({settings.nodebb_init_verb})",
            cwd=settings.app_dir,
        )
    )


def start_forum(
    config: Path,
    build_first: bool,
    package_manager: PackageManager | str = PackageManager.NPM,
    nodebb_binary: Path = Path("/usr/src/app/nodebb"),
    cwd: Path | None = None,
) -> RunForeground:
    manager = PackageManager.parse(package_manager)
    logger.info("Starting forum")
    commands: list[Command] = []
    if build_first:
        commands.append(
            nodebb_command(
                nodebb_binary,
                "build",
                config,
                failure_message="Failed to build NodeBB. Exiting...",
                cwd=cwd,
                announce="Build before start is enabled. Building...",
            )
        )
    commands.append(manager.start_command(config, cwd=cwd))
    return RunForeground(tuple(commands))


def choose_action(settings: Settings) -> Action:
    if settings.setup:
        return setup_session(settings)
    if settings.config_path.is_file():
        return start_forum(
            settings.config_path,
            settings.start_build,
            settings.package_manager,
            settings.nodebb_binary,
            cwd=settings.app_dir,
        )
    return installation_session(settings)


def perform(action: Action, env: Mapping[str, str] | None = None) -> int:
    if isinstance(action, RunForeground):
        for command in action.commands:
            run_command(command, env=env)
        return 0
    replace_process(action.command, env=env)
