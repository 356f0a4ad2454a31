from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, NoReturn

from .errors import SubprocessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Command:
    argv: tuple[str, ...]
    failure_message: str
    cwd: Path | None = None
    announce: str | None = None

    def display(self) -> str:
        return shlex.join(self.argv)


def run_command(command: Command, env: Mapping[str, str] | None = None) -> None:
    """Run ``command`` in the foreground and block until it exits."""

    if command.announce:
        logger.info(command.announce)
    logger.debug("Running %s", command.display())
    try:
        completed = subprocess.run(
            list(command.argv),
            cwd=command.cwd,
            env=dict(env) if env is not None else None,
            check=False,
        )
    except OSError as exc:
        raise SubprocessError(f"{command.failure_message} ({exc})") from exc
    if completed.returncode != 0:
        raise SubprocessError(f"{command.failure_message} (exit status {completed.returncode})")


def replace_process(command: Command, env: Mapping[str, str] | None = None) -> NoReturn:
    """Replace the current process image with ``command``."""

    if command.announce:
        logger.info(command.announce)
    logger.debug("Executing %s", command.display())
    try:
        if command.cwd is not None:
            os.chdir(command.cwd)
        if env is None:
            os.execvp(command.argv[0], list(command.argv))
        os.execvpe(command.argv[0], list(command.argv), dict(env))
    except OSError as exc:
        raise SubprocessError(f"{command.failure_message} ({exc})") from exc
