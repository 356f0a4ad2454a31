from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from .packages import PackageManager
from .process import run_command

logger = logging.getLogger(__name__)


def install_dependencies(
    package_manager: PackageManager | str,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> None:
    manager = PackageManager.parse(package_manager)
    logger.info("Installing dependencies with %s", manager.value)
    run_command(manager.install_command(cwd), env=env)
