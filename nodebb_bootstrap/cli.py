from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from .config import LOG_LEVELS, Settings, load_settings
from .directories import ensure_directory
from .dispatch import Action, choose_action, perform
from .errors import BootstrapError
from .identity import reconcile_identity
from .installer import install_dependencies
from .lockfiles import reconcile_lockfiles

logger = logging.getLogger(__name__)

LOG_FORMAT = "[entrypoint] %(levelname)s: %(message)s"


def configure_logging(level: str = "DEBUG") -> None:
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(level.upper())


def bootstrap(settings: Settings) -> Action:
    """Prepare the container and decide how the forum process is started."""

    reconcile_identity(settings)
    ensure_directory(settings.config_dir)
    reconcile_lockfiles(settings.app_dir, settings.config_dir, settings.package_manager)
    install_dependencies(
        settings.package_manager,
        cwd=settings.app_dir,
        env=settings.child_environment(),
    )

    logger.debug("PACKAGE_MANAGER: %s", settings.package_manager.value)
    logger.debug("CONFIG location: %s", settings.config_path)
    logger.debug("START_BUILD: %s", str(settings.start_build).lower())
    logger.debug("OVERRIDE_UPDATE_LOCK: %s", settings.override_update_lock)

    return choose_action(settings)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Prepare a NodeBB container and start setup, installation or the forum",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        choices=LOG_LEVELS,
        type=str.upper,
        help="Override the log level (defaults to LOG_LEVEL / DEBUG)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level or "DEBUG")

    try:
        settings = load_settings()
        if args.log_level is None:
            configure_logging(settings.log_level)
        action = bootstrap(settings)
        return perform(action, env=settings.child_environment())
    except BootstrapError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
