from __future__ import annotations

import grp
import logging
import os
import pwd
import subprocess
from pathlib import Path
from typing import Iterable

from .config import Settings
from .errors import ConfigurationError, FilesystemError, IdentityError, SubprocessError

logger = logging.getLogger(__name__)


def reconcile_identity(settings: Settings) -> bool:
    """Align the service account with ``UID``/``GID`` and drop root.

    Does nothing unless the process runs as root. Returns whether privileges
    were dropped.
    """

    if os.geteuid() != 0:
        logger.debug("Not running as root; keeping uid=%s gid=%s", os.getuid(), os.getgid())
        return False

    username = settings.container_user
    if settings.identity_overridden:
        provided = [
            f"{name} = {value}"
            for name, value in (("UID", settings.uid), ("GID", settings.gid))
            if value is not None
        ]
        logger.info("Using provided %s", " / ".join(provided))
        apply_runtime_ids(username, settings.uid, settings.gid)
    else:
        logger.info(
            "Using default UID:GID (%s:%s)",
            settings.container_user_id,
            settings.container_grp_id,
        )

    user = _lookup_user(username)
    group_id = _lookup_group(username).gr_gid
    logger.info("Starting with UID/GID: %s/%s", user.pw_uid, group_id)

    prepare_owned_directories(
        [settings.home_dir, settings.app_dir, settings.config_dir],
        user.pw_uid,
        group_id,
    )
    drop_privileges(user, group_id)
    return True


def apply_runtime_ids(username: str, uid: int | None, gid: int | None) -> None:
    user = _lookup_user(username)
    # group first so usermod never sees a dangling primary group
    if gid is not None and gid != _lookup_group(username).gr_gid:
        _run(["groupmod", "-g", str(gid), username])
    if uid is not None and uid != user.pw_uid:
        _run(["usermod", "-u", str(uid), username])


def prepare_owned_directories(paths: Iterable[Path], uid: int, gid: int) -> None:
    """Create ``paths`` with mode 0700 and hand them, recursively, to uid:gid."""

    for path in paths:
        try:
            path.mkdir(parents=True, exist_ok=True)
            os.chown(path, uid, gid)
            os.chmod(path, 0o700)
        except OSError as exc:
            raise FilesystemError(f"Unable to prepare directory {path}: {exc}") from exc
        _run(["chown", "-R", f"{uid}:{gid}", str(path)])


def drop_privileges(user: pwd.struct_passwd, gid: int) -> None:
    try:
        os.setgroups([gid])
        os.setgid(gid)
        os.setuid(user.pw_uid)
    except OSError as exc:
        raise IdentityError(f"Unable to switch to user '{user.pw_name}': {exc}") from exc
    os.environ["HOME"] = user.pw_dir
    logger.debug("Dropped privileges to %s (%s:%s)", user.pw_name, user.pw_uid, gid)


def _lookup_user(username: str) -> pwd.struct_passwd:
    try:
        return pwd.getpwnam(username)
    except KeyError:
        raise ConfigurationError(f"User '{username}' not found") from None


def _lookup_group(name: str) -> grp.struct_group:
    try:
        return grp.getgrnam(name)
    except KeyError:
        raise ConfigurationError(f"Group '{name}' not found") from None


def _run(command: list[str]) -> None:
    logger.debug("Running %s", " ".join(command))
    try:
        subprocess.run(command, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise SubprocessError(f"Command {' '.join(command)!r} failed: {exc}") from exc
