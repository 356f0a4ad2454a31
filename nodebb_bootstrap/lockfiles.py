from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from .errors import ConfigurationError, FilesystemError
from .packages import LOCKFILES, MANIFEST, PackageManager

logger = logging.getLogger(__name__)


def reconcile_lockfiles(
    source_dir: Path | str,
    config_dir: Path | str,
    package_manager: PackageManager | str,
) -> tuple[Path, Path]:
    """Persist the manifest and lock file in ``config_dir`` and link them back.

    The copies under ``config_dir`` become the source of truth; the entries in
    ``source_dir`` are replaced by symlinks pointing at them. Returns the two
    links that were created.
    """

    manager = PackageManager.parse(package_manager)
    source = Path(os.path.abspath(source_dir))
    persistent = Path(os.path.abspath(config_dir))
    if os.path.realpath(source) == os.path.realpath(persistent):
        raise ConfigurationError(
            f"Application directory {source} and config directory {persistent} must differ"
        )

    tracked = (MANIFEST, manager.lockfile)
    for name in tracked:
        _persist(source / name, persistent / name)

    for name in LOCKFILES:
        _remove(source / name)

    manifest_link = _link(source / MANIFEST, persistent / MANIFEST)
    lock_link = _link(source / manager.lockfile, persistent / manager.lockfile)
    logger.info("Linked %s and %s into %s", MANIFEST, manager.lockfile, persistent)
    return manifest_link, lock_link


def _persist(source: Path, target: Path) -> None:
    if os.path.realpath(source) == os.path.realpath(target):
        return
    logger.debug("Copying %s to %s", source, target)
    try:
        shutil.copyfile(source, target)
    except OSError as exc:
        raise FilesystemError(f"Unable to copy {source} to {target}: {exc}") from exc


def _remove(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Unable to remove {path}: {exc}") from exc


def _link(link: Path, target: Path) -> Path:
    try:
        if link.is_symlink() or link.exists():
            link.unlink()
        link.symlink_to(target)
    except OSError as exc:
        raise FilesystemError(f"Unable to link {link} to {target}: {exc}") from exc
    return link
