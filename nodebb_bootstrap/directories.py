from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import FilesystemError

logger = logging.getLogger(__name__)


def ensure_directory(path: Path | str) -> Path:
    """Make sure ``path`` exists as a directory the current user can write to."""

    directory = Path(path)
    if not directory.is_dir():
        logger.warning("Directory %s does not exist. Creating...", directory)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"Failed to create directory {directory}: {exc}") from exc

    if not os.access(directory, os.W_OK):
        raise FilesystemError(f"No write permission for directory {directory}")
    return directory
