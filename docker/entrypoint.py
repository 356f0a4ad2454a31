#!/usr/bin/env python3
"""Container ENTRYPOINT: reconcile identity and lock files, then hand off to NodeBB."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running straight from the image's source tree without installing.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from nodebb_bootstrap.cli import main


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
