"""Executable discovery utilities for sitedeploy.

Every pipeline stage shells out to an external program. ssh and rsync are
system tools, but the build command may name a tool the site project pins
in its own ``node_modules`` (``astro build``, ``vite build``) rather than
going through ``npm run``.

Functions:
    find_executable: Locate a program on PATH or among the project's npm binaries.
"""

from __future__ import annotations

import shutil
from pathlib import Path


def find_executable(name: str, project_root: Path | None = None) -> str | None:
    """Find a program on PATH or in the project's node_modules/.bin.

    PATH wins so an operator can override a pinned tool. Paths containing a
    slash (``./scripts/build.sh``) are resolved against the project root.

    Args:
        name: Program name from a stage's argument vector.
        project_root: Site project directory, if local lookups are wanted.

    Returns:
        Full path to the program if found, None otherwise.

    Examples:
        >>> find_executable('rsync')
        '/usr/bin/rsync'

        >>> find_executable('astro', Path('/my/site'))
        '/my/site/node_modules/.bin/astro'
    """
    if "/" in name:
        candidate = Path(name)
        if not candidate.is_absolute() and project_root is not None:
            candidate = project_root / candidate
        return str(candidate) if candidate.is_file() else None

    on_path = shutil.which(name)
    if on_path or project_root is None:
        return on_path

    pinned = project_root / "node_modules" / ".bin" / name
    return str(pinned) if pinned.exists() else None
