"""Utility functions for sitedeploy.

These helpers assemble the shell fragments handed to ssh and rsync. Remote
commands are a single string interpreted by the remote login shell, so every
path is quoted except where a glob must expand remotely.

Key functions:
    remote_purge_command: Delete the contents of a remote directory.
    remote_chown_command: Recursively change ownership of a remote directory.
    local_source: Format a local directory as an rsync source.
    rsync_destination: Format a remote rsync destination.
    format_command: Render an argument vector for display.
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable
from pathlib import Path


def remote_purge_command(path: str) -> str:
    """Build the remote command that empties a directory.

    The directory itself is kept; only its contents are removed. The trailing
    glob stays unquoted so the remote shell expands it.

    Args:
        path: Absolute remote directory.

    Returns:
        Shell command string.

    Examples:
        >>> remote_purge_command("/var/www/site/htdocs")
        'sudo rm -rf /var/www/site/htdocs/*'
    """
    return f"sudo rm -rf {shlex.quote(path.rstrip('/'))}/*"


def remote_chown_command(owner: str, path: str) -> str:
    """Build the remote command that hands a directory tree to ``owner``.

    Examples:
        >>> remote_chown_command("www-data:www-data", "/var/www/site/htdocs")
        'sudo chown -R www-data:www-data /var/www/site/htdocs'
    """
    return f"sudo chown -R {shlex.quote(owner)} {shlex.quote(path)}"


def local_source(path: Path | str) -> str:
    """Format a local directory as an rsync source.

    rsync copies a directory's contents only when the source ends with a
    slash, otherwise it creates the directory inside the destination.
    """
    text = str(path)
    return text if text.endswith("/") else f"{text}/"


def rsync_destination(user: str, host: str, path: str) -> str:
    """Format ``user@host:path``, dropping ``user@`` when no user is set."""
    if user:
        return f"{user}@{host}:{path}"
    return f"{host}:{path}"


def format_command(argv: Iterable[str]) -> str:
    """Render an argument vector the way it would be typed in a shell."""
    return shlex.join(list(argv))


def is_empty_dir(path: Path) -> bool:
    """Check whether a directory is missing or contains no entries."""
    if not path.is_dir():
        return True
    return not any(path.iterdir())
