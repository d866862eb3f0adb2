"""Command execution for sitedeploy.

SubprocessRunner runs each stage's command with the operator's terminal
attached, so rsync progress and ssh/sudo prompts are shown as-is.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import click

from .executable_utils import find_executable

# Exit statuses a POSIX shell reports for commands it cannot start or that
# die from a signal.
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127
EXIT_SIGNAL_BASE = 128


class SubprocessRunner:
    """Runs commands as child processes and reports their exit codes."""

    def __init__(self, project_root: Path):
        self.project_root = project_root

    def run(self, argv: list[str], cwd: Path) -> int:
        """Run ``argv`` in ``cwd`` and wait for it to finish.

        Args:
            argv: Argument vector; argv[0] is looked up in PATH and then in
                the project's node_modules/.bin.
            cwd: Working directory for the command.

        Returns:
            The command's exit code, 127 if the program is missing,
            126 if it could not be started and 128+N if signal N killed it.
        """
        program = find_executable(argv[0], self.project_root)
        if not program:
            click.echo(f"{argv[0]}: command not found", err=True)
            return EXIT_NOT_FOUND
        try:
            result = subprocess.run([program, *argv[1:]], cwd=cwd)
        except OSError as exc:
            click.echo(f"{argv[0]}: {exc}", err=True)
            return EXIT_NOT_EXECUTABLE
        if result.returncode < 0:
            # Killed by signal N; report 128+N like a shell.
            return EXIT_SIGNAL_BASE - result.returncode
        return result.returncode
