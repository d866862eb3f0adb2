"""Protocol definitions for sitedeploy.

This module defines the interfaces used between the pipeline and its parts.
The pipeline only depends on these protocols, so tests can substitute
runners that never touch the network.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .config import DeployConfig


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for executing a stage's command."""

    @abstractmethod
    def run(self, argv: list[str], cwd: Path) -> int:
        """Run a command to completion.

        Args:
            argv: Argument vector; argv[0] is the program name.
            cwd: Working directory for the command.

        Returns:
            The command's exit code.
        """
        ...


@runtime_checkable
class Stage(Protocol):
    """Protocol for a single step of the deployment pipeline."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the human-readable stage name."""
        ...

    @property
    @abstractmethod
    def order(self) -> int:
        """Return the stage position (lower = runs first)."""
        ...

    @property
    @abstractmethod
    def remote(self) -> bool:
        """Return True if the stage acts on the remote host."""
        ...

    @abstractmethod
    def command(self, config: DeployConfig) -> list[str]:
        """Build the argument vector for this stage.

        Args:
            config: Deployment target configuration.

        Returns:
            Argument vector to hand to a CommandRunner.
        """
        ...

    @abstractmethod
    def check(self, project_root: Path, config: DeployConfig) -> None:
        """Validate the stage's outcome after its command succeeded.

        Raises:
            StageError: If the outcome is unusable by later stages.
        """
        ...
