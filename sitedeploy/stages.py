"""Pipeline stages for sitedeploy.

Each stage wraps one external command. Stages only describe what to run;
the pipeline decides when to run them and a CommandRunner executes them.

Key classes:
- BuildStage: Compiles the site into the local output directory.
- PurgeStage: Empties the remote web-root over ssh.
- SyncStage: Copies the build output to the web-root with rsync.
- PermissionStage: Restores web server ownership over ssh.
- StageRegistry: Ordered collection of stages.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from .config import DeployConfig
from .protocols import Stage
from .utils import (
    is_empty_dir,
    local_source,
    remote_chown_command,
    remote_purge_command,
    rsync_destination,
)


class StageError(Exception):
    """A pipeline stage failed.

    Attributes:
        stage: Name of the stage that failed.
        command: Argument vector the stage ran.
        returncode: Exit code to report for the whole deployment.
        message: Human-readable error message.
    """

    def __init__(
        self,
        stage: str,
        command: list[str],
        returncode: int,
        message: str | None = None,
    ):
        self.stage = stage
        self.command = command
        self.returncode = returncode
        self.message = message or f"exited with status {returncode}"
        super().__init__(f"{stage}: {self.message}")


class BaseStage(ABC):
    """Base class for pipeline stages."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def order(self) -> int: ...

    @property
    def remote(self) -> bool:
        return False

    @abstractmethod
    def command(self, config: DeployConfig) -> list[str]: ...

    def check(self, project_root: Path, config: DeployConfig) -> None:
        """Accept the outcome of a successful command. Override to validate."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class SSHStage(BaseStage):
    """Stage that runs a single command on the remote host.

    ``-t`` forces a terminal so sudo can prompt if passwordless access
    has not been set up.
    """

    @property
    def remote(self) -> bool:
        return True

    def command(self, config: DeployConfig) -> list[str]:
        return ["ssh", "-t", config.host, self.remote_command(config)]

    @abstractmethod
    def remote_command(self, config: DeployConfig) -> str: ...


class BuildStage(BaseStage):
    """Compiles the site sources into the build output directory."""

    @property
    def name(self) -> str:
        return "Build"

    @property
    def order(self) -> int:
        return 10

    def command(self, config: DeployConfig) -> list[str]:
        return list(config.build_command)

    def check(self, project_root: Path, config: DeployConfig) -> None:
        """Refuse to continue without build output.

        The purge stage would otherwise leave the site empty.
        """
        output = config.output_path(project_root)
        if is_empty_dir(output):
            raise StageError(
                self.name,
                self.command(config),
                1,
                f"build produced no output in {output}",
            )


class PurgeStage(SSHStage):
    """Deletes the previous deployment from the remote web-root."""

    @property
    def name(self) -> str:
        return "Purge"

    @property
    def order(self) -> int:
        return 20

    def remote_command(self, config: DeployConfig) -> str:
        return remote_purge_command(config.remote_path)


class SyncStage(BaseStage):
    """Transfers the build output with rsync.

    Archive mode keeps permissions and timestamps; the remote side runs
    under sudo so it can write into the web-root.
    """

    @property
    def name(self) -> str:
        return "Sync"

    @property
    def order(self) -> int:
        return 30

    @property
    def remote(self) -> bool:
        return True

    def command(self, config: DeployConfig) -> list[str]:
        return [
            "rsync",
            "-avzhP",
            "--rsync-path=sudo rsync",
            local_source(f"./{config.output_dir}"),
            rsync_destination(config.user, config.host, config.remote_path),
        ]


class PermissionStage(SSHStage):
    """Hands the web-root back to the web server account."""

    @property
    def name(self) -> str:
        return "Permissions"

    @property
    def order(self) -> int:
        return 40

    def remote_command(self, config: DeployConfig) -> str:
        return remote_chown_command(config.owner, config.remote_path)


class StageRegistry:
    """Registry of pipeline stages, kept sorted by ``order``."""

    def __init__(self):
        self._stages: list[Stage] = []

    def register(self, stage: Stage) -> None:
        """Register a stage.

        Raises:
            TypeError: If ``stage`` does not implement the Stage protocol.
            ValueError: If another stage already holds the same order.
        """
        if not isinstance(stage, Stage):
            raise TypeError(f"Not a pipeline stage: {stage!r}")
        if any(existing.order == stage.order for existing in self._stages):
            raise ValueError(f"Duplicate stage order {stage.order} for {stage.name}")
        self._stages.append(stage)
        self._stages.sort(key=lambda s: s.order)

    def __iter__(self):
        return iter(list(self._stages))

    def __len__(self) -> int:
        return len(self._stages)

    def names(self) -> list[str]:
        return [stage.name for stage in self._stages]


def create_default_registry() -> StageRegistry:
    """Create a registry holding the four deployment stages."""
    registry = StageRegistry()
    registry.register(BuildStage())
    registry.register(PurgeStage())
    registry.register(SyncStage())
    registry.register(PermissionStage())
    return registry
