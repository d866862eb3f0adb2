"""Deployment pipeline for sitedeploy.

This module runs the deployment stages strictly in order. The first stage
that fails aborts the run: nothing is retried and nothing is rolled back.
A failure during Purge or Sync therefore leaves the remote web-root empty
or partially updated until the next successful run.

Key components:
- DeployPipeline: Runs or plans the stages.
- DeployResult: Outcome of a successful run.
- StageError: Raised for the first failing stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import click

from .config import DeployConfig
from .protocols import CommandRunner
from .runner import SubprocessRunner
from .stages import StageError, StageRegistry, create_default_registry
from .utils import format_command, rsync_destination

__all__ = ["DeployPipeline", "DeployResult", "StageError"]


@dataclass
class DeployResult:
    """Result of a successful deployment.

    Attributes:
        output_dir: Local build output that was deployed.
        destination: rsync-style ``[user@]host:path`` of the web-root.
        stages: Names of the stages that ran, in order.
    """

    output_dir: Path
    destination: str
    stages: list[str] = field(default_factory=list)


class DeployPipeline:
    """Runs the deployment stages against one project.

    Attributes:
        project_root: Site project directory; every command runs here.
        config: Deployment target.
        runner: Executes stage commands.
        registry: Stages to run, in order.
    """

    def __init__(
        self,
        project_root: Path,
        config: DeployConfig,
        runner: CommandRunner | None = None,
        registry: StageRegistry | None = None,
    ):
        self.project_root = project_root
        self.config = config
        self.runner = runner or SubprocessRunner(project_root)
        self.registry = registry or create_default_registry()

    @property
    def destination(self) -> str:
        return rsync_destination(
            self.config.user, self.config.host, self.config.remote_path
        )

    def plan(self) -> list[tuple[str, list[str], bool]]:
        """Return each stage's name, command and remote flag without running anything."""
        return [
            (stage.name, stage.command(self.config), stage.remote)
            for stage in self.registry
        ]

    def run(self) -> DeployResult:
        """Run every stage in order.

        Returns:
            DeployResult describing the completed deployment.

        Raises:
            StageError: For the first stage that exits non-zero or whose
                outcome fails its check. Later stages are not run.
        """
        result = DeployResult(
            output_dir=self.config.output_path(self.project_root),
            destination=self.destination,
        )
        for stage in self.registry:
            argv = stage.command(self.config)
            click.echo(
                click.style(f"==> {stage.name}: ", bold=True) + format_command(argv)
            )
            returncode = self.runner.run(argv, self.project_root)
            if returncode != 0:
                raise StageError(stage.name, argv, returncode)
            stage.check(self.project_root, self.config)
            result.stages.append(stage.name)
        return result
