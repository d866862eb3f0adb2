"""Deployment target configuration for sitedeploy.

The deployment target is fixed: a single host alias, a single web-root and a
single build command. Those values live in DEFAULT_CONFIG. A project may pin
different values in a ``deploy.yaml`` beside its ``package.json``; nothing is
read from the environment or from command-line flags.

Key components:
- DeployConfig: Immutable record of the deployment target.
- load_config: Load the configuration for a project root.
- ConfigError: Raised for malformed configuration files.
"""

from __future__ import annotations

import posixpath
import shlex
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

CONFIG_FILENAME = "deploy.yaml"

DEFAULT_CONFIG = {
    "host": "websites",
    "user": "tobi",
    "remote_path": "/var/www/tobiasmikula.com/htdocs",
    "owner": "www-data:www-data",
    "build_command": "npm run build",
    "output_dir": "dist",
}


class ConfigError(Exception):
    """Error in the project's deployment configuration.

    Attributes:
        source_path: Path to the configuration file.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path, message: str):
        self.source_path = source_path
        self.message = message
        super().__init__(f"{source_path}: {message}")


@dataclass(frozen=True)
class DeployConfig:
    """Where and how the site is deployed.

    Attributes:
        host: ssh host alias of the web server.
        user: Remote login used for the rsync destination.
        remote_path: Remote web-root served by the web server.
        owner: ``user:group`` that must own the deployed files.
        build_command: Argument vector that builds the site.
        output_dir: Build output directory, relative to the project root.
    """

    host: str
    user: str
    remote_path: str
    owner: str
    build_command: tuple[str, ...]
    output_dir: str

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> DeployConfig:
        """Build a config from a plain mapping such as DEFAULT_CONFIG."""
        build_command = values["build_command"]
        if isinstance(build_command, str):
            build_command = shlex.split(build_command)
        return cls(
            host=str(values["host"]),
            user=str(values.get("user") or ""),
            remote_path=str(values["remote_path"]).rstrip("/") or "/",
            owner=str(values["owner"]),
            build_command=tuple(str(part) for part in build_command),
            output_dir=str(values["output_dir"]),
        )

    def output_path(self, project_root: Path) -> Path:
        """Return the absolute build output directory for a project."""
        return project_root / self.output_dir


def load_config(project_root: Path) -> DeployConfig:
    """Load the deployment configuration for a project.

    Args:
        project_root: Root directory of the site project.

    Returns:
        DeployConfig with values from deploy.yaml applied over the defaults.

    Raises:
        ConfigError: If deploy.yaml names keys that are not recognised,
            leaves a required value empty or holds a value of the wrong shape.
    """
    config_path = project_root / CONFIG_FILENAME
    values = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            unknown = sorted(set(loaded) - set(DEFAULT_CONFIG))
            if unknown:
                raise ConfigError(
                    config_path, f"Unknown setting(s): {', '.join(unknown)}"
                )
            values.update(loaded)

    for key in ("host", "remote_path", "owner", "build_command", "output_dir"):
        if not values.get(key):
            raise ConfigError(config_path, f"Setting '{key}' must not be empty")

    values["build_command"] = _parse_build_command(config_path, values["build_command"])
    values["remote_path"] = _check_remote_path(config_path, str(values["remote_path"]))
    values["output_dir"] = _check_output_dir(config_path, str(values["output_dir"]))
    return DeployConfig.from_mapping(values)


def _parse_build_command(config_path: Path, value: Any) -> list[str]:
    """Return the build command as an argument vector."""
    if isinstance(value, str):
        try:
            argv = shlex.split(value)
        except ValueError as exc:
            raise ConfigError(config_path, f"build_command: {exc}") from None
    elif isinstance(value, list) and all(
        isinstance(part, (str, int, float)) for part in value
    ):
        argv = [str(part) for part in value]
    else:
        raise ConfigError(
            config_path,
            f"build_command must be a string or a list of strings, got {value!r}",
        )
    if not argv:
        raise ConfigError(config_path, "Setting 'build_command' must not be empty")
    return argv


def _check_remote_path(config_path: Path, value: str) -> str:
    """Return the normalised web-root, refusing paths that reach /.

    The purge stage deletes everything below this directory.
    """
    parts = value.split("/")
    normalised = posixpath.normpath(value)
    if (
        not value.startswith("/")
        or ".." in parts
        or normalised.strip("/") == ""
    ):
        raise ConfigError(
            config_path,
            f"remote_path must be an absolute directory below /, got {value!r}",
        )
    return "/" + normalised.lstrip("/")


def _check_output_dir(config_path: Path, value: str) -> str:
    """Return the build output directory, which must stay inside the project."""
    parts = PurePosixPath(value).parts
    if value.startswith("/") or ".." in parts:
        raise ConfigError(
            config_path,
            f"output_dir must be a path inside the project, got {value!r}",
        )
    normalised = posixpath.normpath(value)
    if normalised == ".":
        raise ConfigError(
            config_path, "output_dir must name a directory below the project root"
        )
    return normalised
