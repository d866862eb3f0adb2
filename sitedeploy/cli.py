"""Command-line interface for sitedeploy.

This module defines the CLI commands using Click framework.
The deployment target is fixed in configuration, so no command takes options.

Commands:
- deploy: Build the site and publish it to the web server.
- plan: Show the commands deploy would run.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__


@click.group()
@click.version_option(version=__version__, prog_name="sitedeploy")
def cli():
    """Build the site and publish it over ssh and rsync."""


@cli.command()
def deploy():
    """Build the site and publish it to the web server."""
    project_root = Path.cwd()
    from .pipeline import DeployPipeline, StageError
    from .utils import format_command

    pipeline = DeployPipeline(project_root, _load_config(project_root))
    try:
        result = pipeline.run()
    except StageError as exc:
        click.echo(click.style("Deploy failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  Stage: {exc.stage}", fg="yellow"), err=True)
        click.echo(
            click.style(f"  Command: {format_command(exc.command)}", fg="yellow"),
            err=True,
        )
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(exc.returncode) from None
    click.echo(f"Deployed {result.output_dir} to {result.destination}")


@cli.command()
def plan():
    """Show the commands deploy would run, without running them."""
    project_root = Path.cwd()
    from .pipeline import DeployPipeline
    from .utils import format_command

    pipeline = DeployPipeline(project_root, _load_config(project_root))
    for index, (name, argv, remote) in enumerate(pipeline.plan(), start=1):
        where = click.style("[remote]", fg="yellow") if remote else "[local]"
        click.echo(f"{index}. {where} {name}: {format_command(argv)}")


def _load_config(project_root: Path):
    """Load the deployment configuration, reporting errors Click-style."""
    from .config import ConfigError, load_config

    try:
        return load_config(project_root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from None


def main():
    """Entry point for the CLI application."""
    cli()
