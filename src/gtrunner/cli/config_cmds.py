# src/gtrunner/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from gtrunner.cli.utils import load_command_config, logging_options, workspace_options
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")


@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""
    pass


@config_cli.command(name="show")
@workspace_options
@logging_options
@click.pass_context
def show_config(ctx: click.Context, config_path: Path, workspace: Path, **kwargs):
    """Load, validate, and display the configuration."""
    config = load_command_config(ctx, config_path, workspace, **kwargs)
    log.info("Executing 'config show' command", config_path=str(config.config_file_path))

    # Echo a rich-formatted string for testability.
    click.echo(pretty_repr(config, expand_all=True))

    runner = config.runner
    click.echo(f"project root:   {runner.effective_project_root(workspace)}")
    click.echo(f"scan directory: {runner.effective_scan_directory(workspace)}")
    click.echo(f"build directory: {runner.effective_build_directory(workspace)}")
    if config.config_file_path is None:
        log.info("No configuration file found; defaults shown.")


# 🔼⚙️
