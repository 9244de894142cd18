# src/gtrunner/cli/list_cmds.py

import os
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.tree import Tree

from gtrunner.cli.utils import load_command_config, logging_options, run_async, workspace_options
from gtrunner.discovery.catalog import TestCatalog
from gtrunner.runtime.workspace import Workspace
from gtrunner.state import STATUS_EMOJI_MAP, TestStatus
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.list")


def render_catalog(catalog: TestCatalog, workspace_folder: Path) -> Tree:
    """Executable -> suite -> test tree, file locations relative to the workspace."""
    root = Tree(f"🧪 [bold]{workspace_folder.name or workspace_folder}[/]")
    for executable, suites in catalog.executables.items():
        exe_node = root.add(f"📦 [bold cyan]{executable}[/]")
        for suite_name, tests in suites.items():
            suite_node = exe_node.add(f"[bold]{suite_name}[/]")
            for entry in tests:
                try:
                    location = os.path.relpath(entry.file_path, workspace_folder)
                except ValueError:
                    location = entry.file_path
                suite_node.add(
                    f"{STATUS_EMOJI_MAP[TestStatus.NOT_RUN]} {entry.test.test_name} "
                    f"[dim]{entry.test.kind.value} {location}:{entry.test.line}[/]"
                )
    return root


@click.command(name="list")
@click.option(
    "--configure/--no-configure",
    default=True,
    show_default=True,
    help="Configure the CMake project first when it has no code model yet.",
)
@workspace_options
@logging_options
@click.pass_context
def list_cli(ctx: click.Context, configure: bool, config_path: Path, workspace: Path, **kwargs):
    """Show discovered tests grouped by executable and suite."""
    config = load_command_config(ctx, config_path, workspace, **kwargs)
    ws = Workspace(config.runner, workspace)
    try:
        catalog = run_async(ctx, ws.discover(configure_missing=configure))
    finally:
        ws.close()

    console = Console()
    if not catalog.executables:
        click.echo("No tests found. Is the project configured and are test files compiled by a target?")
    else:
        console.print(render_catalog(catalog, workspace))
        click.echo(f"{catalog.test_count()} test(s) in {len(catalog.executables)} executable(s)")
    if catalog.unmapped_files:
        log.warning("Some test files are not compiled by any executable", count=len(catalog.unmapped_files))


# 🔼⚙️
