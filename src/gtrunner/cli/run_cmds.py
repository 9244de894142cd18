# src/gtrunner/cli/run_cmds.py

from pathlib import Path

import click
import structlog
from rich.console import Console

from gtrunner.cli.utils import load_command_config, logging_options, run_async, workspace_options
from gtrunner.discovery.catalog import SELECTOR_SEPARATOR
from gtrunner.exceptions import GtrunnerError
from gtrunner.runtime.debuggers import GdbDebugService, JsonDebugService
from gtrunner.runtime.run_log import read_last_block
from gtrunner.runtime.workspace import Workspace
from gtrunner.state import STATUS_EMOJI_MAP
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.run")


async def _run_selection(ws: Workspace, selectors: list[str], console: Console) -> int:
    catalog = await ws.discover(configure_missing=True)
    selection = catalog.select(selectors)
    if not selection:
        click.echo("No tests matched the selection.", err=True)
        return 1

    exit_code = 0
    for executable, full_names in selection.items():
        try:
            summary = await ws.run(executable, full_names)
        except GtrunnerError as e:
            log.error("Run could not be prepared", executable=executable, error=str(e))
            click.echo(f"Error: {e}", err=True)
            exit_code = 1
            continue

        console.print(f"[bold cyan]{executable}[/]")
        for full_name in full_names:
            status = ws.store.get_status(executable, full_name)
            console.print(f"  {STATUS_EMOJI_MAP[status]} {full_name}", highlight=False)
        if summary is not None and summary.failed:
            exit_code = 1
    return exit_code


@click.command(name="run")
@click.argument("selectors", nargs=-1)
@click.option("--show-output", is_flag=True, default=False, help="Echo each test binary's output.")
@workspace_options
@logging_options
@click.pass_context
def run_cli(
    ctx: click.Context,
    selectors: tuple[str, ...],
    show_output: bool,
    config_path: Path,
    workspace: Path,
    **kwargs,
):
    """
    Build what changed and run the selected tests (all when none given).

    \b
    Selectors: EXE, EXE/Suite, EXE/Suite.Test, Suite or Suite.Test.
    """
    config = load_command_config(ctx, config_path, workspace, **kwargs)
    console = Console()
    ws = Workspace(config.runner, workspace, console=console if show_output else None)
    try:
        exit_code = run_async(ctx, _run_selection(ws, list(selectors), console))
    finally:
        ws.close()
    log.info("'run' command finished", exit_code=exit_code)
    if exit_code != 0:
        ctx.exit(exit_code)


async def _debug_selection(ws: Workspace, selectors: list[str]) -> dict | None:
    catalog = await ws.discover(configure_missing=True)
    selection = catalog.select(selectors)
    if not selection:
        raise click.UsageError("No tests matched the selection.")
    if len(selection) > 1:
        raise click.UsageError(
            f"Selection spans several executables ({', '.join(selection)}); debug one at a time."
        )
    executable, full_names = next(iter(selection.items()))
    return await ws.debug(executable, full_names)


@click.command(name="debug")
@click.argument("selectors", nargs=-1, required=True)
@click.option(
    "--emit-json",
    is_flag=True,
    default=False,
    help="Print the launch configuration as JSON instead of starting the debugger.",
)
@workspace_options
@logging_options
@click.pass_context
def debug_cli(
    ctx: click.Context,
    selectors: tuple[str, ...],
    emit_json: bool,
    config_path: Path,
    workspace: Path,
    **kwargs,
):
    """
    Build and debug the selected tests of one executable.

    \b
    Selectors: EXE, EXE/Suite, EXE/Suite.Test, Suite or Suite.Test.
    """
    config = load_command_config(ctx, config_path, workspace, **kwargs)
    debug_service = JsonDebugService() if emit_json else GdbDebugService()
    ws = Workspace(config.runner, workspace, debug_service=debug_service)
    try:
        run_async(ctx, _debug_selection(ws, list(selectors)))
    finally:
        ws.close()


@click.command(name="output")
@click.argument("selector")
@workspace_options
@logging_options
@click.pass_context
def output_cli(ctx: click.Context, selector: str, config_path: Path, workspace: Path, **kwargs):
    """
    Show the most recent recorded output of one test.

    SELECTOR is Suite.Test or EXE/Suite.Test.
    """
    config = load_command_config(ctx, config_path, workspace, **kwargs)
    run_log_path = config.runner.effective_run_log_file(workspace)
    if run_log_path is None:
        click.echo("Run log is disabled (runner.run_log_file is empty).", err=True)
        ctx.exit(1)

    executable, sep, full_name = selector.rpartition(SELECTOR_SEPARATOR)
    block = read_last_block(run_log_path, full_name, executable if sep else None)
    if block is None:
        click.echo(f"No recorded output for '{selector}'.", err=True)
        ctx.exit(1)

    header, output = block
    click.echo(header)
    click.echo(output)


# 🔼⚙️
