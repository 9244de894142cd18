# src/gtrunner/cli/utils.py

import asyncio
import logging
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import click
import structlog

from gtrunner.config import DEFAULT_CONFIG_NAME, GtrunnerConfig, load_config
from gtrunner.exceptions import GtrunnerError
from gtrunner.telemetry.logger import setup_logging as core_setup_logging

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)

T = TypeVar("T")


def logging_options(f):
    """Decorator to add logging options to any command."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="GTRUNNER_LOG_LEVEL",
        help="Set the logging level (overrides config file).",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="GTRUNNER_LOG_FILE",
        help="Path to write logs to a file (JSON format).",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="GTRUNNER_JSON_LOGS",
        help="Output console logs as JSON.",
    )(f)
    return f


def workspace_options(f):
    """Decorator adding the config file and workspace folder options."""
    f = click.option(
        "-c",
        "--config-path",
        type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
        default=Path(DEFAULT_CONFIG_NAME),
        show_default=True,
        envvar="GTRUNNER_CONF",
        help="Path to the gtrunner configuration file (env var GTRUNNER_CONF).",
        show_envvar=True,
    )(f)
    f = click.option(
        "-w",
        "--workspace",
        type=click.Path(exists=True, file_okay=False, dir_okay=True, resolve_path=True, path_type=Path),
        default=Path("."),
        show_default=True,
        envvar="GTRUNNER_WORKSPACE",
        help="Workspace folder; ${workspaceFolder} in settings resolves to it.",
    )(f)
    return f


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "INFO",
) -> None:
    """
    Setup logging using context values, allowing local overrides.
    """
    log_level_str = local_log_level or ctx.obj.get("LOG_LEVEL") or default_log_level
    log_file_path = local_log_file or ctx.obj.get("LOG_FILE")
    use_json_logs = local_json_logs if local_json_logs is not None else ctx.obj.get("JSON_LOGS", False)

    numeric_level = logging.getLevelName(log_level_str.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level_str = "INFO"

    core_setup_logging(
        level=numeric_level,
        json_logs=use_json_logs,
        log_file=log_file_path,
    )

    log.debug(
        "CLI logging initialized via utils",
        level=log_level_str,
        file=log_file_path or "console",
        json=use_json_logs,
    )


def load_command_config(
    ctx: click.Context, config_path: Path, workspace: Path | None = None, **kwargs: Any
) -> GtrunnerConfig:
    """
    Loads the configuration and re-applies logging with the file's level as
    the default. Configuration problems end the command with exit code 1.

    A relative config path missing from the current directory is looked up
    in the workspace folder.
    """
    ctx.ensure_object(dict)
    if workspace is not None and not config_path.is_absolute() and not config_path.exists():
        config_path = workspace / config_path
    try:
        config = load_config(config_path)
    except GtrunnerError as e:
        log.error("Failed to load configuration", config_path=str(config_path), error=str(e))
        click.echo(f"Error: Configuration problem in '{config_path}':\n{e}", err=True)
        ctx.exit(1)

    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
        default_log_level=config.global_config.log_level,
    )
    return config


def run_async(ctx: click.Context, coro: Coroutine[Any, Any, T]) -> T:
    """
    Runs a coroutine to completion, turning gtrunner errors into a clean exit.
    """
    try:
        return asyncio.run(coro)
    except GtrunnerError as e:
        log.error("Command failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    except KeyboardInterrupt:
        log.warning("Interrupted by user (CTRL-C).")
        ctx.exit(130)


# ⚙️🛠️
