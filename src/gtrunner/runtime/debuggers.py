#
# src/gtrunner/runtime/debuggers.py
#
"""
Debug services usable from a terminal.
"""
import asyncio
import json
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console

from gtrunner.exceptions import ProcessLaunchError
from gtrunner.process import merged_environment
from gtrunner.runtime.debug import DebugService
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.debuggers")

DEFAULT_DEBUGGER = "gdb"


def read_env_file(path: Path) -> dict[str, str]:
    """Reads KEY=VALUE lines; blank lines and ``#`` comments are skipped."""
    values: dict[str, str] = {}
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        log.warning("Environment file unreadable", path=str(path), error=str(e))
        return values
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key.strip()] = value
    return values


def launch_environment(config: dict[str, Any]) -> dict[str, str]:
    """Env file values, overridden by the configuration's environment list."""
    env: dict[str, str] = {}
    if env_file := config.get("envFile"):
        env.update(read_env_file(Path(env_file)))
    for entry in config.get("environment", []):
        env[entry["name"]] = entry["value"]
    return env


class GdbDebugService(DebugService):
    """
    Runs the MI debugger interactively in the current terminal on the
    configuration's program and arguments.
    """

    async def start_debugging(self, scope: Path, config: dict[str, Any]) -> None:
        debugger = config.get("miDebuggerPath") or DEFAULT_DEBUGGER
        command = [debugger, "--args", config["program"], *config.get("args", [])]
        debug_log = log.bind(debugger=debugger, program=config["program"], scope=str(scope))
        debug_log.info("Launching debugger")
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=config.get("cwd") or None,
                env=merged_environment(launch_environment(config)),
            )
        except OSError as e:
            debug_log.error("Debugger could not be started", error=str(e))
            raise ProcessLaunchError(f"Cannot start debugger '{debugger}': {e}") from e
        exit_code = await process.wait()
        debug_log.info("Debugger exited", exit_code=exit_code)


class JsonDebugService(DebugService):
    """
    Prints the launch configuration as JSON so an editor can start the session.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    async def start_debugging(self, scope: Path, config: dict[str, Any]) -> None:
        self.console.print_json(json.dumps(config))


# 🔼⚙️
