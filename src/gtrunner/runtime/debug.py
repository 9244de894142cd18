#
# src/gtrunner/runtime/debug.py
#
"""
Composes debug-launch configurations for selected tests.

Program, arguments and working directory always come from gtrunner. Only the
debugger binary and the environment file are resolved through an ordered
list of providers, first present value wins:

1. gtrunner's own settings;
2. a ``cppdbg`` entry in ``.vscode/launch.json`` whose program is the same
   binary (same normalized path after ``${workspaceFolder}`` substitution, or
   same file name);
3. nothing, leaving the debug service's defaults in charge.
"""
import json
import os
from collections.abc import Callable, Iterable
from functools import cache
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog
from attrs import define

from gtrunner.build.mapper import normalize_path
from gtrunner.config.models import RunnerConfig, resolve_path
from gtrunner.runtime.outcome import build_filter, filter_argument
from gtrunner.runtime.preparation import PreparedTarget, TargetPreparer
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.debug")

DEBUG_TYPE = "cppdbg"
LAUNCH_FILE = Path(".vscode") / "launch.json"

ValueProvider = Callable[[], str | None]


@runtime_checkable
class DebugService(Protocol):
    """Starts a debug session for a launch configuration."""

    async def start_debugging(self, scope: Path, config: dict[str, Any]) -> None:
        ...


@define(frozen=True, slots=True)
class LaunchMatch:
    """Fields borrowed from a matching external launch configuration."""

    mi_debugger_path: str | None = None
    env_file: str | None = None


def first_present(providers: Iterable[ValueProvider]) -> str | None:
    """Folds providers left to right, returning the first non-empty value."""
    for provider in providers:
        value = provider()
        if value:
            return value
    return None


def find_matching_launch_config(workspace_folder: Path, artifact: str) -> LaunchMatch | None:
    """
    Looks for a launch.json ``cppdbg`` configuration that debugs ``artifact``.

    Missing or malformed files mean no match.
    """
    launch_path = workspace_folder / LAUNCH_FILE
    try:
        data = json.loads(launch_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        log.debug("Ignoring unreadable launch.json", path=str(launch_path), error=str(e))
        return None

    configs = data.get("configurations") if isinstance(data, dict) else None
    if not isinstance(configs, list):
        return None

    artifact_norm = normalize_path(artifact)
    artifact_base = os.path.basename(artifact_norm)
    for config in configs:
        if not isinstance(config, dict) or config.get("type") != DEBUG_TYPE:
            continue
        program = config.get("program")
        if not isinstance(program, str) or not program:
            continue
        program_norm = normalize_path(resolve_path(program, workspace_folder))
        if program_norm == artifact_norm or os.path.basename(program_norm) == artifact_base:
            log.debug("Matched launch configuration", name=config.get("name"), program=program)
            mi_debugger_path = config.get("miDebuggerPath")
            env_file = config.get("envFile")
            return LaunchMatch(
                mi_debugger_path=resolve_path(mi_debugger_path, workspace_folder)
                if isinstance(mi_debugger_path, str) and mi_debugger_path
                else None,
                env_file=resolve_path(env_file, workspace_folder) if isinstance(env_file, str) and env_file else None,
            )
    return None


class DebugComposer:
    """Builds a launch configuration for selected tests and hands it to a DebugService."""

    def __init__(
        self,
        preparer: TargetPreparer,
        config: RunnerConfig,
        workspace_folder: Path,
        debug_service: DebugService,
    ) -> None:
        self.preparer = preparer
        self.config = config
        self.workspace_folder = workspace_folder
        self.debug_service = debug_service

    def compose(self, prepared: PreparedTarget, full_names: list[str]) -> dict[str, Any]:
        # Debugging uses the selection only, never the default filter.
        args = [filter_argument(build_filter(full_names)), *self.config.gtest_flags]
        launch: dict[str, Any] = {
            "type": DEBUG_TYPE,
            "request": "launch",
            "name": f"GTest: {prepared.executable}",
            "program": prepared.artifact,
            "args": args,
            "cwd": str(prepared.cwd),
            "environment": [{"name": k, "value": v} for k, v in self.config.env.items()],
        }

        @cache
        def launch_match() -> LaunchMatch | None:
            return find_matching_launch_config(self.workspace_folder, prepared.artifact)

        def from_launch(attribute: str) -> ValueProvider:
            return lambda: getattr(launch_match(), attribute, None)

        mi_debugger_path = first_present(
            [lambda: self.config.mi_debugger_path, from_launch("mi_debugger_path")]
        )
        env_file = first_present(
            [lambda: self.config.effective_env_file(self.workspace_folder), from_launch("env_file")]
        )
        if mi_debugger_path:
            launch["miDebuggerPath"] = mi_debugger_path
        if env_file:
            launch["envFile"] = env_file
        return launch

    async def debug(self, executable: str, full_names: list[str]) -> dict[str, Any] | None:
        """
        Prepares the target and starts a debug session on the selected tests.

        Returns:
            The launch configuration handed to the debug service, or None
            when nothing was requested.
        """
        if not full_names:
            log.debug("Debug requested with no tests, nothing to do", executable=executable)
            return None
        prepared = await self.preparer.prepare(executable)
        launch = self.compose(prepared, full_names)
        log.info(
            "Starting debug session",
            executable=executable,
            tests=len(full_names),
            debugger=launch.get("miDebuggerPath", "default"),
        )
        await self.debug_service.start_debugging(self.workspace_folder, launch)
        return launch


# 🔼⚙️
