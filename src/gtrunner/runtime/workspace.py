#
# src/gtrunner/runtime/workspace.py
#
"""
Wires the discovery, build, run and debug components for one workspace folder.
"""
from pathlib import Path

import structlog
from rich.console import Console

from gtrunner.build.cmake import CMakeFileApiService
from gtrunner.build.codemodel import parse_code_model
from gtrunner.build.protocols import BuildService
from gtrunner.build.staleness import StalenessTracker
from gtrunner.build.storage import JsonFileStore, KeyValueStore
from gtrunner.config.models import RunnerConfig
from gtrunner.discovery.catalog import TestCatalog, build_catalog
from gtrunner.discovery.scanner import scan_directory
from gtrunner.process import ProcessRunner, SubprocessProcessRunner
from gtrunner.runtime.debug import DebugComposer, DebugService
from gtrunner.runtime.debuggers import JsonDebugService
from gtrunner.runtime.orchestrator import ExecutionOrchestrator, RunSummary
from gtrunner.runtime.preparation import TargetPreparer
from gtrunner.runtime.run_log import FileRunLog, RunLog
from gtrunner.state import ResultStore
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.workspace")


class Workspace:
    """
    Everything a session needs for one workspace folder.

    Collaborators default to the bundled implementations and can be replaced
    individually.
    """

    def __init__(
        self,
        config: RunnerConfig,
        workspace_folder: Path,
        debug_service: DebugService | None = None,
        build_service: BuildService | None = None,
        storage: KeyValueStore | None = None,
        process_runner: ProcessRunner | None = None,
        run_log: RunLog | None = None,
        console: Console | None = None,
    ) -> None:
        self.config = config
        self.workspace_folder = workspace_folder
        self.project_root = config.effective_project_root(workspace_folder)
        self.process_runner = process_runner or SubprocessProcessRunner()
        self.build_service = build_service or CMakeFileApiService(
            build_dir=config.effective_build_directory(workspace_folder),
            build_jobs=config.build_jobs,
            runner=self.process_runner,
        )
        self.storage = storage or JsonFileStore(config.effective_state_file(workspace_folder))
        self.run_log = run_log or FileRunLog(config.effective_run_log_file(workspace_folder), console)
        self.store = ResultStore()
        self.tracker = StalenessTracker(self.build_service, self.storage)
        self.preparer = TargetPreparer(self.project_root, self.build_service, self.tracker)
        self.orchestrator = ExecutionOrchestrator(
            self.preparer, self.store, self.process_runner, self.run_log, config
        )
        self.debugger = DebugComposer(
            self.preparer, config, workspace_folder, debug_service or JsonDebugService(console)
        )
        log.debug(
            "Workspace initialized",
            workspace=str(workspace_folder),
            project_root=str(self.project_root),
        )

    async def discover(self, configure_missing: bool = False) -> TestCatalog:
        """
        Scans the configured directory and maps the declarations onto the
        current code model. With no code model the catalog is empty.

        Args:
            configure_missing: Configure the project first when it has no
                code model yet.
        """
        scanned = scan_directory(
            self.config.effective_scan_directory(self.workspace_folder),
            self.config.scan_include_pattern,
        )
        project = await self.build_service.get_project(self.project_root)
        raw_model = project.code_model if project is not None else None
        if project is not None and raw_model is None and configure_missing:
            log.info("No code model yet, configuring project", project_root=str(self.project_root))
            await self.tracker.configure(self.project_root, project)
            raw_model = project.code_model
        return build_catalog(scanned, parse_code_model(raw_model))

    async def run(self, executable: str, full_names: list[str]) -> RunSummary | None:
        return await self.orchestrator.run(executable, full_names)

    async def debug(self, executable: str, full_names: list[str]) -> dict | None:
        return await self.debugger.debug(executable, full_names)

    def close(self) -> None:
        self.store.clear_observers()


# 🔼⚙️
