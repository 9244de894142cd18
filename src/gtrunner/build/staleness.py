#
# src/gtrunner/build/staleness.py
#
"""
Incremental build decisions based on persisted modification times.

Configure runs only when CMakeLists.txt changed since the last successful
configure; build runs only when a source of the requested targets changed
since the last successful build of those targets, or a configure left a
build pending. A fingerprint is written only after the corresponding
external call succeeded, so a failed stage is retried on the next call.
"""
import asyncio
import os
from pathlib import Path

import structlog

from gtrunner.build.codemodel import parse_code_model
from gtrunner.build.mapper import get_source_paths_for_executables
from gtrunner.build.protocols import BuildService, Project
from gtrunner.build.storage import KeyValueStore
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("build.staleness")

STORAGE_KEY_CMAKE_MTIME = "gtrunner.lastCmakeMtime"
STORAGE_KEY_SOURCE_MTIMES = "gtrunner.lastSourceMtimes"
STORAGE_KEY_BUILD_PENDING = "gtrunner.buildPending"
CMAKE_LISTS = "CMakeLists.txt"


def get_mtime(path: str | Path) -> float:
    """Modification time in seconds; 0.0 when the file does not exist."""
    try:
        return os.stat(path).st_mtime
    except OSError:
        return 0.0


class StalenessTracker:
    """Decides and performs the configure/build needed before a run."""

    def __init__(self, build_service: BuildService, storage: KeyValueStore) -> None:
        self.build_service = build_service
        self.storage = storage
        self._locks: dict[str, asyncio.Lock] = {}

    @staticmethod
    def cmake_key(project_root: Path) -> str:
        return f"{STORAGE_KEY_CMAKE_MTIME}_{project_root}"

    @staticmethod
    def sources_key(project_root: Path) -> str:
        return f"{STORAGE_KEY_SOURCE_MTIMES}_{project_root}"

    @staticmethod
    def pending_key(project_root: Path) -> str:
        return f"{STORAGE_KEY_BUILD_PENDING}_{project_root}"

    def _lock_for(self, project_root: Path) -> asyncio.Lock:
        return self._locks.setdefault(str(project_root), asyncio.Lock())

    def last_source_mtimes(self, project_root: Path) -> dict[str, float]:
        stored = self.storage.get(self.sources_key(project_root), {})
        return dict(stored) if isinstance(stored, dict) else {}

    async def configure(self, project_root: Path, project: Project) -> None:
        """
        Configures the project and records the CMakeLists.txt mtime it saw.

        Marks a build as pending for the root until one succeeds, since the
        existing binaries predate this configure.
        """
        mtime = get_mtime(project_root / CMAKE_LISTS)
        await project.configure()
        self.storage.update(self.cmake_key(project_root), mtime)
        self.storage.update(self.pending_key(project_root), True)

    async def ensure_built(self, project_root: Path, target_names: list[str]) -> bool:
        """
        Configures and/or builds the targets if anything they depend on changed.

        Args:
            project_root: Directory holding the top-level CMakeLists.txt.
            target_names: Executable targets about to be run or debugged.

        Returns:
            False when the build service has no project for the root, else True.

        Raises:
            BuildServiceError: configure or build failed; nothing was persisted
                for the failed stage.
        """
        ensure_log = log.bind(project_root=str(project_root), targets=target_names)
        async with self._lock_for(project_root):
            project = await self.build_service.get_project(project_root)
            if project is None:
                ensure_log.warning("No build project for root")
                return False

            cmake_lists = project_root / CMAKE_LISTS
            if cmake_lists.is_file():
                current = get_mtime(cmake_lists)
                last = self.storage.get(self.cmake_key(project_root), 0)
                if current > last:
                    ensure_log.info("CMakeLists.txt changed, configuring", last_mtime=last, mtime=current)
                    await self.configure(project_root, project)
            pending = bool(self.storage.get(self.pending_key(project_root), False))

            # Read after configure: targets and sources may have changed.
            model = parse_code_model(project.code_model)
            paths = get_source_paths_for_executables(model, target_names)
            last_map = self.last_source_mtimes(project_root)
            current_mtimes = {p: get_mtime(p) for p in paths}
            changed = [p for p, m in current_mtimes.items() if p not in last_map or m > last_map[p]]

            if not pending and not changed:
                ensure_log.debug("Targets up to date, skipping build", sources=len(paths))
                return True

            ensure_log.info(
                "Building targets",
                reason="configured" if pending else "sources changed",
                changed_sources=len(changed),
            )
            await project.build(target_names)
            last_map.update(current_mtimes)
            self.storage.update(self.sources_key(project_root), last_map)
            self.storage.update(self.pending_key(project_root), False)
            return True


# 🔼⚙️
