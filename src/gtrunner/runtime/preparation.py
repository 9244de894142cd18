#
# src/gtrunner/runtime/preparation.py
#
"""
Brings a target up to date and locates its binary before a run or debug.
"""
import os
from pathlib import Path

import structlog
from attrs import define

from gtrunner.build.codemodel import parse_code_model
from gtrunner.build.mapper import get_artifact_path
from gtrunner.build.protocols import BuildService, Project
from gtrunner.build.staleness import StalenessTracker
from gtrunner.exceptions import ArtifactNotFoundError, ProjectUnavailableError
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.preparation")


@define(frozen=True, slots=True)
class PreparedTarget:
    """A built executable target, ready to be spawned."""

    executable: str
    artifact: str
    cwd: Path
    project: Project


class TargetPreparer:
    """Resolves project -> ensures built -> resolves artifact and working directory."""

    def __init__(self, project_root: Path, build_service: BuildService, tracker: StalenessTracker) -> None:
        self.project_root = project_root
        self.build_service = build_service
        self.tracker = tracker

    async def prepare(self, executable: str) -> PreparedTarget:
        """
        Raises:
            ProjectUnavailableError: No build project for the root.
            BuildServiceError: Configure or build failed.
            ArtifactNotFoundError: The target has no built binary.
        """
        prep_log = log.bind(executable=executable, project_root=str(self.project_root))

        project = await self.build_service.get_project(self.project_root)
        if project is None:
            prep_log.error("Build project not available")
            raise ProjectUnavailableError("CMake project not available.", str(self.project_root))

        if not await self.tracker.ensure_built(self.project_root, [executable]):
            raise ProjectUnavailableError("CMake project not available.", str(self.project_root))

        artifact = get_artifact_path(parse_code_model(project.code_model), executable)
        if not artifact:
            prep_log.error("No artifact for target")
            raise ArtifactNotFoundError(executable, str(self.project_root))

        build_dir = await project.get_build_directory()
        cwd = Path(build_dir) if build_dir else Path(os.path.dirname(artifact))
        prep_log.debug("Target prepared", artifact=artifact, cwd=str(cwd))
        return PreparedTarget(executable=executable, artifact=artifact, cwd=cwd, project=project)


# 🔼⚙️
