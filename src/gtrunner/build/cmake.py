# src/gtrunner/build/cmake.py

"""
Build service backed by the cmake CLI and the CMake File API.

Configure and build shell out to ``cmake``; the code model is read from the
File API ``codemodel-v2`` reply and reshaped into the
``configurations[].projects[].targets[]`` structure gtrunner consumes.
"""

import json
from pathlib import Path
from typing import Any

import structlog

from gtrunner.build.protocols import BuildService, Project
from gtrunner.exceptions import BuildServiceError, ProcessLaunchError
from gtrunner.process import ProcessResult, ProcessRunner, SubprocessProcessRunner
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("build.cmake")

CMAKE_LISTS = "CMakeLists.txt"
API_DIR = Path(".cmake") / "api" / "v1"
CODEMODEL_QUERY = API_DIR / "query" / "codemodel-v2"
REPLY_DIR = API_DIR / "reply"
MAX_ERROR_TAIL = 2000


def _absolute(path: str, base: Path) -> str:
    candidate = Path(path)
    if candidate.is_absolute():
        return str(candidate)
    return str(base / candidate)


def _error_tail(result: ProcessResult) -> str:
    text = (result.stderr.strip() or result.stdout.strip())
    return text[-MAX_ERROR_TAIL:]


class CMakeProject(Project):
    """A CMake source tree paired with its binary directory."""

    def __init__(
        self,
        source_dir: Path,
        build_dir: Path,
        runner: ProcessRunner,
        build_jobs: int = 0,
        cmake: str = "cmake",
    ) -> None:
        self.source_dir = source_dir
        self.build_dir = build_dir
        self.build_jobs = build_jobs
        self._runner = runner
        self._cmake_bin = cmake
        self._log = log.bind(source_dir=str(source_dir), build_dir=str(build_dir))

    # --- Code model -------------------------------------------------------
    @property
    def code_model(self) -> dict[str, Any] | None:
        reply_dir = self.build_dir / REPLY_DIR
        try:
            indexes = sorted(reply_dir.glob("index-*.json"))
            if not indexes:
                self._log.debug("No CMake File API reply yet")
                return None
            index = json.loads(indexes[-1].read_text(encoding="utf-8"))
            codemodel_file = next(
                obj["jsonFile"] for obj in index.get("objects", []) if obj.get("kind") == "codemodel"
            )
            codemodel = json.loads((reply_dir / codemodel_file).read_text(encoding="utf-8"))
            return self._reshape(codemodel, reply_dir)
        except StopIteration:
            self._log.warning("CMake File API reply has no codemodel object")
            return None
        except (OSError, ValueError, KeyError, TypeError) as e:
            self._log.warning("Failed to read CMake File API reply", error=str(e))
            return None

    def _reshape(self, codemodel: dict[str, Any], reply_dir: Path) -> dict[str, Any]:
        paths = codemodel.get("paths", {})
        top_source = Path(paths.get("source", self.source_dir))
        top_build = Path(paths.get("build", self.build_dir))

        configurations = []
        for config in codemodel.get("configurations", []):
            target_refs = config.get("targets", [])
            projects = []
            for project in config.get("projects", []):
                targets = []
                for target_index in project.get("targetIndexes", []):
                    ref = target_refs[target_index]
                    detail = json.loads((reply_dir / ref["jsonFile"]).read_text(encoding="utf-8"))
                    targets.append(
                        {
                            "name": detail.get("name", ref.get("name")),
                            "type": detail.get("type", ""),
                            "fileGroups": [
                                {
                                    "sources": [
                                        _absolute(source["path"], top_source) for source in detail.get("sources", [])
                                    ]
                                }
                            ],
                            "artifacts": [
                                _absolute(artifact["path"], top_build) for artifact in detail.get("artifacts", [])
                            ],
                        }
                    )
                projects.append(
                    {
                        "name": project.get("name", ""),
                        "sourceDirectory": str(top_source),
                        "targets": targets,
                    }
                )
            configurations.append({"name": config.get("name", ""), "projects": projects})
        return {"configurations": configurations}

    # --- Commands ---------------------------------------------------------
    async def _run_cmake(self, args: list[str], action: str) -> None:
        try:
            result = await self._runner.run(self._cmake_bin, args, None, self.source_dir)
        except ProcessLaunchError as e:
            raise BuildServiceError(f"cmake {action} could not start", str(self.source_dir), details=e) from e
        if result.exit_code != 0:
            self._log.error(f"cmake {action} failed", exit_code=result.exit_code)
            raise BuildServiceError(
                f"cmake {action} failed with exit code {result.exit_code}:\n{_error_tail(result)}",
                str(self.source_dir),
            )
        self._log.info(f"cmake {action} succeeded")

    async def configure(self) -> None:
        query = self.build_dir / CODEMODEL_QUERY
        query.parent.mkdir(parents=True, exist_ok=True)
        query.touch()
        await self._run_cmake(["-S", str(self.source_dir), "-B", str(self.build_dir)], "configure")

    async def build(self, targets: list[str]) -> None:
        if not (self.build_dir / "CMakeCache.txt").is_file():
            self._log.info("Build directory not configured yet, configuring first")
            await self.configure()
        args = ["--build", str(self.build_dir)]
        if targets:
            args += ["--target", *targets]
        if self.build_jobs > 0:
            args += ["--parallel", str(self.build_jobs)]
        await self._run_cmake(args, "build")

    async def get_build_directory(self) -> str | None:
        return str(self.build_dir) if self.build_dir.is_dir() else None


class CMakeFileApiService(BuildService):
    """
    Resolves a CMake project for a root containing CMakeLists.txt.
    """

    def __init__(
        self,
        build_dir: Path,
        build_jobs: int = 0,
        runner: ProcessRunner | None = None,
        cmake: str = "cmake",
    ) -> None:
        self.build_dir = build_dir
        self.build_jobs = build_jobs
        self._runner = runner or SubprocessProcessRunner()
        self._cmake_bin = cmake

    async def get_project(self, root: Path) -> CMakeProject | None:
        if not (root / CMAKE_LISTS).is_file():
            log.warning("No CMakeLists.txt at project root", root=str(root))
            return None
        return CMakeProject(root, self.build_dir, self._runner, self.build_jobs, self._cmake_bin)


# 🔼⚙️
