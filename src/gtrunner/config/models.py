#
# config/models.py
#
"""
Attrs-based data models for gtrunner configuration structure.
"""

import logging
import re
from pathlib import Path
from typing import Any

from attrs import define, field

WORKSPACE_FOLDER_VAR = re.compile(r"\$\{workspaceFolder\}")
DEFAULT_SCAN_PATTERN = "**/*{test,tests,spec}*.{cpp,hpp}"


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_non_negative_int(inst: Any, attr: Any, value: int) -> None:
    """Validator ensures integer is zero or positive."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"Field '{attr.name}' must be a non-negative integer, got {value!r}")


def _validate_str_mapping(inst: Any, attr: Any, value: dict[str, str]) -> None:
    for key, val in value.items():
        if not isinstance(key, str) or not isinstance(val, str):
            raise ValueError(f"Field '{attr.name}' must map strings to strings, got {key!r}={val!r}")


def _validate_str_list(inst: Any, attr: Any, value: tuple[str, ...]) -> None:
    if not all(isinstance(item, str) for item in value):
        raise ValueError(f"Field '{attr.name}' must be a list of strings, got {list(value)!r}")


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def resolve_path(raw: str, workspace_folder: Path) -> str:
    """Substitutes ${workspaceFolder} in a path setting."""
    return WORKSPACE_FOLDER_VAR.sub(lambda _: str(workspace_folder), raw)


@define(frozen=True, slots=True)
class RunnerConfig:
    """
    Settings for discovering, building, running and debugging tests.

    Path settings may contain ``${workspaceFolder}``; use the ``effective_*``
    helpers to get them resolved against a workspace folder.
    """

    project_root: str | None = field(default=None, converter=_blank_to_none)
    scan_directory: str = field(default="${workspaceFolder}")
    scan_include_pattern: str = field(default=DEFAULT_SCAN_PATTERN)
    build_directory: str = field(default="${workspaceFolder}/build")
    # Only the bundled CMake service forwards this (as --parallel).
    build_jobs: int = field(default=0, validator=_validate_non_negative_int)
    gtest_filter: str = field(default="")
    env: dict[str, str] = field(factory=dict, validator=_validate_str_mapping)
    gtest_flags: tuple[str, ...] = field(factory=tuple, converter=tuple, validator=_validate_str_list)
    mi_debugger_path: str | None = field(default=None, converter=_blank_to_none)
    env_file: str | None = field(default=None, converter=_blank_to_none)
    state_file: str = field(default="${workspaceFolder}/.gtrunner/state.json")
    run_log_file: str | None = field(default="${workspaceFolder}/.gtrunner/gtest.log", converter=_blank_to_none)

    def effective_project_root(self, workspace_folder: Path) -> Path:
        """Project root override if set, else the workspace folder."""
        if self.project_root:
            return Path(resolve_path(self.project_root, workspace_folder))
        return workspace_folder

    def effective_scan_directory(self, workspace_folder: Path) -> Path:
        return Path(resolve_path(self.scan_directory, workspace_folder))

    def effective_build_directory(self, workspace_folder: Path) -> Path:
        return Path(resolve_path(self.build_directory, workspace_folder))

    def effective_state_file(self, workspace_folder: Path) -> Path:
        return Path(resolve_path(self.state_file, workspace_folder))

    def effective_run_log_file(self, workspace_folder: Path) -> Path | None:
        if not self.run_log_file:
            return None
        return Path(resolve_path(self.run_log_file, workspace_folder))

    def effective_env_file(self, workspace_folder: Path) -> str | None:
        if not self.env_file:
            return None
        return resolve_path(self.env_file, workspace_folder)


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for gtrunner."""

    log_level: str = field(default="INFO", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@define(frozen=True, slots=True)
class GtrunnerConfig:
    """Root configuration object for the gtrunner application."""

    runner: RunnerConfig = field(factory=RunnerConfig)
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})
    config_file_path: Path | None = field(default=None)


# 🔼⚙️
