#
# tests/unit/test_config.py
#
"""
Tests for loading and validating gtrunner.toml.
"""

import logging
from pathlib import Path

import pytest

from gtrunner.config import DEFAULT_SCAN_PATTERN, GtrunnerConfig, RunnerConfig, load_config, resolve_path
from gtrunner.exceptions import ConfigurationError

FULL_CONFIG = """\
[global]
log_level = "DEBUG"

[runner]
project_root = "${workspaceFolder}/cpp"
build_directory = "${workspaceFolder}/out/build"
build_jobs = 8
gtest_filter = "-Slow.*"
gtest_flags = ["--gtest_color=no"]
mi_debugger_path = "/usr/bin/gdb"
env_file = ""

[runner.env]
GTEST_SHUFFLE = "1"
"""


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "gtrunner.toml"
    path.write_text(text)
    return path


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "gtrunner.toml")

    assert config == GtrunnerConfig()
    assert config.config_file_path is None
    assert config.runner.scan_include_pattern == DEFAULT_SCAN_PATTERN
    assert config.global_config.numeric_log_level == logging.INFO


def test_none_path_gives_defaults() -> None:
    assert load_config(None) == GtrunnerConfig()


def test_full_config(tmp_path: Path) -> None:
    config = load_config(write_config(tmp_path, FULL_CONFIG))
    runner = config.runner

    assert config.global_config.log_level == "DEBUG"
    assert runner.build_jobs == 8
    assert runner.gtest_filter == "-Slow.*"
    assert runner.gtest_flags == ("--gtest_color=no",)
    assert runner.env == {"GTEST_SHUFFLE": "1"}
    assert runner.mi_debugger_path == "/usr/bin/gdb"
    assert runner.env_file is None
    assert config.config_file_path == (tmp_path / "gtrunner.toml").resolve()


def test_effective_paths_resolve_workspace_folder(tmp_path: Path) -> None:
    runner = load_config(write_config(tmp_path, FULL_CONFIG)).runner
    workspace = Path("/work/space")

    assert runner.effective_project_root(workspace) == Path("/work/space/cpp")
    assert runner.effective_build_directory(workspace) == Path("/work/space/out/build")
    assert runner.effective_scan_directory(workspace) == workspace
    assert runner.effective_state_file(workspace) == Path("/work/space/.gtrunner/state.json")
    assert runner.effective_env_file(workspace) is None


def test_project_root_defaults_to_workspace() -> None:
    assert RunnerConfig().effective_project_root(Path("/ws")) == Path("/ws")


def test_blank_run_log_disables_it() -> None:
    assert RunnerConfig(run_log_file="").effective_run_log_file(Path("/ws")) is None


def test_resolve_path() -> None:
    assert resolve_path("${workspaceFolder}/a/${workspaceFolder}", Path("/ws")) == "/ws/a//ws"
    assert resolve_path("/abs/path", Path("/ws")) == "/abs/path"


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("[runner\nbuild_jobs = 1", "Invalid TOML"),
        ("[watch]\nx = 1\n", "Unknown section"),
        ("[runner]\nbuild_job = 1\n", "Unknown key"),
        ("[runner]\nbuild_jobs = -1\n", "Invalid value"),
        ("[runner]\nenv = { A = 1 }\n", "Invalid value"),
        ("[runner]\ngtest_flags = [1, 2]\n", "Invalid value"),
        ("[global]\nlog_level = \"LOUD\"\n", "Invalid value"),
        ("runner = 3\n", "must be a table"),
    ],
)
def test_invalid_config_raises(tmp_path: Path, text: str, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        load_config(write_config(tmp_path, text))
