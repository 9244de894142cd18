from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from gtrunner.config import RunnerConfig

MATH_TEST_SOURCE = """\
#include <gtest/gtest.h>

TEST(MathTest, Adds) {
  EXPECT_EQ(2, 1 + 1);
}

TEST(MathTest, Subtracts) {
  EXPECT_EQ(0, 1 - 1);
}

TEST_F(CalculatorFixture, Divides) {
  EXPECT_EQ(2, calc.divide(4, 2));
}
"""


def exe_target(
    name: str,
    sources: list[str],
    artifacts: list[str] | None = None,
    type: str = "EXECUTABLE",
) -> dict[str, Any]:
    """One target entry in the raw code model shape."""
    return {
        "name": name,
        "type": type,
        "fileGroups": [{"sources": sources}],
        "artifacts": artifacts or [],
    }


def raw_code_model(targets: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "configurations": [
            {
                "name": "Debug",
                "projects": [{"name": "demo", "sourceDirectory": "/src", "targets": targets}],
            }
        ]
    }


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A CMake project with one test file and a plain source file."""
    root = tmp_path / "proj"
    (root / "tests").mkdir(parents=True)
    (root / "src").mkdir()
    (root / "CMakeLists.txt").write_text("cmake_minimum_required(VERSION 3.20)\nproject(demo)\n")
    (root / "tests" / "math_test.cpp").write_text(MATH_TEST_SOURCE)
    (root / "src" / "calculator.cpp").write_text("int divide(int a, int b) { return a / b; }\n")
    (root / "build").mkdir()
    return root


@pytest.fixture
def math_code_model(project_root: Path) -> dict[str, Any]:
    return raw_code_model(
        [
            exe_target(
                "math_tests",
                [str(project_root / "tests" / "math_test.cpp"), str(project_root / "src" / "calculator.cpp")],
                [str(project_root / "build" / "math_tests")],
            ),
            exe_target("calc_lib", [str(project_root / "src" / "calculator.cpp")], type="STATIC_LIBRARY"),
        ]
    )


@pytest.fixture
def fake_project(project_root: Path, math_code_model: dict[str, Any]) -> MagicMock:
    """A build project whose external calls are AsyncMocks."""
    project = MagicMock()
    project.code_model = math_code_model
    project.configure = AsyncMock()
    project.build = AsyncMock()
    project.get_build_directory = AsyncMock(return_value=str(project_root / "build"))
    return project


@pytest.fixture
def fake_build_service(fake_project: MagicMock) -> MagicMock:
    service = MagicMock()
    service.get_project = AsyncMock(return_value=fake_project)
    return service


@pytest.fixture
def runner_config() -> RunnerConfig:
    return RunnerConfig(env={"GTEST_COLOR": "no"}, gtest_flags=["--gtest_brief=0"])
