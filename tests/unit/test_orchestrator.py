# tests/unit/test_orchestrator.py

"""Unit tests for the ExecutionOrchestrator component."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from gtrunner.config import RunnerConfig
from gtrunner.exceptions import ArtifactNotFoundError, ProcessLaunchError, ProjectUnavailableError
from gtrunner.process import ProcessResult
from gtrunner.runtime.orchestrator import ExecutionOrchestrator
from gtrunner.runtime.preparation import PreparedTarget
from gtrunner.state import ResultStore, TestStatus

NAMES = ["MathTest.Adds", "MathTest.Subtracts", "MathTest.Divides"]
OUTPUT = "[       OK ] MathTest.Adds (0 ms)\n[  FAILED  ] MathTest.Subtracts (0 ms)\n"


@pytest.fixture
def preparer(tmp_path: Path) -> MagicMock:
    preparer = MagicMock()
    preparer.prepare = AsyncMock(
        return_value=PreparedTarget(
            executable="math_tests",
            artifact=str(tmp_path / "build" / "math_tests"),
            cwd=tmp_path / "build",
            project=MagicMock(),
        )
    )
    return preparer


@pytest.fixture
def process_runner() -> MagicMock:
    runner = MagicMock()
    runner.run = AsyncMock(return_value=ProcessResult(exit_code=1, stdout=OUTPUT, stderr=""))
    return runner


@pytest.fixture
def store() -> ResultStore:
    return ResultStore()


@pytest.fixture
def run_log() -> MagicMock:
    return MagicMock()


def make_orchestrator(preparer, store, process_runner, run_log, config=None) -> ExecutionOrchestrator:
    return ExecutionOrchestrator(preparer, store, process_runner, run_log, config or RunnerConfig())


@pytest.mark.asyncio
class TestExecutionOrchestrator:
    async def test_empty_selection_is_a_no_op(self, preparer, store, process_runner, run_log) -> None:
        orchestrator = make_orchestrator(preparer, store, process_runner, run_log)

        assert await orchestrator.run("math_tests", []) is None

        preparer.prepare.assert_not_awaited()
        process_runner.run.assert_not_awaited()
        run_log.append_run.assert_not_called()

    async def test_statuses_and_output_recorded(self, preparer, store, process_runner, run_log) -> None:
        orchestrator = make_orchestrator(preparer, store, process_runner, run_log)

        summary = await orchestrator.run("math_tests", NAMES)

        assert store.get_status("math_tests", "MathTest.Adds") == TestStatus.PASSED
        assert store.get_status("math_tests", "MathTest.Subtracts") == TestStatus.FAILED
        assert store.get_status("math_tests", "MathTest.Divides") == TestStatus.NOT_RUN
        for name in NAMES:
            assert store.get_output("math_tests", name) == f"{OUTPUT}\n"
        assert summary.exit_code == 1
        assert summary.failed == ["MathTest.Subtracts"]
        assert summary.not_run == ["MathTest.Divides"]
        run_log.append_run.assert_called_once_with("math_tests", NAMES, f"{OUTPUT}\n")

    async def test_arguments_environment_and_cwd(self, preparer, store, process_runner, run_log, tmp_path) -> None:
        config = RunnerConfig(gtest_filter="-Slow.*", env={"FOO": "1"}, gtest_flags=["--gtest_repeat=2"])
        orchestrator = make_orchestrator(preparer, store, process_runner, run_log, config)

        summary = await orchestrator.run("math_tests", ["MathTest.Adds", "MathTest.Divides"])

        process_runner.run.assert_awaited_once_with(
            str(tmp_path / "build" / "math_tests"),
            ["--gtest_filter=MathTest.Adds:MathTest.Divides-Slow.*", "--gtest_repeat=2"],
            {"FOO": "1"},
            tmp_path / "build",
        )
        assert summary.filter_expression == "MathTest.Adds:MathTest.Divides-Slow.*"

    async def test_tests_are_running_while_the_binary_runs(self, preparer, store, process_runner, run_log) -> None:
        seen: dict[str, TestStatus] = {}

        async def capture(*args, **kwargs):
            seen.update({name: store.get_status("math_tests", name) for name in NAMES})
            return ProcessResult(exit_code=0, stdout="", stderr="")

        process_runner.run.side_effect = capture
        orchestrator = make_orchestrator(preparer, store, process_runner, run_log)

        await orchestrator.run("math_tests", NAMES)

        assert set(seen.values()) == {TestStatus.RUNNING}

    async def test_bulk_update_sends_one_notification(self, preparer, store, process_runner, run_log) -> None:
        events: list[tuple[str, str | None]] = []
        store.on_changed(lambda exe, name: events.append((exe, name)))
        orchestrator = make_orchestrator(preparer, store, process_runner, run_log)

        await orchestrator.run("math_tests", NAMES)

        assert events.count(("math_tests", None)) == 1

    async def test_launch_failure_reports_error_as_output(self, preparer, store, process_runner, run_log) -> None:
        process_runner.run.side_effect = ProcessLaunchError("Cannot start 'math_tests': permission denied")
        orchestrator = make_orchestrator(preparer, store, process_runner, run_log)

        summary = await orchestrator.run("math_tests", NAMES)

        assert summary.exit_code == -1
        for name in NAMES:
            assert store.get_status("math_tests", name) == TestStatus.NOT_RUN
            assert "permission denied" in store.get_output("math_tests", name)

    @pytest.mark.parametrize(
        "error",
        [
            ProjectUnavailableError("CMake project not available."),
            ArtifactNotFoundError("math_tests"),
        ],
    )
    async def test_preparation_failure_touches_nothing(
        self, preparer, store, process_runner, run_log, error
    ) -> None:
        store.set_status("math_tests", "MathTest.Adds", TestStatus.PASSED)
        preparer.prepare.side_effect = error
        orchestrator = make_orchestrator(preparer, store, process_runner, run_log)

        with pytest.raises(type(error)):
            await orchestrator.run("math_tests", NAMES)

        assert store.get_status("math_tests", "MathTest.Adds") == TestStatus.PASSED
        assert store.get_status("math_tests", "MathTest.Divides") == TestStatus.NOT_RUN
        process_runner.run.assert_not_awaited()
        run_log.append_run.assert_not_called()

    async def test_unexpected_runner_error_resets_running(self, preparer, store, process_runner, run_log) -> None:
        process_runner.run.side_effect = RuntimeError("runner crashed")
        orchestrator = make_orchestrator(preparer, store, process_runner, run_log)

        with pytest.raises(RuntimeError):
            await orchestrator.run("math_tests", NAMES)

        for name in NAMES:
            assert store.get_status("math_tests", name) == TestStatus.NOT_RUN
