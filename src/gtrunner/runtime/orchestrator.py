# src/gtrunner/runtime/orchestrator.py

"""
Runs selected tests of one executable and records their outcomes.
"""

import structlog
from attrs import define, field

from gtrunner.config.models import RunnerConfig
from gtrunner.exceptions import ProcessLaunchError
from gtrunner.process import ProcessResult, ProcessRunner
from gtrunner.runtime.outcome import GTestMarkerParser, OutcomeParser, compose_run_filter, filter_argument
from gtrunner.runtime.preparation import TargetPreparer
from gtrunner.runtime.run_log import RunLog
from gtrunner.state import ResultStore, TestStatus
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.orchestrator")


@define(frozen=True, slots=True)
class RunSummary:
    """What one invocation of the test binary produced."""

    executable: str
    filter_expression: str
    exit_code: int
    output: str
    outcomes: dict[str, TestStatus] = field(factory=dict)

    @property
    def failed(self) -> list[str]:
        return [name for name, status in self.outcomes.items() if status == TestStatus.FAILED]

    @property
    def not_run(self) -> list[str]:
        return [name for name, status in self.outcomes.items() if status == TestStatus.NOT_RUN]


class ExecutionOrchestrator:
    """Executes the prepare -> spawn -> parse -> record sequence for a test selection."""

    def __init__(
        self,
        preparer: TargetPreparer,
        store: ResultStore,
        process_runner: ProcessRunner,
        run_log: RunLog,
        config: RunnerConfig,
        parser: OutcomeParser | None = None,
    ):
        self.preparer = preparer
        self.store = store
        self.process_runner = process_runner
        self.run_log = run_log
        self.config = config
        self.parser = parser or GTestMarkerParser()
        log.debug("ExecutionOrchestrator initialized.")

    async def run(self, executable: str, full_names: list[str]) -> RunSummary | None:
        """
        Runs the named tests of one executable.

        Statuses come only from report markers in the captured output: a
        non-zero exit or a crash leaves unreported tests at NOT_RUN.

        Args:
            executable: Executable target name.
            full_names: Suite-qualified test names; an empty list is a no-op.

        Returns:
            A RunSummary, or None when nothing was requested.

        Raises:
            ProjectUnavailableError, BuildServiceError, ArtifactNotFoundError:
                before any status is touched.
        """
        if not full_names:
            log.debug("Run requested with no tests, nothing to do", executable=executable)
            return None

        invocation_log = log.bind(executable=executable, tests=len(full_names))
        prepared = await self.preparer.prepare(executable)

        filter_expression = compose_run_filter(full_names, self.config.gtest_filter)
        args = [filter_argument(filter_expression), *self.config.gtest_flags]

        for full_name in full_names:
            self.store.set_status(executable, full_name, TestStatus.RUNNING)

        invocation_log.info("Running tests", filter=filter_expression, artifact=prepared.artifact)
        try:
            result = await self.process_runner.run(prepared.artifact, args, self.config.env, prepared.cwd)
        except ProcessLaunchError as e:
            invocation_log.error("Test binary could not be started", error=str(e))
            result = ProcessResult(exit_code=-1, stdout="", stderr=str(e))
        except BaseException:
            self.store.set_status_bulk(executable, [(name, TestStatus.NOT_RUN) for name in full_names])
            raise

        output = result.combined_output
        outcomes = self.parser.parse(output, full_names)
        self.store.set_status_bulk(executable, outcomes)
        for full_name in full_names:
            self.store.set_output(executable, full_name, output)
        self.run_log.append_run(executable, full_names, output)

        summary = RunSummary(
            executable=executable,
            filter_expression=filter_expression,
            exit_code=result.exit_code,
            output=output,
            outcomes=dict(outcomes),
        )
        invocation_log.info(
            "Test run finished",
            exit_code=result.exit_code,
            failed=len(summary.failed),
            not_run=len(summary.not_run),
        )
        return summary


# 🔼⚙️
