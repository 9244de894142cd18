# src/gtrunner/state.py
#
"""
Defines the per-test result state and the store that tracks it.
"""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from enum import Enum, auto

import structlog
from attrs import evolve, field, frozen

# Logger specific to state management
log: structlog.stdlib.BoundLogger = structlog.get_logger("state")


class TestStatus(Enum):
    """Enumeration of possible states of one test."""

    __test__ = False

    NOT_RUN = auto()  # Never run, or the last run reported nothing for it.
    RUNNING = auto()  # Binary spawned, outcome pending.
    PASSED = auto()
    FAILED = auto()
    IGNORED = auto()  # Disabled/skipped; reserved for richer outcome parsers.


# Mapping of TestStatus to display emojis for the CLI listing
STATUS_EMOJI_MAP = {
    TestStatus.NOT_RUN: "⚪",
    TestStatus.RUNNING: "🔄",
    TestStatus.PASSED: "✅",
    TestStatus.FAILED: "❌",
    TestStatus.IGNORED: "🚫",
}


@frozen(slots=True)
class TestResult:
    """
    Latest known result of one test. Output is replaced, never appended.
    """

    __test__ = False

    status: TestStatus = field(default=TestStatus.NOT_RUN)
    output: str = field(default="")
    last_run_time: datetime | None = field(default=None)  # Timezone-aware (UTC)


ResultKey = tuple[str, str]
ChangeCallback = Callable[[str, str | None], None]

_EMPTY = TestResult()


class ResultStore:
    """
    Map from (executable, full test name) to its latest TestResult.

    Mutations are synchronous and immediately visible. Each mutating call
    notifies observers exactly once: ``callback(executable, full_name)``,
    with ``full_name=None`` for bulk updates. One store is created per
    session and passed to whatever needs it.
    """

    def __init__(self) -> None:
        self._results: dict[ResultKey, TestResult] = {}
        self._observers: list[ChangeCallback] = []

    def _notify(self, executable: str, full_name: str | None) -> None:
        for callback in list(self._observers):
            try:
                callback(executable, full_name)
            except Exception as e:
                log.warning(
                    "Result observer raised",
                    executable=executable,
                    full_name=full_name,
                    error=str(e),
                    exc_info=True,
                )

    def get_result(self, executable: str, full_name: str) -> TestResult:
        return self._results.get((executable, full_name), _EMPTY)

    def get_status(self, executable: str, full_name: str) -> TestStatus:
        return self.get_result(executable, full_name).status

    def get_output(self, executable: str, full_name: str) -> str:
        """Output of the last run of the test, empty if it never ran."""
        return self.get_result(executable, full_name).output

    def set_status(self, executable: str, full_name: str, status: TestStatus) -> None:
        key = (executable, full_name)
        old_status = self.get_result(executable, full_name).status
        self._results[key] = evolve(self.get_result(executable, full_name), status=status)
        log.debug(
            "Test status changed",
            executable=executable,
            full_name=full_name,
            old_status=old_status.name,
            new_status=status.name,
        )
        self._notify(executable, full_name)

    def set_output(self, executable: str, full_name: str, output: str) -> None:
        """Replaces the test's output and stamps its last run time."""
        key = (executable, full_name)
        self._results[key] = evolve(
            self.get_result(executable, full_name),
            output=output,
            last_run_time=datetime.now(UTC),
        )
        self._notify(executable, full_name)

    def set_status_bulk(self, executable: str, entries: Iterable[tuple[str, TestStatus]]) -> None:
        """Sets many statuses of one executable with a single notification."""
        count = 0
        for full_name, status in entries:
            key = (executable, full_name)
            self._results[key] = evolve(self.get_result(executable, full_name), status=status)
            count += 1
        log.debug("Bulk status update", executable=executable, count=count)
        self._notify(executable, None)

    def on_changed(self, callback: ChangeCallback) -> Callable[[], None]:
        """
        Subscribes to change notifications.

        Returns:
            A function that removes the subscription.
        """
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def clear_observers(self) -> None:
        """Drops every subscription; called when the session shuts down."""
        self._observers.clear()


# 🔼⚙️
