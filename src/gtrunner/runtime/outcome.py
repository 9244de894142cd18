#
# src/gtrunner/runtime/outcome.py
#
"""
GoogleTest filter construction and run output interpretation.

Outcome parsing is a textual heuristic over the binary's report markers and
is kept behind the ``OutcomeParser`` protocol so a structured source (for
example ``--gtest_output=json``) can replace it without touching callers.
"""
import re
from typing import Protocol, runtime_checkable

from gtrunner.state import TestStatus

FILTER_SEPARATOR = ":"
EXCLUDE_SIGIL = "-"
MATCH_ALL = "*"


def build_filter(full_names: list[str]) -> str:
    """Colon-joined selection of full test names, ``*`` when none are given."""
    if not full_names:
        return MATCH_ALL
    return FILTER_SEPARATOR.join(full_names)


def compose_run_filter(full_names: list[str], default_filter: str = "") -> str:
    """
    Combines the selection with the configured default filter.

    A positive default is joined with ``:``. A default that starts with the
    exclude sigil is a negative section in GoogleTest syntax and is appended
    as-is (``A.B-Slow.*``).
    """
    selection = build_filter(full_names)
    default_filter = default_filter.strip()
    if not default_filter:
        return selection
    if default_filter.startswith(EXCLUDE_SIGIL):
        return f"{selection}{default_filter}"
    return f"{selection}{FILTER_SEPARATOR}{default_filter}"


def filter_argument(filter_expression: str) -> str:
    return f"--gtest_filter={filter_expression}"


@runtime_checkable
class OutcomeParser(Protocol):
    """Strategy that turns captured run output into per-test outcomes."""

    def parse(self, output: str, full_names: list[str]) -> list[tuple[str, TestStatus]]:
        """
        Returns one (full_name, status) pair per requested name, in order.
        Names the output says nothing about resolve to NOT_RUN.
        """
        ...


class GTestMarkerParser(OutcomeParser):
    """Reads ``[ PASSED ]``/``[       OK ]`` and ``[ FAILED ]`` report lines."""

    FAILED_MARKER = re.compile(r"\[\s*FAILED\s*\]\s+(\S+)")
    PASSED_MARKER = re.compile(r"\[\s*(?:PASSED|OK)\s*\]\s+(\S+)")

    def parse(self, output: str, full_names: list[str]) -> list[tuple[str, TestStatus]]:
        failed: set[str] = set()
        passed: set[str] = set()
        for line in output.splitlines():
            if match := self.FAILED_MARKER.search(line):
                failed.add(match.group(1))
            if match := self.PASSED_MARKER.search(line):
                passed.add(match.group(1))

        results: list[tuple[str, TestStatus]] = []
        for full_name in full_names:
            if full_name in failed:
                results.append((full_name, TestStatus.FAILED))
            elif full_name in passed:
                results.append((full_name, TestStatus.PASSED))
            else:
                results.append((full_name, TestStatus.NOT_RUN))
        return results


# 🔼⚙️
