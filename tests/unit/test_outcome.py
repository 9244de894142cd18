#
# tests/unit/test_outcome.py
#
"""
Tests for filter construction and output parsing.
"""

import pytest

from gtrunner.runtime.outcome import (
    GTestMarkerParser,
    build_filter,
    compose_run_filter,
    filter_argument,
)
from gtrunner.state import TestStatus

GTEST_OUTPUT = """\
Running main() from gtest_main.cc
[==========] Running 3 tests from 1 test suite.
[----------] 3 tests from MathTest
[ RUN      ] MathTest.Adds
[       OK ] MathTest.Adds (0 ms)
[ RUN      ] MathTest.Subtracts
math_test.cpp:8: Failure
Expected equality of these values:
  0
  1
[  FAILED  ] MathTest.Subtracts (0 ms)
[ RUN      ] MathTest.Divides
[       OK ] MathTest.Divides (1 ms)
[----------] 3 tests from MathTest (1 ms total)
[==========] 3 tests from 1 test suite ran. (1 ms total)
[  PASSED  ] 2 tests.
[  FAILED  ] 1 test, listed below:
[  FAILED  ] MathTest.Subtracts

 1 FAILED TEST
"""


@pytest.mark.parametrize(
    ("names", "expected"),
    [
        ([], "*"),
        (["A.B"], "A.B"),
        (["A.B", "C.D"], "A.B:C.D"),
    ],
)
def test_build_filter(names: list[str], expected: str) -> None:
    assert build_filter(names) == expected


@pytest.mark.parametrize(
    ("names", "default", "expected"),
    [
        (["A.B"], "", "A.B"),
        (["A.B"], "   ", "A.B"),
        (["A.B"], "Smoke.*", "A.B:Smoke.*"),
        (["A.B", "A.C"], "-Slow.*", "A.B:A.C-Slow.*"),
        ([], "-Slow.*", "*-Slow.*"),
    ],
)
def test_compose_run_filter(names: list[str], default: str, expected: str) -> None:
    assert compose_run_filter(names, default) == expected


def test_filter_argument() -> None:
    assert filter_argument("A.B:C.D") == "--gtest_filter=A.B:C.D"


class TestGTestMarkerParser:
    def test_passed_failed_and_not_run(self) -> None:
        output = "[ PASSED ] A.B\n[ FAILED ] A.C\n"
        result = GTestMarkerParser().parse(output, ["A.B", "A.C", "A.D"])
        assert result == [
            ("A.B", TestStatus.PASSED),
            ("A.C", TestStatus.FAILED),
            ("A.D", TestStatus.NOT_RUN),
        ]

    def test_real_gtest_report(self) -> None:
        result = dict(GTestMarkerParser().parse(GTEST_OUTPUT, ["MathTest.Adds", "MathTest.Subtracts", "MathTest.Divides"]))
        assert result == {
            "MathTest.Adds": TestStatus.PASSED,
            "MathTest.Subtracts": TestStatus.FAILED,
            "MathTest.Divides": TestStatus.PASSED,
        }

    def test_failed_marker_wins(self) -> None:
        output = "[       OK ] A.B (0 ms)\n[  FAILED  ] A.B\n"
        assert GTestMarkerParser().parse(output, ["A.B"]) == [("A.B", TestStatus.FAILED)]

    def test_crash_leaves_tests_not_run(self) -> None:
        output = "[ RUN      ] A.B\nSegmentation fault (core dumped)\n"
        assert GTestMarkerParser().parse(output, ["A.B"]) == [("A.B", TestStatus.NOT_RUN)]

    def test_markers_for_unrequested_tests_are_ignored(self) -> None:
        output = "[ PASSED ] Other.Test\n"
        assert GTestMarkerParser().parse(output, ["A.B"]) == [("A.B", TestStatus.NOT_RUN)]

    def test_order_follows_request(self) -> None:
        output = "[ FAILED ] Z.Z\n[ PASSED ] A.A\n"
        names = [name for name, _ in GTestMarkerParser().parse(output, ["Z.Z", "A.A"])]
        assert names == ["Z.Z", "A.A"]
