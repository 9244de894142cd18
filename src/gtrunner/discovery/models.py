#
# src/gtrunner/discovery/models.py
#
"""
Data structures produced by test discovery.
"""
from enum import Enum

from attrs import define, field


class TestKind(Enum):
    """GoogleTest macro a declaration was written with."""

    __test__ = False

    TEST = "TEST"  # Plain test, no fixture.
    TEST_F = "TEST_F"  # Fixture test.
    TEST_P = "TEST_P"  # Parameterized test (template, not an instantiation).


@define(frozen=True, slots=True)
class ScannedTest:
    """A single test declaration found in source text."""

    suite_name: str
    test_name: str
    line: int  # 1-based
    kind: TestKind

    @property
    def full_name(self) -> str:
        """Suite-qualified name as used by --gtest_filter and the result store."""
        return f"{self.suite_name}.{self.test_name}"


@define(frozen=True, slots=True)
class ScannedFile:
    """A source file together with the tests it declares."""

    file_path: str
    tests: tuple[ScannedTest, ...] = field(converter=tuple)


# 🔼⚙️
