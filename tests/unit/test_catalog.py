#
# tests/unit/test_catalog.py
#
"""
Tests for grouping discovered tests by executable and suite.
"""

import pytest

from gtrunner.build.codemodel import CodeModelUnavailable, parse_code_model
from gtrunner.discovery.catalog import TestCatalog, build_catalog
from gtrunner.discovery.models import ScannedFile, ScannedTest, TestKind
from tests.conftest import exe_target, raw_code_model

MODEL = parse_code_model(
    raw_code_model(
        [
            exe_target("math_tests", ["/p/math_test.cpp", "/p/more_math_test.cpp"]),
            exe_target("io_tests", ["/p/io_test.cpp"]),
        ]
    )
)


def scanned(path: str, *names: str) -> ScannedFile:
    tests = []
    for line, name in enumerate(names, start=1):
        suite, test = name.split(".")
        tests.append(ScannedTest(suite_name=suite, test_name=test, line=line, kind=TestKind.TEST))
    return ScannedFile(file_path=path, tests=tests)


@pytest.fixture
def catalog() -> TestCatalog:
    return build_catalog(
        [
            scanned("/p/math_test.cpp", "Math.Adds", "Math.Subtracts", "Fixture.Divides"),
            scanned("/p/more_math_test.cpp", "Math.Multiplies"),
            scanned("/p/io_test.cpp", "Io.Reads", "Math.Adds"),
            scanned("/p/orphan_test.cpp", "Orphan.Lost"),
        ],
        MODEL,
    )


def test_tests_grouped_by_executable_and_suite(catalog: TestCatalog) -> None:
    assert list(catalog.executables) == ["math_tests", "io_tests"]
    assert list(catalog.executables["math_tests"]) == ["Math", "Fixture"]
    math_suite = catalog.executables["math_tests"]["Math"]
    assert [(t.full_name, t.file_path) for t in math_suite] == [
        ("Math.Adds", "/p/math_test.cpp"),
        ("Math.Subtracts", "/p/math_test.cpp"),
        ("Math.Multiplies", "/p/more_math_test.cpp"),
    ]


def test_unmapped_files_are_excluded(catalog: TestCatalog) -> None:
    assert catalog.unmapped_files == ["/p/orphan_test.cpp"]
    assert catalog.test_count() == 6


def test_full_names(catalog: TestCatalog) -> None:
    assert catalog.full_names("math_tests") == ["Math.Adds", "Math.Subtracts", "Math.Multiplies", "Fixture.Divides"]
    assert catalog.full_names("math_tests", "Fixture") == ["Fixture.Divides"]
    assert catalog.full_names("unknown") == []


def test_unavailable_model_gives_empty_catalog() -> None:
    catalog = build_catalog([scanned("/p/math_test.cpp", "Math.Adds")], CodeModelUnavailable("none"))
    assert catalog.executables == {}
    assert catalog.unmapped_files == ["/p/math_test.cpp"]


@pytest.mark.parametrize(
    ("selectors", "expected"),
    [
        (
            [],
            {
                "math_tests": ["Math.Adds", "Math.Subtracts", "Math.Multiplies", "Fixture.Divides"],
                "io_tests": ["Io.Reads", "Math.Adds"],
            },
        ),
        (["io_tests"], {"io_tests": ["Io.Reads", "Math.Adds"]}),
        (["math_tests/Fixture"], {"math_tests": ["Fixture.Divides"]}),
        (["io_tests/Math.Adds"], {"io_tests": ["Math.Adds"]}),
        (["Math.Adds"], {"math_tests": ["Math.Adds"], "io_tests": ["Math.Adds"]}),
        (["Io"], {"io_tests": ["Io.Reads"]}),
        (["Fixture.Divides", "math_tests/Math.Adds"], {"math_tests": ["Fixture.Divides", "Math.Adds"]}),
        (["Nope.Nothing"], {}),
    ],
)
def test_select(catalog: TestCatalog, selectors: list[str], expected: dict[str, list[str]]) -> None:
    assert catalog.select(selectors) == expected
