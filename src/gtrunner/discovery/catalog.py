#
# src/gtrunner/discovery/catalog.py
#
"""
Groups discovered tests by executable target and suite.
"""
from collections.abc import Iterable

import structlog
from attrs import define, field

from gtrunner.build.codemodel import CodeModelResult
from gtrunner.build.mapper import normalize_path, source_to_executable
from gtrunner.discovery.models import ScannedFile, ScannedTest
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("discovery.catalog")

SELECTOR_SEPARATOR = "/"


@define(frozen=True, slots=True)
class CatalogTest:
    """A scanned test and the file it was found in."""

    test: ScannedTest
    file_path: str

    @property
    def full_name(self) -> str:
        return self.test.full_name


@define(slots=True)
class TestCatalog:
    """
    Executable -> suite -> tests, in discovery order.

    Suites are merged by name across files. Files that no executable target
    compiles are not part of the catalog.
    """

    __test__ = False

    executables: dict[str, dict[str, list[CatalogTest]]] = field(factory=dict)
    unmapped_files: list[str] = field(factory=list)

    def add(self, executable: str, scanned: ScannedFile) -> None:
        suites = self.executables.setdefault(executable, {})
        for test in scanned.tests:
            suites.setdefault(test.suite_name, []).append(CatalogTest(test=test, file_path=scanned.file_path))

    def full_names(self, executable: str, suite: str | None = None) -> list[str]:
        """All full names under an executable, or under one of its suites."""
        suites = self.executables.get(executable, {})
        if suite is not None:
            return _unique(t.full_name for t in suites.get(suite, []))
        return _unique(t.full_name for tests in suites.values() for t in tests)

    def test_count(self) -> int:
        return sum(len(tests) for suites in self.executables.values() for tests in suites.values())

    def select(self, selectors: list[str]) -> dict[str, list[str]]:
        """
        Resolves CLI selectors into executable -> full names.

        Accepted forms: ``EXE``, ``EXE/Suite``, ``EXE/Suite.Test``, and
        without an executable ``Suite`` or ``Suite.Test`` (matched in every
        executable). No selectors selects everything.
        """
        if not selectors:
            return {exe: self.full_names(exe) for exe in self.executables}

        selected: dict[str, list[str]] = {}

        def take(executable: str, names: Iterable[str]) -> None:
            bucket = selected.setdefault(executable, [])
            for name in names:
                if name not in bucket:
                    bucket.append(name)

        for selector in selectors:
            exe_part, sep, rest = selector.partition(SELECTOR_SEPARATOR)
            if sep and exe_part in self.executables:
                candidates = [exe_part]
                pattern = rest
            elif not sep and selector in self.executables:
                take(selector, self.full_names(selector))
                continue
            else:
                candidates = list(self.executables)
                pattern = selector

            for executable in candidates:
                if "." in pattern:
                    names = [n for n in self.full_names(executable) if n == pattern]
                else:
                    names = self.full_names(executable, pattern)
                if names:
                    take(executable, names)

        return {exe: names for exe, names in selected.items() if names}


def _unique(names: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(names))


def build_catalog(scanned_files: list[ScannedFile], model: CodeModelResult) -> TestCatalog:
    """Attaches each scanned file to the executable that compiles it."""
    file_to_exec = source_to_executable(model)
    catalog = TestCatalog()
    for scanned in scanned_files:
        executable = file_to_exec.get(normalize_path(scanned.file_path))
        if executable is None:
            catalog.unmapped_files.append(scanned.file_path)
            continue
        catalog.add(executable, scanned)

    if catalog.unmapped_files:
        log.info("Files with tests not compiled by any executable", count=len(catalog.unmapped_files))
    log.debug(
        "Catalog built",
        executables=len(catalog.executables),
        tests=catalog.test_count(),
    )
    return catalog


# 🔼⚙️
