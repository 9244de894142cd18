#
# src/gtrunner/discovery/scanner.py
#
"""
Best-effort textual discovery of GoogleTest declarations.

This is a heuristic layer, not a C++ parser: a declaration is recognised only
when the whole ``MACRO(Suite, Name)`` head sits on one line starting with the
macro name. Multi-line heads, macros produced through preprocessor
indirection and conditional compilation are not resolved. The scanner is
reached through the ``DeclarationScanner`` protocol so a different strategy
(e.g. asking the binary for ``--gtest_list_tests``) can replace it.
"""
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from gtrunner.discovery.models import ScannedFile, ScannedTest, TestKind
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("discovery.scanner")

MAX_SCANNED_FILES = 10000

_LINE_SPLIT = re.compile(r"\r?\n")


def _macro_pattern(macro: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*{macro}\s*\(\s*(\w+)\s*,\s*(\w+)\s*\)")


# Pass order is part of the output contract: TEST, then TEST_F, then TEST_P.
MACRO_PATTERNS: tuple[tuple[TestKind, re.Pattern[str]], ...] = tuple(
    (kind, _macro_pattern(kind.value)) for kind in (TestKind.TEST, TestKind.TEST_F, TestKind.TEST_P)
)


@runtime_checkable
class DeclarationScanner(Protocol):
    """Strategy that extracts test declarations from source text."""

    def scan(self, text: str) -> tuple[ScannedTest, ...]:
        ...


class MacroScanner(DeclarationScanner):
    """Line-by-line regex scan for TEST/TEST_F/TEST_P heads."""

    def scan(self, text: str) -> tuple[ScannedTest, ...]:
        lines = _LINE_SPLIT.split(text)
        tests: list[ScannedTest] = []
        for kind, pattern in MACRO_PATTERNS:
            for index, line in enumerate(lines):
                match = pattern.match(line)
                if match:
                    tests.append(
                        ScannedTest(
                            suite_name=match.group(1),
                            test_name=match.group(2),
                            line=index + 1,
                            kind=kind,
                        )
                    )
        return tuple(tests)


DEFAULT_SCANNER = MacroScanner()


def scan_text(text: str, scanner: DeclarationScanner = DEFAULT_SCANNER) -> tuple[ScannedTest, ...]:
    """Scans in-memory source text (e.g. an unsaved editor buffer)."""
    return scanner.scan(text)


def scan_file(file_path: Path, scanner: DeclarationScanner = DEFAULT_SCANNER) -> tuple[ScannedTest, ...]:
    """Scans one file; unreadable files yield no tests."""
    try:
        content = file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        log.debug("Skipping unreadable file", path=str(file_path), error=str(e))
        return ()
    return scanner.scan(content)


def expand_braces(pattern: str) -> list[str]:
    """
    Expands shell-style brace alternatives in a glob pattern.

    ``"*.{cpp,hpp}"`` becomes ``["*.cpp", "*.hpp"]``. Nested groups are
    expanded outermost first. A brace without a matching close is kept as a
    literal character.
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    parts: list[str] = []
    current = start + 1
    for index in range(start, len(pattern)):
        char = pattern[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                parts.append(pattern[current:index])
                prefix, suffix = pattern[:start], pattern[index + 1 :]
                expanded: list[str] = []
                for part in parts:
                    for tail in expand_braces(part + suffix):
                        expanded.append(prefix + tail)
                return expanded
        elif char == "," and depth == 1:
            parts.append(pattern[current:index])
            current = index + 1

    head, tail = pattern[: start + 1], pattern[start + 1 :]
    return [head + rest for rest in expand_braces(tail)]


def iter_matching_files(scan_dir: Path, include_pattern: str) -> Iterator[Path]:
    """Yields files under scan_dir matching the pattern, in sorted path order."""
    seen: set[Path] = set()
    for pattern in expand_braces(include_pattern):
        for path in scan_dir.glob(pattern):
            if path.is_file():
                seen.add(path.absolute())
    yield from sorted(seen)[:MAX_SCANNED_FILES]


def scan_directory(
    scan_dir: Path,
    include_pattern: str,
    scanner: DeclarationScanner = DEFAULT_SCANNER,
) -> list[ScannedFile]:
    """
    Scans every file under scan_dir that matches include_pattern.

    Args:
        scan_dir: Root directory the glob is resolved from.
        include_pattern: Glob pattern, brace alternatives allowed.
        scanner: Declaration scanning strategy.

    Returns:
        One ScannedFile per file with at least one test, in path order.
    """
    scan_log = log.bind(scan_dir=str(scan_dir), pattern=include_pattern)
    if not scan_dir.is_dir():
        scan_log.warning("Scan directory does not exist")
        return []

    results: list[ScannedFile] = []
    file_count = 0
    for path in iter_matching_files(scan_dir, include_pattern):
        file_count += 1
        tests = scan_file(path, scanner)
        if tests:
            results.append(ScannedFile(file_path=str(path), tests=tests))

    scan_log.info(
        "Scan complete",
        files_matched=file_count,
        files_with_tests=len(results),
        tests=sum(len(f.tests) for f in results),
    )
    return results


# 🔼⚙️
