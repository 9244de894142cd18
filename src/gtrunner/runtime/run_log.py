#
# src/gtrunner/runtime/run_log.py
#
"""
Human-readable scrollback of test runs.
"""
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog
from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.run_log")


HEADER_PATTERN = re.compile(r"^========== \[(?P<stamp>[^\]]+)\] (?P<executable>\S+) :: (?P<names>.*) ==========$")


def run_header(executable: str, full_names: list[str], when: datetime | None = None) -> str:
    stamp = (when or datetime.now(UTC)).isoformat(timespec="seconds")
    return f"========== [{stamp}] {executable} :: {', '.join(full_names)} =========="


def read_last_block(path: Path, full_name: str, executable: str | None = None) -> tuple[str, str] | None:
    """
    Finds the most recent block in a run log file that covers ``full_name``.

    Returns:
        ``(header, output)`` or None when the file is missing or no block matches.
    """
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return None
    except OSError as e:
        log.warning("Run log unreadable", path=str(path), error=str(e))
        return None

    found: tuple[str, str] | None = None
    header: str | None = None
    body: list[str] = []

    def close_block() -> None:
        nonlocal found
        if header is None:
            return
        match = HEADER_PATTERN.match(header)
        names = match.group("names").split(", ")
        if full_name in names and (executable is None or match.group("executable") == executable):
            found = (header, "\n".join(body).strip("\n"))

    for line in lines:
        if HEADER_PATTERN.match(line):
            close_block()
            header, body = line, []
        elif header is not None:
            body.append(line)
    close_block()
    return found


@runtime_checkable
class RunLog(Protocol):
    """Sink that receives one block per run; blocks accumulate."""

    def append_run(self, executable: str, full_names: list[str], output: str) -> None:
        ...


class FileRunLog(RunLog):
    """
    Appends each run to a log file and optionally echoes it to a console.
    """

    def __init__(self, path: Path | None, console: Console | None = None) -> None:
        self.path = path
        self.console = console

    def append_run(self, executable: str, full_names: list[str], output: str) -> None:
        header = run_header(executable, full_names)
        body = output if output.endswith("\n") else output + "\n"

        if self.path is not None:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as f:
                    f.write(f"\n{header}\n{body}")
            except OSError as e:
                log.error("Failed to append to run log", path=str(self.path), error=str(e))

        if self.console is not None:
            self.console.print(Rule(Text(header.strip("= "))))
            self.console.print(body, end="", markup=False, highlight=False)


# 🔼⚙️
