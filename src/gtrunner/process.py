#
# src/gtrunner/process.py
#
"""
Process execution contract and the asyncio.subprocess implementation.
"""
import asyncio
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog
from attrs import define

from gtrunner.exceptions import ProcessLaunchError
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("process")


@define(frozen=True, slots=True)
class ProcessResult:
    """
    Captured outcome of a finished child process.
    """
    exit_code: int
    stdout: str
    stderr: str

    @property
    def combined_output(self) -> str:
        return f"{self.stdout}\n{self.stderr}"


@runtime_checkable
class ProcessRunner(Protocol):
    """
    Protocol for spawning a program and collecting its output.
    """
    async def run(
        self,
        executable: str,
        args: list[str],
        env: Mapping[str, str] | None,
        cwd: Path,
    ) -> ProcessResult:
        """
        Runs the program to completion.

        Args:
            executable: Path of the program to start.
            args: Arguments, not including the program itself.
            env: Variables overlaid on the current process environment.
            cwd: Working directory of the child.

        Returns:
            A ProcessResult. A non-zero exit is not an error.

        Raises:
            ProcessLaunchError: The program could not be started at all.
        """
        ...


def merged_environment(overlay: Mapping[str, str] | None) -> dict[str, str]:
    env = dict(os.environ)
    if overlay:
        env.update(overlay)
    return env


class SubprocessProcessRunner(ProcessRunner):
    """
    Implements the ProcessRunner protocol with asyncio.create_subprocess_exec.
    """
    async def run(
        self,
        executable: str,
        args: list[str],
        env: Mapping[str, str] | None,
        cwd: Path,
    ) -> ProcessResult:
        runner_log = log.bind(
            executable=executable,
            args=" ".join(args),
            working_dir=str(cwd),
        )
        runner_log.info("Starting process")

        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=merged_environment(env),
            )
        except OSError as e:
            runner_log.error("Process could not be started", error=str(e))
            raise ProcessLaunchError(f"Cannot start '{executable}': {e}") from e

        # Drains both pipes concurrently until the child exits.
        stdout_bytes, stderr_bytes = await process.communicate()

        exit_code = process.returncode if process.returncode is not None else -1
        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")

        runner_log.info("Process finished", exit_code=exit_code)
        runner_log.debug(
            "Process output",
            stdout_len=len(stdout),
            stderr_len=len(stderr),
        )

        return ProcessResult(exit_code=exit_code, stdout=stdout, stderr=stderr)

# 🔼⚙️
