#
# src/gtrunner/build/protocols.py
#
"""
Defines the contracts gtrunner consumes from a build service.
"""
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Project(Protocol):
    """
    A configured build project, as exposed by the build service.
    """

    @property
    def code_model(self) -> Any:
        """
        Raw code model (``{"configurations": [...]}``) or None.

        Validated by ``gtrunner.build.codemodel.parse_code_model``; callers
        should re-read it after every configure.
        """
        ...

    async def configure(self) -> None:
        """Runs the configure step. Raises BuildServiceError on failure."""
        ...

    async def build(self, targets: list[str]) -> None:
        """Builds the named targets. Raises BuildServiceError on failure."""
        ...

    async def get_build_directory(self) -> str | None:
        ...


@runtime_checkable
class BuildService(Protocol):
    """
    Protocol for a build service that resolves projects by root path.
    """

    async def get_project(self, root: Path) -> Project | None:
        """
        Returns the project rooted at ``root``, or None when there is none.
        """
        ...


# 🔼⚙️
