# src/gtrunner/exceptions.py

"""
Custom exceptions for gtrunner.
"""


class GtrunnerError(Exception):
    """Base class for all gtrunner errors."""

    pass


class ConfigurationError(GtrunnerError):
    """Raised when the configuration file is missing values or malformed."""

    pass


class BuildServiceError(GtrunnerError):
    """Raised when the build service fails to configure or build a project."""

    def __init__(
        self,
        message: str,
        project_root: str | None = None,
        details: Exception | None = None,
    ):
        self.project_root = project_root
        self.details = details
        full_message = f"[BuildService] {message}"
        if project_root:
            full_message += f" (Project: '{project_root}')"
        super().__init__(full_message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class ProjectUnavailableError(BuildServiceError):
    """No build project could be resolved for the requested root."""

    pass


class ArtifactNotFoundError(BuildServiceError):
    """The target exists but has no built binary in the code model."""

    def __init__(self, target: str, project_root: str | None = None):
        self.target = target
        super().__init__(f"Executable not found for target: {target}", project_root)


class ProcessLaunchError(GtrunnerError):
    """Raised when a child process (test binary, debugger, cmake) cannot be started."""

    pass


# 🔼⚙️
