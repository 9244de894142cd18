#
# src/gtrunner/runtime/__init__.py
#
"""
Runtime sub-package: preparing targets, running tests and composing debug sessions.
"""
from .debug import DebugComposer, DebugService, find_matching_launch_config
from .debuggers import GdbDebugService, JsonDebugService
from .orchestrator import ExecutionOrchestrator, RunSummary
from .outcome import GTestMarkerParser, OutcomeParser, build_filter, compose_run_filter
from .preparation import PreparedTarget, TargetPreparer
from .run_log import FileRunLog, RunLog
from .workspace import Workspace

__all__ = [
    "DebugComposer",
    "DebugService",
    "ExecutionOrchestrator",
    "FileRunLog",
    "GTestMarkerParser",
    "GdbDebugService",
    "JsonDebugService",
    "OutcomeParser",
    "PreparedTarget",
    "RunLog",
    "RunSummary",
    "TargetPreparer",
    "Workspace",
    "build_filter",
    "compose_run_filter",
    "find_matching_launch_config",
]

# 🔼⚙️
