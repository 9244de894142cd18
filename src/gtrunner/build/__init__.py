#
# src/gtrunner/build/__init__.py
#
"""
Build service contracts, code model mapping and incremental build tracking.
"""
from .cmake import CMakeFileApiService, CMakeProject
from .codemodel import CodeModel, CodeModelUnavailable, parse_code_model
from .mapper import (
    executable_to_sources,
    get_artifact_path,
    get_executable_for_file,
    normalize_path,
    source_to_executable,
)
from .protocols import BuildService, Project
from .staleness import StalenessTracker
from .storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "BuildService",
    "CMakeFileApiService",
    "CMakeProject",
    "CodeModel",
    "CodeModelUnavailable",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "Project",
    "StalenessTracker",
    "executable_to_sources",
    "get_artifact_path",
    "get_executable_for_file",
    "normalize_path",
    "parse_code_model",
    "source_to_executable",
]

# 🔼⚙️
