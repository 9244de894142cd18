#
# config/__init__.py
#
"""
Configuration handling sub-package for gtrunner.

Exports the loading function and core configuration models.
"""

from .loader import DEFAULT_CONFIG_NAME, load_config
from .models import (
    DEFAULT_SCAN_PATTERN,
    GlobalConfig,
    GtrunnerConfig,
    RunnerConfig,
    resolve_path,
)

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_SCAN_PATTERN",
    "GlobalConfig",
    "GtrunnerConfig",
    "RunnerConfig",
    "load_config",
    "resolve_path",
]

# 🔼⚙️
