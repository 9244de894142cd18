#
# src/gtrunner/telemetry/__init__.py
#
"""
Logging setup and shared logger type for gtrunner.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]
