#
# src/gtrunner/__init__.py
#
"""
gtrunner: discover, build, run and debug GoogleTest tests in CMake projects.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gtrunner")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

# 🔼⚙️
