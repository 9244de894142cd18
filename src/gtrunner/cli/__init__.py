# src/gtrunner/cli/__init__.py

"""
Command-line interface for gtrunner.
"""

# 🔼⚙️
