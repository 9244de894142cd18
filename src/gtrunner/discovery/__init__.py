#
# src/gtrunner/discovery/__init__.py
#
"""
Test discovery sub-package for gtrunner.
"""
from .catalog import CatalogTest, TestCatalog, build_catalog
from .models import ScannedFile, ScannedTest, TestKind
from .scanner import DeclarationScanner, MacroScanner, scan_directory, scan_file, scan_text

__all__ = [
    "CatalogTest",
    "DeclarationScanner",
    "MacroScanner",
    "ScannedFile",
    "ScannedTest",
    "TestCatalog",
    "TestKind",
    "build_catalog",
    "scan_directory",
    "scan_file",
    "scan_text",
]

# 🔼⚙️
