"""
Input/Output operations for the landmark database importer.

This package handles annotation file discovery and the rectangle file
format.
"""

from .files import find_files_in_dir
from .rectangles import import_rectangles, export_rectangles

__all__ = [
    "find_files_in_dir",
    "import_rectangles",
    "export_rectangles",
]
