"""
Dataset format writers.

This package contains format-specific writers for exporting imported
databases:
- pts: iBUG format (.pts files next to images, plus a rectangle file)
"""

from .pts import write_pts_file, export_database

__all__ = [
    'write_pts_file',
    'export_database',
]
