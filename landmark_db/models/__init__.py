"""
Data models for the landmark database importer.

This package contains dataclasses for imported samples and the
collections they are accumulated into.
"""

from .entry import Entry, Database, append_entry

__all__ = [
    "Entry",
    "Database",
    "append_entry",
]
