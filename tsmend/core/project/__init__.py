"""
Project Index Module

Exports:
- ProjectIndex: path-addressable collection of mutable modules
- SourceFile: one module with its lazily parsed import/export structure
- organize_imports: merge and sort imports of a touched module
"""

from .organizer import organize_imports
from .project_index import ProjectIndex, collect_source_files
from .source_file import SourceFile

__all__ = [
    "ProjectIndex",
    "SourceFile",
    "collect_source_files",
    "organize_imports",
]
