"""Build-Log Mismatch Resolver."""

from .resolver import BuildLogMismatchResolver, ExportMismatch, parse_build_log

__all__ = [
    "BuildLogMismatchResolver",
    "ExportMismatch",
    "parse_build_log",
]
