"""Diagnostic sources: the tsc subprocess bridge and replayable inputs."""

from .base import DiagnosticsByFile, DiagnosticsProvider, SubprocessBridge
from .tsc_bridge import StaticDiagnostics, TscBridge, TscOutputFile, parse_tsc_output

__all__ = [
    "DiagnosticsByFile",
    "DiagnosticsProvider",
    "StaticDiagnostics",
    "SubprocessBridge",
    "TscBridge",
    "TscOutputFile",
    "parse_tsc_output",
]
