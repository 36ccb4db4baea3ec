"""Diagnostic-driven repair: classification, sources, and the fix translator."""

from .bridges import DiagnosticsProvider, StaticDiagnostics, TscBridge, TscOutputFile, parse_tsc_output
from .classifier import classify
from .models import (
    DefaultImportOnNamedExport,
    Diagnostic,
    FixAction,
    NamedImportOnDefaultExport,
    UnresolvableModulePath,
    UnresolvedIdentifier,
)
from .translator import DiagnosticFixTranslator, fix_diagnostics

__all__ = [
    "DefaultImportOnNamedExport",
    "Diagnostic",
    "DiagnosticFixTranslator",
    "DiagnosticsProvider",
    "FixAction",
    "NamedImportOnDefaultExport",
    "StaticDiagnostics",
    "TscBridge",
    "TscOutputFile",
    "UnresolvableModulePath",
    "UnresolvedIdentifier",
    "classify",
    "fix_diagnostics",
    "parse_tsc_output",
]
