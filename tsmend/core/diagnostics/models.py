"""Data contracts for diagnostic-driven repair.

Diagnostics are consumed, never produced, by tsmend. Each recognized
diagnostic class is translated into exactly one fix variant carrying the
fields extracted from its message.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class Diagnostic:
    """A compiler-reported problem attached to a module."""
    code: int
    message: str
    file_path: Optional[str] = None
    line: int = 0
    column: int = 0
    category: str = "error"


@dataclass(frozen=True)
class DefaultImportOnNamedExport:
    """Default import of a module that only has named exports (TS2613)."""
    name: str
    specifier: str


@dataclass(frozen=True)
class NamedImportOnDefaultExport:
    """Named import of a binding the module only exports as default (TS2614)."""
    name: str
    specifier: str


@dataclass(frozen=True)
class UnresolvedIdentifier:
    """An identifier used without being declared or imported (TS2304, TS2552)."""
    name: str


@dataclass(frozen=True)
class UnresolvableModulePath:
    """An import specifier the compiler cannot resolve (TS2307)."""
    specifier: str


DiagnosticFix = Union[
    DefaultImportOnNamedExport,
    NamedImportOnDefaultExport,
    UnresolvedIdentifier,
    UnresolvableModulePath,
]


@dataclass
class FixAction:
    """A mutation that was applied, kept for reporting."""
    code: int
    file_path: str
    description: str
