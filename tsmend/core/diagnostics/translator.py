"""Diagnostic Fix Translator.

Consumes compiler diagnostics per module and applies at most one import
repair per diagnostic, using the run's Export Surface:

- DefaultImportOnNamedExport: default import → named import
- NamedImportOnDefaultExport: named import → default import
- UnresolvedIdentifier: add an import from the special-case table or the
  Export Surface
- UnresolvableModulePath: collapse "@/../x" into "@/x"

The pass is purely corrective: it only adds or rewrites import
declarations and never removes modules or other statements.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from ..ast_parser.models import ImportDeclaration
from ..config.config_loader import FixerSettings, SpecialImport
from ..exports.surface import ExportSurface
from ..project.imports import default_to_named, named_to_default
from ..project.project_index import ProjectIndex
from ..project.source_file import SourceFile
from ..project.specifiers import collapse_alias_traversal, specifiers_match_by_path
from ..stats import RunStats
from .classifier import classify
from .models import (
    DefaultImportOnNamedExport,
    Diagnostic,
    DiagnosticFix,
    FixAction,
    NamedImportOnDefaultExport,
    UnresolvableModulePath,
    UnresolvedIdentifier,
)

logger = logging.getLogger(__name__)


class DiagnosticFixTranslator:
    """Routes each classified diagnostic to exactly one fix strategy."""

    def __init__(
        self,
        project: ProjectIndex,
        surface: ExportSurface,
        stats: Optional[RunStats] = None,
        special_imports: Optional[Mapping[str, SpecialImport]] = None,
        max_diagnostics_per_file: Optional[int] = None,
    ):
        self.project = project
        self.surface = surface
        self.stats = stats or RunStats()
        if special_imports is None:
            special_imports = FixerSettings().special_imports
        self.special_imports = dict(special_imports)
        self.max_diagnostics_per_file = max_diagnostics_per_file
        self.actions: List[FixAction] = []

        self._handlers: Dict[type, Callable[[SourceFile, DiagnosticFix], Optional[str]]] = {
            DefaultImportOnNamedExport: self._fix_default_import,
            NamedImportOnDefaultExport: self._fix_named_import,
            UnresolvedIdentifier: self._fix_unresolved_identifier,
            UnresolvableModulePath: self._fix_module_path,
        }

    def fix_source_file(self, source_file: SourceFile, diagnostics: Sequence[Diagnostic]) -> List[FixAction]:
        """Apply fixes for one module's diagnostics.

        Returns:
            The actions applied to this module
        """
        if not diagnostics:
            return []

        logger.info(f"  - [Pass 3] Fixing imports in {source_file.base_name}...")
        if self.max_diagnostics_per_file is not None:
            diagnostics = diagnostics[: self.max_diagnostics_per_file]

        applied = []
        for diagnostic in diagnostics:
            fix = classify(diagnostic)
            if fix is None:
                continue
            try:
                description = self._handlers[type(fix)](source_file, fix)
            except Exception as e:
                logger.warning(f"Warning: Failed to process diagnostic TS{diagnostic.code}: {e}")
                continue

            if description:
                action = FixAction(code=diagnostic.code, file_path=source_file.file_path, description=description)
                applied.append(action)
                self.actions.append(action)
                self.stats.diagnostics_resolved += 1
                self.stats.imports_fixed += 1
                logger.info(f"    - TS{diagnostic.code}: {description}")

        return applied

    # ── Lookup helpers ───────────────────────────────────────────────────

    def _find_import(
        self,
        source_file: SourceFile,
        specifier: str,
        predicate: Callable[[ImportDeclaration], bool],
    ) -> Optional[ImportDeclaration]:
        """Find an import by literal specifier, falling back to a path match."""
        exact = source_file.get_import_declaration(
            lambda d: d.module_specifier == specifier and predicate(d)
        )
        if exact is not None:
            return exact
        return source_file.get_import_declaration(
            lambda d: specifiers_match_by_path(d.module_specifier, specifier, self.project.alias_prefix)
            and predicate(d)
        )

    # ── Fix strategies ───────────────────────────────────────────────────

    def _fix_default_import(self, source_file: SourceFile, fix: DefaultImportOnNamedExport) -> Optional[str]:
        decl = self._find_import(source_file, fix.specifier, lambda d: d.default_import is not None)
        if decl is None:
            return None
        if decl.namespace_import:
            # "* as ns" cannot share a clause with named bindings
            namespace_only = replace(decl, default_import=None)
            named = default_to_named(replace(decl, namespace_import=None), fix.name)
            source_file.replace_import_declaration(decl, namespace_only, named)
        else:
            source_file.replace_import_declaration(decl, default_to_named(decl, fix.name))
        return f"default import of '{fix.name}' from '{decl.module_specifier}' → named import"

    def _fix_named_import(self, source_file: SourceFile, fix: NamedImportOnDefaultExport) -> Optional[str]:
        decl = self._find_import(
            source_file,
            fix.specifier,
            lambda d: any(b.local_name == fix.name for b in d.named_imports),
        )
        if decl is None:
            return None

        # Diagnostics may predate named-export normalization in this run
        target = self.project.resolve_specifier(source_file.file_path, decl.module_specifier)
        if target is not None and (
            target.get_default_export() is None or fix.name in target.get_named_exports()
        ):
            return None

        new_decl = named_to_default(decl, fix.name)
        if new_decl is None:
            return None
        source_file.replace_import_declaration(decl, new_decl)
        return f"named import of '{fix.name}' from '{decl.module_specifier}' → default import"

    def _fix_unresolved_identifier(self, source_file: SourceFile, fix: UnresolvedIdentifier) -> Optional[str]:
        name = fix.name
        if name in source_file.imported_names():
            return None

        special = self.special_imports.get(name)
        if special is not None:
            return self._add_import(source_file, name, special.specifier, special.is_default)

        entry = self.surface.get(name)
        if entry is None:
            logger.debug(f"No export found for '{name}'")
            return None
        if entry.module_path == source_file.module_specifier:
            return None
        return self._add_import(source_file, name, entry.module_path, entry.is_default)

    def _add_import(self, source_file: SourceFile, name: str, specifier: str, is_default: bool) -> str:
        if is_default:
            source_file.add_import_declaration(specifier, default_import=name)
            return f"added default import of '{name}' from '{specifier}'"
        source_file.add_import_declaration(specifier, named_imports=[name])
        return f"added named import of '{name}' from '{specifier}'"

    def _fix_module_path(self, source_file: SourceFile, fix: UnresolvableModulePath) -> Optional[str]:
        collapsed = collapse_alias_traversal(fix.specifier, self.project.alias_prefix)
        if collapsed is None:
            return None

        rewritten = 0
        decl = source_file.get_import_declaration(lambda d: d.module_specifier == fix.specifier)
        while decl is not None:
            source_file.replace_import_declaration(decl, _with_specifier(decl, collapsed))
            rewritten += 1
            decl = source_file.get_import_declaration(lambda d: d.module_specifier == fix.specifier)

        if not rewritten:
            return None
        return f"module path '{fix.specifier}' → '{collapsed}'"


def _with_specifier(decl: ImportDeclaration, specifier: str) -> ImportDeclaration:
    return replace(decl, module_specifier=specifier)


def fix_diagnostics(
    translator: DiagnosticFixTranslator,
    source_files: Iterable[SourceFile],
    diagnostics_by_file: Mapping[str, Sequence[Diagnostic]],
) -> List[SourceFile]:
    """Run the translator over several modules; returns the modules it changed."""
    changed = []
    for source_file in source_files:
        diagnostics = diagnostics_by_file.get(source_file.file_path, [])
        try:
            if translator.fix_source_file(source_file, diagnostics):
                changed.append(source_file)
        except Exception as e:
            logger.warning(f"Warning: Failed to process {source_file.base_name}: {e}")
    return changed
