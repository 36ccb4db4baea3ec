"""Named-Export Normalizer.

Converts allow-listed modules from "export default Foo" to a named export
of Foo and repairs every import site that default-imported it:

    // before                          // after
    function Foo() {}                  export function Foo() {}
    export default Foo;

    import Foo from "@/foo";           import { Foo } from "@/foo";

Only the bare-identifier form is converted, and only when Foo is a
top-level function, class or variable of the module. Import sites are
rewritten only when their specifier resolves to the converted module and
their default binding is literally named Foo.
"""

import logging
from typing import Iterable, Optional, Set

from ..project.imports import default_to_named
from ..project.project_index import ProjectIndex
from ..project.source_file import SourceFile
from ..stats import RunStats

logger = logging.getLogger(__name__)


class NamedExportNormalizer:
    """Rewrites default exports of allow-listed modules into named exports."""

    def __init__(self, project: ProjectIndex, stats: Optional[RunStats] = None):
        self.project = project
        self.stats = stats or RunStats()

    def normalize(self, allow_list: Iterable[str]) -> Set[str]:
        """Normalize every allow-listed module.

        Args:
            allow_list: Module paths, absolute or relative to the project root

        Returns:
            Paths of every module that was modified
        """
        touched: Set[str] = set()
        for module_path in allow_list:
            source_file = self.project.get_source_file(module_path)
            if source_file is None:
                logger.warning(f"Allow-listed module not in project: {module_path}")
                continue
            try:
                touched |= self.normalize_module(source_file)
            except Exception as e:
                logger.warning(f"Warning: Failed to normalize exports of {source_file.base_name}: {e}")
        return touched

    def normalize_module(self, source_file: SourceFile) -> Set[str]:
        """Convert one module. Returns modified paths (empty when left untouched)."""
        default_export = source_file.get_default_export()
        if default_export is None or default_export.kind != "identifier":
            logger.debug(f"{source_file.base_name}: no 'export default <identifier>', skipping")
            return set()

        name = default_export.local_name
        if source_file.find_declaration(name) is None:
            logger.debug(f"{source_file.base_name}: '{name}' is not declared locally, skipping")
            return set()

        touched: Set[str] = set()
        for importer in self.project.get_source_files():
            if importer is source_file:
                continue
            rewritten = self._rewrite_default_imports(importer, source_file, name)
            if rewritten:
                touched.add(importer.file_path)
                self.stats.imports_fixed += rewritten

        source_file.mark_declaration_exported(name)
        source_file.remove_default_export()
        touched.add(source_file.file_path)
        self.stats.exports_refactored += 1

        logger.info(f"  - Converted default export '{name}' of {source_file.base_name} to a named export")
        return touched

    def _rewrite_default_imports(self, importer: SourceFile, target: SourceFile, name: str) -> int:
        def _is_match(decl) -> bool:
            if decl.default_import != name:
                return False
            resolved = self.project.resolve_specifier(importer.file_path, decl.module_specifier)
            return resolved is target

        rewritten = 0
        decl = importer.get_import_declaration(_is_match)
        while decl is not None:
            importer.replace_import_declaration(decl, default_to_named(decl, name))
            rewritten += 1
            decl = importer.get_import_declaration(_is_match)
        return rewritten
