"""Build-Log Mismatch Resolver.

Bundlers report some export mismatches that the compiler pass never sees,
for example webpack's

    Attempted import error: 'Bar' is not exported from '@/components/bar' (imported as 'Bar').

When the defining module only has a default export, every consumer that
imports { Bar } from that module is switched to a default import of Bar.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Set

from ..project.imports import named_to_default
from ..project.project_index import ProjectIndex
from ..project.source_file import SourceFile
from ..stats import RunStats

logger = logging.getLogger(__name__)

NOT_EXPORTED_RE = re.compile(
    r"""['"]?(?P<name>[A-Za-z_$][\w$]*)['"]? is not exported from ['"](?P<specifier>[^'"]+)['"]"""
)


@dataclass(frozen=True)
class ExportMismatch:
    """An "import X is not exported from module Y" report."""
    name: str
    specifier: str


def parse_build_log(text: str) -> List[ExportMismatch]:
    """Extract every export mismatch from build output, de-duplicated in order."""
    seen: Set[ExportMismatch] = set()
    mismatches = []
    for match in NOT_EXPORTED_RE.finditer(text or ""):
        mismatch = ExportMismatch(name=match.group("name"), specifier=match.group("specifier"))
        if mismatch not in seen:
            seen.add(mismatch)
            mismatches.append(mismatch)
    return mismatches


class BuildLogMismatchResolver:
    """Propagates default-import fixes for bundler-reported mismatches."""

    def __init__(self, project: ProjectIndex, stats: Optional[RunStats] = None):
        self.project = project
        self.stats = stats or RunStats()

    def resolve(self, build_log: str) -> Set[str]:
        """Apply fixes for every mismatch found in the log.

        Returns:
            Paths of the consumer modules that were modified
        """
        mismatches = parse_build_log(build_log)
        if not mismatches:
            logger.info("No export mismatches found in build output")
            return set()

        logger.info(f"  - [Pass 4] Resolving {len(mismatches)} export mismatches from build output...")
        touched: Set[str] = set()
        for mismatch in mismatches:
            try:
                touched |= self.resolve_mismatch(mismatch)
            except Exception as e:
                logger.warning(f"Warning: Failed to resolve '{mismatch.name}' from '{mismatch.specifier}': {e}")
        return touched

    def resolve_mismatch(self, mismatch: ExportMismatch) -> Set[str]:
        defining = self.project.locate_module(mismatch.specifier)
        if defining is None:
            logger.debug(f"Could not locate module for '{mismatch.specifier}'")
            return set()

        if defining.get_default_export() is None or mismatch.name in defining.get_named_exports():
            logger.debug(f"{defining.base_name} does not match the default-only shape for '{mismatch.name}'")
            return set()

        touched: Set[str] = set()
        for consumer in self.project.get_source_files():
            if consumer is defining:
                continue
            rewritten = self._rewrite_consumer(consumer, defining, mismatch)
            if rewritten:
                touched.add(consumer.file_path)
                self.stats.imports_fixed += rewritten
                logger.info(
                    f"    - {consumer.base_name}: '{mismatch.name}' from '{mismatch.specifier}' → default import"
                )
        return touched

    def _rewrite_consumer(self, consumer: SourceFile, defining: SourceFile, mismatch: ExportMismatch) -> int:
        def _is_match(decl) -> bool:
            if decl.default_import or not any(b.local_name == mismatch.name for b in decl.named_imports):
                return False
            if decl.module_specifier == mismatch.specifier:
                return True
            return self.project.resolve_specifier(consumer.file_path, decl.module_specifier) is defining

        rewritten = 0
        decl = consumer.get_import_declaration(_is_match)
        while decl is not None:
            new_decl = named_to_default(decl, mismatch.name)
            if new_decl is None:
                break
            consumer.replace_import_declaration(decl, new_decl)
            rewritten += 1
            decl = consumer.get_import_declaration(_is_match)
        return rewritten
