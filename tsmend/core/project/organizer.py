"""Import organization for modules touched by a run.

Merges value imports that share a specifier and alphabetizes named
bindings. Bindings are never removed, so organizing cannot break a module
that compiled before; running it twice is a no-op.
"""

import logging
from collections import OrderedDict
from dataclasses import replace
from typing import Dict, List, Tuple

from ..ast_parser.models import ImportDeclaration
from .imports import merge_import_declarations, sort_named_imports
from .source_file import SourceFile

logger = logging.getLogger(__name__)


def _mergeable(decl: ImportDeclaration) -> bool:
    return not (decl.namespace_import or decl.is_side_effect or decl.attributes)


def _merge_once(source_file: SourceFile) -> bool:
    groups: Dict[Tuple[str, bool], List[ImportDeclaration]] = OrderedDict()
    for decl in source_file.get_import_declarations():
        if _mergeable(decl):
            groups.setdefault((decl.module_specifier, decl.is_type_only), []).append(decl)

    for decls in groups.values():
        if len(decls) < 2:
            continue
        defaults = {d.default_import for d in decls if d.default_import}
        if len(defaults) > 1:
            continue

        merged = merge_import_declarations(decls)
        # Later declarations go first so earlier byte offsets stay valid
        for decl in sorted(decls[1:], key=lambda d: d.start_byte, reverse=True):
            source_file.remove_import_declaration(decl)
        source_file.replace_import_declaration(decls[0], merged)
        return True

    return False


def organize_imports(source_file: SourceFile) -> bool:
    """Merge same-specifier imports and sort named bindings.

    Returns:
        True if the module changed
    """
    changed = False

    while _merge_once(source_file):
        changed = True

    for position in range(len(source_file.get_import_declarations())):
        decl = source_file.get_import_declarations()[position]
        ordered = sort_named_imports(decl.named_imports)
        if ordered != decl.named_imports:
            source_file.replace_import_declaration(decl, replace(decl, named_imports=ordered))
            changed = True

    if changed:
        logger.debug(f"Organized imports in {source_file.base_name}")
    return changed
