"""Import declaration rewriting helpers.

All helpers return new ImportDeclaration values; applying them to a file
is done by SourceFile.replace_import_declaration().
"""

from dataclasses import replace
from typing import Iterable, List, Optional

from ..ast_parser.models import ImportDeclaration, NamedImport
from ..constants import DEFAULT_QUOTE


def sort_named_imports(named: Iterable[NamedImport]) -> List[NamedImport]:
    """Alphabetize named bindings and drop duplicate local names."""
    seen = set()
    unique = []
    for binding in named:
        if binding.local_name in seen:
            continue
        seen.add(binding.local_name)
        unique.append(binding)
    return sorted(unique, key=lambda b: (b.name.lower(), b.name, b.local_name))


def with_named_import(decl: ImportDeclaration, name: str, alias: Optional[str] = None) -> ImportDeclaration:
    """Add a named binding, merged alphabetically with the existing ones."""
    binding = NamedImport(name=name, alias=alias if alias and alias != name else None)
    return replace(decl, named_imports=sort_named_imports(list(decl.named_imports) + [binding]))


def default_to_named(decl: ImportDeclaration, name: str) -> ImportDeclaration:
    """Replace the default binding with a named binding of the given export name.

    The local name is kept, so "import Hdr from" becomes
    "import { Header as Hdr } from" when the export is called Header.
    """
    local_name = decl.default_import or name
    stripped = replace(decl, default_import=None)
    return with_named_import(stripped, name, alias=local_name)


def named_to_default(decl: ImportDeclaration, local_name: str) -> Optional[ImportDeclaration]:
    """Replace a named binding with a default binding of the same local name.

    Returns None when the declaration has no such binding or already binds
    a default import.
    """
    if decl.default_import:
        return None
    binding = next((b for b in decl.named_imports if b.local_name == local_name), None)
    if binding is None:
        return None
    remaining = [b for b in decl.named_imports if b is not binding]
    return replace(decl, default_import=binding.local_name, named_imports=remaining)


def merge_import_declarations(decls: List[ImportDeclaration]) -> ImportDeclaration:
    """Merge declarations that share a specifier into the first one."""
    first = decls[0]
    default_import = next((d.default_import for d in decls if d.default_import), None)
    named: List[NamedImport] = []
    for d in decls:
        named.extend(d.named_imports)
    return replace(first, default_import=default_import, named_imports=sort_named_imports(named))


def new_import_declaration(
    module_specifier: str,
    default_import: Optional[str] = None,
    named_imports: Iterable[str] = (),
) -> ImportDeclaration:
    return ImportDeclaration(
        module_specifier=module_specifier,
        default_import=default_import,
        named_imports=sort_named_imports(NamedImport(name=n) for n in named_imports),
        quote=DEFAULT_QUOTE,
        has_semicolon=True,
    )


def _render_named(binding: NamedImport) -> str:
    text = f"type {binding.name}" if binding.is_type else binding.name
    if binding.alias and binding.alias != binding.name:
        text += f" as {binding.alias}"
    return text


def render_import(decl: ImportDeclaration) -> str:
    """Render a declaration back to source text."""
    quote = decl.quote or DEFAULT_QUOTE
    specifier = f"{quote}{decl.module_specifier}{quote}"

    clause = []
    if decl.default_import:
        clause.append(decl.default_import)
    if decl.namespace_import:
        clause.append(f"* as {decl.namespace_import}")
    if decl.named_imports:
        clause.append("{ " + ", ".join(_render_named(b) for b in decl.named_imports) + " }")

    if clause:
        keyword = "import type" if decl.is_type_only else "import"
        text = f"{keyword} {', '.join(clause)} from {specifier}"
    else:
        text = f"import {specifier}"

    if decl.attributes:
        text += f" {decl.attributes}"
    if decl.has_semicolon:
        text += ";"
    return text
