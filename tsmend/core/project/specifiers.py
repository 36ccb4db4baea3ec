"""Module specifier computation and string-level specifier heuristics.

A module specifier is the canonical alias form other modules use to import
a file: its path relative to the source root, extension stripped, "/index"
collapsed, behind the alias prefix (src/components/ui/index.tsx ->
"@/components/ui").
"""

import os
import re
from typing import Optional

_EXTENSION_RE = re.compile(r"\.(d\.)?(ts|tsx|mts|cts|js|jsx|mjs|cjs)$")


def module_specifier_for(file_path: str, source_root: str, alias_prefix: str = "@/") -> Optional[str]:
    """Compute the alias specifier of a file, or None outside the source root."""
    rel_path = os.path.relpath(os.path.abspath(file_path), os.path.abspath(source_root))
    rel_path = rel_path.replace("\\", "/")
    if rel_path == ".." or rel_path.startswith("../"):
        return None

    rel_path = _EXTENSION_RE.sub("", rel_path)
    if rel_path.endswith("/index"):
        rel_path = rel_path[: -len("/index")]
    return f"{alias_prefix}{rel_path}"


def collapse_alias_traversal(specifier: str, alias_prefix: str = "@/") -> Optional[str]:
    """Collapse an up-level traversal directly after the alias prefix.

    "@/../lib/utils" -> "@/lib/utils". Returns None when the specifier does
    not have that malformed shape.
    """
    pattern = re.compile("^" + re.escape(alias_prefix) + r"(?:\.\./)+")
    if not pattern.match(specifier):
        return None
    collapsed = pattern.sub(alias_prefix, specifier, count=1)
    if collapsed == alias_prefix:
        return None
    return collapsed


def specifier_tail(specifier: str, alias_prefix: str = "@/") -> str:
    """Strip the alias prefix and leading relative segments from a specifier."""
    tail = specifier
    if tail.startswith(alias_prefix):
        tail = tail[len(alias_prefix):]
    while tail.startswith("./") or tail.startswith("../"):
        tail = tail[tail.index("/") + 1:]
    return tail.rstrip("/")


def specifiers_match_by_path(a: str, b: str, alias_prefix: str = "@/") -> bool:
    """Path-substring match between two specifiers that may be written differently.

    "@/components/header" matches "../components/header" and "./header",
    but not "@/components/header-nav".
    """
    tail_a = specifier_tail(a, alias_prefix)
    tail_b = specifier_tail(b, alias_prefix)
    if not tail_a or not tail_b:
        return False
    return tail_a == tail_b or tail_a.endswith("/" + tail_b) or tail_b.endswith("/" + tail_a)
