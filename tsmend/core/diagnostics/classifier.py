"""Diagnostic classification: message text → structured fix variant.

All text-pattern extraction for diagnostic messages lives here. Every
parser returns an optional structured result so the matching logic can be
tested without touching any module. A message that does not match its
class's pattern yields None; no fallback specifier is ever guessed.
"""

import re
from typing import Callable, Dict, Optional

from ..constants import (
    TS_CANNOT_FIND_MODULE,
    TS_CANNOT_FIND_NAME,
    TS_CANNOT_FIND_NAME_SUGGESTION,
    TS_NO_DEFAULT_EXPORT,
    TS_NO_EXPORTED_MEMBER_USE_DEFAULT,
)
from .models import (
    DefaultImportOnNamedExport,
    Diagnostic,
    DiagnosticFix,
    NamedImportOnDefaultExport,
    UnresolvableModulePath,
    UnresolvedIdentifier,
)

# Did you mean to use 'import { Header } from "@/components/header"' instead?
NAMED_IMPORT_SUGGESTION_RE = re.compile(r"""Did you mean to use 'import \{ ?([^}]+?) ?\} from "([^"]+)"'""")

# Did you mean to use 'import Header from "@/components/header"' instead?
DEFAULT_IMPORT_SUGGESTION_RE = re.compile(r"""Did you mean to use 'import ([A-Za-z_$][\w$]*) from "([^"]+)"'""")

# Cannot find name 'cn'.
MISSING_NAME_RE = re.compile(r"Cannot find name '([A-Za-z_$][\w$]*)'")

# Cannot find module '@/../lib/utils' or its corresponding type declarations.
MISSING_MODULE_RE = re.compile(r"Cannot find module '([^']+)'")

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")


def parse_named_import_suggestion(message: str) -> Optional[DefaultImportOnNamedExport]:
    match = NAMED_IMPORT_SUGGESTION_RE.search(message)
    if not match:
        return None
    name = match.group(1).strip()
    if not IDENTIFIER_RE.match(name):
        return None
    return DefaultImportOnNamedExport(name=name, specifier=match.group(2))


def parse_default_import_suggestion(message: str) -> Optional[NamedImportOnDefaultExport]:
    match = DEFAULT_IMPORT_SUGGESTION_RE.search(message)
    if not match:
        return None
    return NamedImportOnDefaultExport(name=match.group(1), specifier=match.group(2))


def parse_missing_name(message: str) -> Optional[UnresolvedIdentifier]:
    match = MISSING_NAME_RE.search(message)
    if not match:
        return None
    return UnresolvedIdentifier(name=match.group(1))


def parse_missing_module(message: str) -> Optional[UnresolvableModulePath]:
    match = MISSING_MODULE_RE.search(message)
    if not match:
        return None
    return UnresolvableModulePath(specifier=match.group(1))


_PARSERS: Dict[int, Callable[[str], Optional[DiagnosticFix]]] = {
    TS_NO_DEFAULT_EXPORT: parse_named_import_suggestion,
    TS_NO_EXPORTED_MEMBER_USE_DEFAULT: parse_default_import_suggestion,
    TS_CANNOT_FIND_NAME: parse_missing_name,
    TS_CANNOT_FIND_NAME_SUGGESTION: parse_missing_name,
    TS_CANNOT_FIND_MODULE: parse_missing_module,
}


def classify(diagnostic: Diagnostic) -> Optional[DiagnosticFix]:
    """Translate a diagnostic into its fix variant.

    Returns:
        The variant, or None for unrecognized codes and unparseable messages
    """
    parser = _PARSERS.get(diagnostic.code)
    if parser is None:
        return None
    return parser(diagnostic.message)
