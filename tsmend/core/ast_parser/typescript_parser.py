"""TypeScript AST parser using tree-sitter.

Extends the shared ECMAScript module extraction with TypeScript-specific
declarations: interfaces, type aliases, enums, abstract classes and
namespaces. TSX files use the TSX dialect of the same grammar.
"""

import logging

import tree_sitter
import tree_sitter_typescript

from .base import BaseLanguageParser, JS_DECLARATION_TYPES

logger = logging.getLogger(__name__)

_TS_LANGUAGE = tree_sitter.Language(tree_sitter_typescript.language_typescript())
_TSX_LANGUAGE = tree_sitter.Language(tree_sitter_typescript.language_tsx())

TS_DECLARATION_TYPES = JS_DECLARATION_TYPES | frozenset({
    "abstract_class_declaration",
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
    "internal_module",
})


class TypeScriptParser(BaseLanguageParser):
    """tree-sitter based TypeScript parser (.ts, .mts, .cts)."""

    declaration_types = TS_DECLARATION_TYPES

    def get_language(self) -> str:
        return "typescript"

    def get_tree_sitter_language(self) -> tree_sitter.Language:
        return _TS_LANGUAGE


class TsxParser(TypeScriptParser):
    """tree-sitter based TSX parser (.tsx)."""

    def get_language(self) -> str:
        return "tsx"

    def get_tree_sitter_language(self) -> tree_sitter.Language:
        return _TSX_LANGUAGE
