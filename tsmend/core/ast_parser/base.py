"""Base interface for language-specific AST parsers.

Defines the Strategy pattern base class that all language parsers implement.
Shared import/export extraction lives here; the ECMAScript module grammar is
the same for JavaScript and TypeScript, so subclasses only select the
tree-sitter language and the set of top-level declaration node types.
"""

import logging
from abc import ABC, abstractmethod
from typing import FrozenSet, List, Optional

import tree_sitter

from .models import Declaration, DefaultExport, ImportDeclaration, ModuleSyntax, NamedImport

logger = logging.getLogger(__name__)

# Declarations shared by every ECMAScript grammar
JS_DECLARATION_TYPES = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "lexical_declaration",
    "variable_declaration",
})

# Named function/class expressions that can appear after "export default"
_NAMED_EXPRESSION_TYPES = frozenset({
    "function",
    "function_expression",
    "generator_function",
    "class",
})


def _node_text(node: tree_sitter.Node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


class BaseLanguageParser(ABC):
    """Abstract base for tree-sitter module-surface parsers.

    Subclasses implement:
    - get_language(): returns language name string
    - get_tree_sitter_language(): returns tree-sitter Language object
    """

    declaration_types: FrozenSet[str] = JS_DECLARATION_TYPES

    @abstractmethod
    def get_language(self) -> str:
        """Return the language identifier (e.g., 'typescript', 'tsx')."""
        ...

    @abstractmethod
    def get_tree_sitter_language(self) -> tree_sitter.Language:
        """Return the tree-sitter Language object for this language."""
        ...

    def parse_file(self, file_path: str) -> ModuleSyntax:
        """Read and parse a source file.

        Raises:
            OSError: If the file cannot be read
        """
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            source_text = f.read()
        return self.parse_source(source_text, file_path)

    def parse_source(self, source_text: str, file_path: str) -> ModuleSyntax:
        """Parse source code string into a ModuleSyntax.

        Args:
            source_text: Source code as string
            file_path: File path (for metadata and log messages)

        Returns:
            ModuleSyntax with imports, exports and top-level declarations
        """
        source_bytes = source_text.encode("utf-8")

        parser = tree_sitter.Parser(self.get_tree_sitter_language())
        tree = parser.parse(source_bytes)

        syntax = ModuleSyntax(file_path=file_path, language=self.get_language())
        syntax.has_errors = tree.root_node.has_error
        if syntax.has_errors:
            logger.debug(f"Tree-sitter reported parse errors in {file_path}")

        syntax.prologue_end_byte = self._find_prologue_end(tree.root_node)

        for child in tree.root_node.children:
            if child.type == "import_statement":
                decl = self._extract_import(child, source_bytes)
                if decl:
                    syntax.imports.append(decl)
            elif child.type == "export_statement":
                self._extract_export(child, source_bytes, syntax)
            elif child.type in self.declaration_types:
                for name in self._declaration_names(child, source_bytes):
                    syntax.declarations.append(Declaration(
                        name=name,
                        kind=child.type,
                        start_byte=child.start_byte,
                        end_byte=child.end_byte,
                    ))

        return syntax

    # ── Imports ──────────────────────────────────────────────────────────

    def _extract_import(
        self, node: tree_sitter.Node, source: bytes
    ) -> Optional[ImportDeclaration]:
        """Extract an import statement. Returns None for "import x = require()"."""
        source_node = node.child_by_field_name("source")
        if source_node is None:
            return None

        raw_specifier = _node_text(source_node, source)
        decl = ImportDeclaration(
            module_specifier=_unquote(raw_specifier),
            quote=raw_specifier[0] if raw_specifier[:1] in ("'", '"') else '"',
            has_semicolon=_node_text(node, source).rstrip().endswith(";"),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
        )

        for child in node.children:
            if child.type == "type":
                decl.is_type_only = True
            elif child.type == "import_clause":
                self._read_import_clause(child, source, decl)
            elif child.type == "import_attribute":
                decl.attributes = _node_text(child, source)

        return decl

    def _read_import_clause(
        self, clause: tree_sitter.Node, source: bytes, decl: ImportDeclaration
    ) -> None:
        for child in clause.children:
            if child.type == "identifier":
                decl.default_import = _node_text(child, source)
            elif child.type == "namespace_import":
                for sub in child.named_children:
                    if sub.type == "identifier":
                        decl.namespace_import = _node_text(sub, source)
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type != "import_specifier":
                        continue
                    name_node = spec.child_by_field_name("name")
                    if name_node is None:
                        continue
                    alias_node = spec.child_by_field_name("alias")
                    decl.named_imports.append(NamedImport(
                        name=_node_text(name_node, source),
                        alias=_node_text(alias_node, source) if alias_node else None,
                        is_type=any(c.type == "type" for c in spec.children),
                    ))

    # ── Exports ──────────────────────────────────────────────────────────

    def _extract_export(
        self, node: tree_sitter.Node, source: bytes, syntax: ModuleSyntax
    ) -> None:
        """Record default/named exports of an export statement."""
        is_default = any(c.type == "default" for c in node.children)
        declaration = node.child_by_field_name("declaration")
        value = node.child_by_field_name("value")
        from_source = node.child_by_field_name("source")

        if is_default:
            if syntax.default_export is not None:
                return
            if declaration is not None:
                names = self._declaration_names(declaration, source)
                local_name = names[0] if names else None
                kind = "declaration" if local_name else "expression"
            elif value is not None and value.type == "identifier":
                local_name = _node_text(value, source)
                kind = "identifier"
            elif value is not None and value.type in _NAMED_EXPRESSION_TYPES:
                name_node = value.child_by_field_name("name")
                local_name = _node_text(name_node, source) if name_node else None
                kind = "declaration" if local_name else "expression"
            else:
                local_name = None
                kind = "expression"
            syntax.default_export = DefaultExport(
                kind=kind,
                local_name=local_name,
                start_byte=node.start_byte,
                end_byte=node.end_byte,
            )
            return

        if declaration is not None:
            for name in self._declaration_names(declaration, source):
                syntax.named_exports.append(name)
                syntax.declarations.append(Declaration(
                    name=name,
                    kind=declaration.type,
                    start_byte=declaration.start_byte,
                    end_byte=declaration.end_byte,
                    exported=True,
                ))
            return

        for child in node.children:
            if child.type == "export_clause":
                for spec in child.named_children:
                    if spec.type != "export_specifier":
                        continue
                    name_node = spec.child_by_field_name("name")
                    if name_node is None:
                        continue
                    alias_node = spec.child_by_field_name("alias")
                    name = _unquote(_node_text(name_node, source))
                    exported_name = _unquote(_node_text(alias_node, source)) if alias_node else name

                    if exported_name != "default":
                        syntax.named_exports.append(exported_name)
                    elif syntax.default_export is None:
                        if from_source is not None:
                            kind = "reexport"
                            local_name = None if name == "default" else name
                        else:
                            kind = "specifier"
                            local_name = name
                        syntax.default_export = DefaultExport(
                            kind=kind,
                            local_name=local_name,
                            start_byte=node.start_byte,
                            end_byte=node.end_byte,
                        )
            elif child.type == "namespace_export":
                names = [c for c in child.named_children if c.type in ("identifier", "string")]
                if names:
                    syntax.named_exports.append(_unquote(_node_text(names[-1], source)))

    # ── Helpers ──────────────────────────────────────────────────────────

    def _declaration_names(self, node: tree_sitter.Node, source: bytes) -> List[str]:
        """Names bound by a declaration node (several for "const a = 1, b = 2")."""
        if node.type in ("lexical_declaration", "variable_declaration"):
            names = []
            for child in node.named_children:
                if child.type != "variable_declarator":
                    continue
                name_node = child.child_by_field_name("name")
                # Destructuring patterns are not tracked
                if name_node is not None and name_node.type == "identifier":
                    names.append(_node_text(name_node, source))
            return names

        name_node = node.child_by_field_name("name")
        if name_node is None or name_node.type == "string":
            return []
        return [_node_text(name_node, source)]

    def _find_prologue_end(self, root: tree_sitter.Node) -> int:
        """Byte offset after the hash-bang line and leading directives."""
        end = 0
        for child in root.children:
            if child.type == "hash_bang_line":
                end = child.end_byte
            elif child.type == "comment":
                continue
            elif (
                child.type == "expression_statement"
                and child.named_children
                and child.named_children[0].type == "string"
            ):
                end = child.end_byte
            else:
                break
        return end
