"""A single indexed module with a mutable text buffer.

The structural view (ModuleSyntax) is parsed lazily from the current text
and discarded after every mutation, so byte offsets handed out by queries
are valid only until the next edit. Callers re-query after mutating.
"""

import logging
import os
from typing import Callable, Iterable, List, Optional, Set, Tuple

from ..ast_parser import (
    Declaration,
    DefaultExport,
    ImportDeclaration,
    ModuleSyntax,
    detect_language,
    get_parser,
    is_declaration_file,
    is_vendored_path,
)
from .imports import new_import_declaration, render_import
from .specifiers import module_specifier_for

logger = logging.getLogger(__name__)


class SourceFile:
    """An indexed module: path, text, and lazily parsed import/export structure."""

    def __init__(self, file_path: str, text: str, source_root: str, alias_prefix: str = "@/"):
        self.file_path = os.path.normpath(os.path.abspath(file_path))
        self.language = detect_language(self.file_path)
        self._source_root = source_root
        self._alias_prefix = alias_prefix
        self._text = text
        self._saved_text = text
        self._syntax: Optional[ModuleSyntax] = None

    @classmethod
    def from_path(cls, file_path: str, source_root: str, alias_prefix: str = "@/") -> "SourceFile":
        """Read a module from disk.

        Raises:
            OSError: If the file cannot be read
        """
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
        return cls(file_path, text, source_root, alias_prefix)

    def __repr__(self) -> str:
        return f"SourceFile({self.file_path!r})"

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def text(self) -> str:
        return self._text

    @property
    def is_modified(self) -> bool:
        return self._text != self._saved_text

    @property
    def base_name(self) -> str:
        return os.path.basename(self.file_path)

    @property
    def base_name_without_extension(self) -> str:
        name = self.base_name
        for suffix in (".d.ts", ".d.mts", ".d.cts"):
            if name.endswith(suffix):
                return name[: -len(suffix)]
        return os.path.splitext(name)[0]

    @property
    def is_declaration_file(self) -> bool:
        return is_declaration_file(self.file_path)

    @property
    def is_vendored(self) -> bool:
        return is_vendored_path(self.file_path)

    @property
    def line_terminator(self) -> str:
        """Line ending of the file: CRLF when it has any, otherwise LF."""
        return "\r\n" if "\r\n" in self._text else "\n"

    @property
    def module_specifier(self) -> Optional[str]:
        """Alias specifier, recomputed from the path on every access."""
        return module_specifier_for(self.file_path, self._source_root, self._alias_prefix)

    @property
    def syntax(self) -> ModuleSyntax:
        if self._syntax is None:
            if not self.language:
                raise ValueError(f"Unsupported file type: {self.file_path}")
            self._syntax = get_parser(self.language).parse_source(self._text, self.file_path)
        return self._syntax

    def release_syntax(self) -> None:
        """Drop the parsed structure; it is rebuilt on the next query."""
        self._syntax = None

    # ── Queries ──────────────────────────────────────────────────────────

    def get_import_declarations(self) -> List[ImportDeclaration]:
        return list(self.syntax.imports)

    def get_import_declaration(
        self, predicate: Callable[[ImportDeclaration], bool]
    ) -> Optional[ImportDeclaration]:
        return next((d for d in self.syntax.imports if predicate(d)), None)

    def get_default_export(self) -> Optional[DefaultExport]:
        return self.syntax.default_export

    def get_named_exports(self) -> List[str]:
        return list(self.syntax.named_exports)

    def find_declaration(self, name: str) -> Optional[Declaration]:
        return next((d for d in self.syntax.declarations if d.name == name), None)

    def imported_names(self) -> Set[str]:
        """Local names bound by this module's imports."""
        names: Set[str] = set()
        for decl in self.syntax.imports:
            names.update(decl.local_names)
        return names

    # ── Mutations ────────────────────────────────────────────────────────

    def replace_import_declaration(self, decl: ImportDeclaration, *new_decls: ImportDeclaration) -> None:
        """Re-render a declaration in place, one line per replacement declaration."""
        rendered = self.line_terminator.join(render_import(d) for d in new_decls)
        self._splice(decl.start_byte, decl.end_byte, rendered)

    def remove_import_declaration(self, decl: ImportDeclaration) -> None:
        start, end = self._statement_span(decl.start_byte, decl.end_byte)
        self._splice(start, end, "")

    def add_import_declaration(
        self,
        module_specifier: str,
        default_import: Optional[str] = None,
        named_imports: Iterable[str] = (),
    ) -> ImportDeclaration:
        """Append an import after the existing imports (or after the directive prologue)."""
        decl = new_import_declaration(module_specifier, default_import, named_imports)
        rendered = render_import(decl)
        eol = self.line_terminator

        imports = self.syntax.imports
        if imports:
            self._splice(imports[-1].end_byte, imports[-1].end_byte, eol + rendered)
        elif self.syntax.prologue_end_byte:
            offset = self.syntax.prologue_end_byte
            self._splice(offset, offset, eol + rendered)
        else:
            self._splice(0, 0, rendered + eol)
        return decl

    def mark_declaration_exported(self, name: str) -> bool:
        """Prefix a top-level declaration with "export".

        Returns:
            True if the declaration was changed, False if it is missing or
            already exported.
        """
        declaration = self.find_declaration(name)
        if declaration is None or declaration.exported:
            return False
        self._splice(declaration.start_byte, declaration.start_byte, "export ")
        return True

    def remove_default_export(self) -> bool:
        default_export = self.get_default_export()
        if default_export is None:
            return False
        start, end = self._statement_span(default_export.start_byte, default_export.end_byte)
        self._splice(start, end, "")
        return True

    def save(self) -> bool:
        """Write the buffer to disk if it changed.

        Raises:
            OSError: If the file cannot be written
        """
        if not self.is_modified:
            return False
        with open(self.file_path, "w", encoding="utf-8", newline="") as f:
            f.write(self._text)
        self._saved_text = self._text
        return True

    # ── Internals ────────────────────────────────────────────────────────

    def _splice(self, start: int, end: int, replacement: str) -> None:
        data = self._text.encode("utf-8")
        self._text = (data[:start] + replacement.encode("utf-8") + data[end:]).decode("utf-8")
        self._syntax = None

    def _statement_span(self, start: int, end: int) -> Tuple[int, int]:
        """Widen a statement span to whole lines when nothing else shares them."""
        data = self._text.encode("utf-8")

        line_start = data.rfind(b"\n", 0, start) + 1
        newline = data.find(b"\n", end)
        line_end = newline if newline != -1 else len(data)

        if data[line_start:start].strip() or data[end:line_end].strip():
            return start, end
        if newline != -1:
            if line_start > 0 and not data[newline + 1:].strip():
                # Last statement: also take one blank line above it
                prev_start = data.rfind(b"\n", 0, line_start - 1) + 1
                if not data[prev_start:line_start].strip():
                    line_start = prev_start
            return line_start, newline + 1
        if line_start > 0:
            # Last line of the file: eat the preceding newline instead
            return line_start - 1, line_end
        return line_start, line_end
