"""AST Parser data models.

Defines the structural view of a module's import/export surface.
These are pure data containers — no parsing logic.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class NamedImport:
    """One binding inside the braces of an import declaration."""

    name: str  # Exported name in the source module
    alias: Optional[str] = None  # Local name when "name as alias" is used
    is_type: bool = False  # "import { type Foo }"

    @property
    def local_name(self) -> str:
        return self.alias or self.name


@dataclass
class ImportDeclaration:
    """A single top-level import statement.

    Byte offsets refer to the source bytes the declaration was parsed from
    and are only valid until the owning file is mutated.
    """

    module_specifier: str
    default_import: Optional[str] = None
    namespace_import: Optional[str] = None
    named_imports: List[NamedImport] = field(default_factory=list)
    is_type_only: bool = False
    quote: str = '"'
    has_semicolon: bool = True
    attributes: Optional[str] = None  # Raw "with { ... }" clause
    start_byte: int = 0
    end_byte: int = 0

    @property
    def local_names(self) -> List[str]:
        names = [n.local_name for n in self.named_imports]
        if self.default_import:
            names.append(self.default_import)
        if self.namespace_import:
            names.append(self.namespace_import)
        return names

    @property
    def is_side_effect(self) -> bool:
        return not (self.default_import or self.namespace_import or self.named_imports)


@dataclass
class DefaultExport:
    """The default export of a module.

    kind is one of:
    - "identifier": export default Foo;
    - "declaration": export default function Foo() {} / class Foo {}
    - "specifier": export { Foo as default }
    - "reexport": export { default } from "./foo"
    - "expression": anonymous function, arrow, object literal, ...
    """

    kind: str
    local_name: Optional[str]
    start_byte: int
    end_byte: int


@dataclass
class Declaration:
    """A top-level declaration (function, class, variable, type)."""

    name: str
    kind: str  # tree-sitter node type, e.g. "function_declaration"
    start_byte: int
    end_byte: int
    exported: bool = False


@dataclass
class ModuleSyntax:
    """Complete structural output for a single module."""

    file_path: str
    language: str
    imports: List[ImportDeclaration] = field(default_factory=list)
    default_export: Optional[DefaultExport] = None
    named_exports: List[str] = field(default_factory=list)
    declarations: List[Declaration] = field(default_factory=list)
    prologue_end_byte: int = 0  # End of hash-bang line and directive prologue
    has_errors: bool = False
