"""tsmend AST Parser — tree-sitter based module-surface parsing.

Public API:
    parse_file(path) → ModuleSyntax
    parse_source(source, file_path, language) → ModuleSyntax
    detect_language(file_path) → str | None
"""

from .models import Declaration, DefaultExport, ImportDeclaration, ModuleSyntax, NamedImport
from .utils import (
    detect_language,
    get_parser,
    is_declaration_file,
    is_supported_file,
    is_vendored_path,
    should_skip_directory,
)

__all__ = [
    "parse_file",
    "parse_source",
    "detect_language",
    "is_declaration_file",
    "is_supported_file",
    "is_vendored_path",
    "should_skip_directory",
    "Declaration",
    "DefaultExport",
    "ImportDeclaration",
    "ModuleSyntax",
    "NamedImport",
]


def parse_file(file_path: str) -> ModuleSyntax:
    """Parse a source file into its import/export structure.

    Raises:
        ValueError: If the file extension is not supported
        OSError: If the file cannot be read
    """
    language = detect_language(file_path)
    if not language:
        raise ValueError(f"Unsupported file type: {file_path}")
    return get_parser(language).parse_file(file_path)


def parse_source(source_text: str, file_path: str, language: str | None = None) -> ModuleSyntax:
    """Parse source code string into its import/export structure.

    Args:
        source_text: Source code as string
        file_path: File path (for metadata)
        language: Language identifier. If None, detected from file_path.
    """
    if language is None:
        language = detect_language(file_path)
    if not language:
        raise ValueError(f"Unsupported file type: {file_path}")
    return get_parser(language).parse_source(source_text, file_path)
