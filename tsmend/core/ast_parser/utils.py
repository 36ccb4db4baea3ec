"""AST Parser utilities.

Language detection, parser registry, and helper functions.
"""

import os
from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .base import BaseLanguageParser

# Extension → language mapping
SUPPORTED_EXTENSIONS: Dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

# Extensions tried, in order, when resolving an extensionless specifier
RESOLVE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")

# Directories to skip during file walking
SKIP_DIRECTORIES = frozenset({
    ".git",
    "node_modules",
    "bower_components",
    "jspm_packages",
    ".next",
    ".turbo",
    ".vercel",
    "dist",
    "build",
    "out",
    "coverage",
})

DECLARATION_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")

# Parser registry — lazy-loaded to avoid import overhead
_parser_registry: Dict[str, "BaseLanguageParser"] = {}


def detect_language(file_path: str) -> Optional[str]:
    """Detect the grammar to use from the file extension.

    Args:
        file_path: Path to the source file

    Returns:
        Language identifier string or None if unsupported
    """
    _, ext = os.path.splitext(file_path)
    return SUPPORTED_EXTENSIONS.get(ext.lower())


def get_parser(language: str) -> "BaseLanguageParser":
    """Get a parser instance for the given language.

    Uses a lazy-initialized registry to avoid loading every
    grammar at startup.

    Raises:
        ValueError: If language is not supported
    """
    if language not in _parser_registry:
        if language == "typescript":
            from .typescript_parser import TypeScriptParser
            _parser_registry["typescript"] = TypeScriptParser()
        elif language == "tsx":
            from .typescript_parser import TsxParser
            _parser_registry["tsx"] = TsxParser()
        elif language == "javascript":
            from .javascript_parser import JavaScriptParser
            _parser_registry["javascript"] = JavaScriptParser()
        else:
            raise ValueError(
                f"Unsupported language: {language}. "
                f"Supported: {sorted(set(SUPPORTED_EXTENSIONS.values()))}"
            )

    return _parser_registry[language]


def should_skip_directory(dir_name: str) -> bool:
    """Check if a directory should be skipped during file walking.

    Vendored dependencies, build output and hidden directories are skipped.
    """
    return dir_name in SKIP_DIRECTORIES or dir_name.startswith(".")


def is_supported_file(file_path: str) -> bool:
    """Check if a file has a supported language extension."""
    return detect_language(file_path) is not None


def is_declaration_file(file_path: str) -> bool:
    """Check if a file is a pure type-declaration file (.d.ts)."""
    return file_path.lower().endswith(DECLARATION_SUFFIXES)


def is_vendored_path(file_path: str) -> bool:
    """Check if a path lies inside a vendored dependency directory."""
    parts = file_path.replace("\\", "/").split("/")
    return "node_modules" in parts
