"""Text Preprocessor: normalizes raw file text before structural parsing."""

from .text_preprocessor import (
    TextPreprocessor,
    add_client_directive,
    needs_client_directive,
    strip_markdown_fences,
)

__all__ = [
    "TextPreprocessor",
    "add_client_directive",
    "needs_client_directive",
    "strip_markdown_fences",
]
