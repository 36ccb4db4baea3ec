"""Text-level normalization applied before any structural parsing.

Two independent, order-sensitive steps:

1. Markdown fence stripping: generated files sometimes arrive wrapped in
   prose plus a ```tsx ... ``` block; only the fenced body is kept.
2. Client directive insertion: modules using client-only APIs (state and
   effect hooks, inline click handlers, client-only packages) get
   "use client"; as their first statement.

Files are read-modify-written independently, so a batch may be processed
with bounded fan-out.
"""

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Pattern, Sequence, Tuple

from ..config.config_loader import DEFAULT_CLIENT_MODULES
from ..constants import CLIENT_DIRECTIVE_RE, CLIENT_HOOK_PATTERNS, FENCE_MARKER, HASH_BANG_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_DIRECTIVE = '"use client";'


def strip_markdown_fences(content: str) -> Tuple[str, bool]:
    """Keep only the lines strictly between the first and last fence markers.

    Returns:
        Tuple of (content, was_changed). Content is returned untouched when
        fewer than two fence lines exist.
    """
    lines = content.split("\n")
    fence_indices = [i for i, line in enumerate(lines) if line.strip().startswith(FENCE_MARKER)]

    if len(fence_indices) >= 2 and fence_indices[0] < fence_indices[-1]:
        cleaned = lines[fence_indices[0] + 1:fence_indices[-1]]
        return "\n".join(cleaned), True
    return content, False


def _module_reference_pattern(module_name: str) -> Pattern[str]:
    # The module (or one of its subpaths) used as a string literal specifier
    return re.compile(r"""["']""" + re.escape(module_name) + r"""(?:/[^"']*)?["']""")


def has_client_directive(content: str) -> bool:
    return CLIENT_DIRECTIVE_RE.search(content) is not None


def needs_client_directive(
    content: str,
    client_modules: Sequence[str] = DEFAULT_CLIENT_MODULES,
) -> bool:
    """Check whether a module uses client-only APIs and lacks the directive."""
    if has_client_directive(content):
        return False

    if any(pattern.search(content) for pattern in CLIENT_HOOK_PATTERNS):
        return True

    return any(_module_reference_pattern(m).search(content) for m in client_modules)


def add_client_directive(content: str, directive: str = DEFAULT_DIRECTIVE) -> str:
    """Insert the directive as the first line, or the second after a hash-bang."""
    lines = content.split("\n")
    start_index = 1 if lines and lines[0].startswith(HASH_BANG_PREFIX) else 0
    lines.insert(start_index, directive)
    return "\n".join(lines)


class TextPreprocessor:
    """Applies fence stripping and client directive insertion to files."""

    def __init__(
        self,
        client_modules: Optional[Sequence[str]] = None,
        directive: str = DEFAULT_DIRECTIVE,
        max_workers: int = 4,
    ):
        self.client_modules = list(client_modules) if client_modules is not None else list(DEFAULT_CLIENT_MODULES)
        self.directive = directive
        self.max_workers = max(1, max_workers)

    def preprocess_text(self, content: str) -> Tuple[str, List[str]]:
        """Apply both steps to a string.

        Returns:
            Tuple of (new_content, applied_steps)
        """
        applied = []

        content, stripped = strip_markdown_fences(content)
        if stripped:
            applied.append("strip_fences")

        if needs_client_directive(content, self.client_modules):
            content = add_client_directive(content, self.directive)
            applied.append("client_directive")

        return content, applied

    def preprocess_file(self, file_path: str) -> bool:
        """Preprocess one file in place.

        Returns:
            True if the file was rewritten. Read/write errors are logged and
            reported as no change.
        """
        name = os.path.basename(file_path)
        try:
            with open(file_path, "r", encoding="utf-8", newline="") as f:
                original = f.read()

            content, applied = self.preprocess_text(original)
            if not applied:
                return False

            with open(file_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)

            if "strip_fences" in applied:
                logger.info(f"  - Stripped Markdown from {name}")
            if "client_directive" in applied:
                logger.info(f"  - Added 'use client' to {name}")
            return True

        except (OSError, UnicodeError) as e:
            logger.error(f"  - Error preprocessing {name}: {e}")
            return False

    def preprocess_files(self, file_paths: Sequence[str]) -> List[str]:
        """Preprocess a batch of disjoint files with bounded fan-out.

        Returns:
            Paths of the files that were rewritten, in input order
        """
        if not file_paths:
            return []

        workers = min(self.max_workers, len(file_paths))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="preprocess") as pool:
            results = list(pool.map(self.preprocess_file, file_paths))

        changed = [path for path, was_changed in zip(file_paths, results) if was_changed]
        logger.info(f"Preprocessed {len(file_paths)} files, {len(changed)} changed")
        return changed
