"""Project Index for tsmend.

Loads a project's modules into an in-memory, mutable collection keyed by
absolute path. Two modes trade completeness for memory:

- full: walks the whole source tree (exhaustive export discovery)
- targeted: loads only an explicit file list (cheaper, partial surface)
"""

import logging
import os
from typing import Callable, Dict, Iterable, List, Optional

from ..ast_parser import is_supported_file, should_skip_directory
from ..ast_parser.utils import RESOLVE_EXTENSIONS
from ..exceptions import ProjectLoadError, SourceFileNotFoundError
from .source_file import SourceFile
from .specifiers import specifier_tail

logger = logging.getLogger(__name__)

# Limits
MAX_FILE_SIZE_MB = 2

INDEX_MODES = ("full", "targeted")


def _path_key(path: str) -> str:
    return os.path.normpath(os.path.abspath(path))


def collect_source_files(root_dir: str, max_file_size_mb: float = MAX_FILE_SIZE_MB) -> List[str]:
    """Walk directory tree and collect supported source files, sorted by path."""
    max_bytes = max_file_size_mb * 1024 * 1024
    files = []
    for dirpath, dirnames, filenames in os.walk(root_dir):
        dirnames[:] = [d for d in dirnames if not should_skip_directory(d)]

        for fname in filenames:
            if not is_supported_file(fname):
                continue
            full_path = os.path.join(dirpath, fname)
            try:
                if os.path.getsize(full_path) > max_bytes:
                    logger.debug(f"Skipping oversized file {full_path}")
                    continue
            except OSError:
                continue
            files.append(_path_key(full_path))

    return sorted(files)


class ProjectIndex:
    """Addressable, mutable collection of SourceFile objects for one run."""

    def __init__(
        self,
        project_root: str,
        source_root: str = "src",
        alias_prefix: str = "@/",
        mode: str = "full",
    ):
        if mode not in INDEX_MODES:
            raise ValueError(f"Unknown index mode: {mode}. Supported: {list(INDEX_MODES)}")
        self.project_root = _path_key(project_root)
        self.source_root = _path_key(os.path.join(self.project_root, source_root))
        self.alias_prefix = alias_prefix
        self.mode = mode
        self._files: Dict[str, SourceFile] = {}

    @classmethod
    def load(
        cls,
        project_root: str,
        source_root: str = "src",
        alias_prefix: str = "@/",
        files: Optional[Iterable[str]] = None,
        mode: str = "full",
    ) -> "ProjectIndex":
        """Load a project into memory.

        Args:
            project_root: Directory containing the project
            source_root: Source directory (relative to project_root) behind the alias
            alias_prefix: Specifier prefix mapped to source_root
            files: Explicit files; the only files loaded in targeted mode
            mode: "full" or "targeted"

        Raises:
            ProjectLoadError: If the project root is not a readable directory
        """
        if not project_root or not os.path.isdir(project_root):
            raise ProjectLoadError(f"Project directory does not exist: {project_root}")

        index = cls(project_root, source_root=source_root, alias_prefix=alias_prefix, mode=mode)
        explicit = [index.resolve_path(f) for f in (files or [])]

        if mode == "full":
            try:
                paths = collect_source_files(index.project_root)
            except OSError as e:
                raise ProjectLoadError(f"Failed to scan {project_root}: {e}") from e
            paths = sorted(set(paths) | {p for p in explicit if is_supported_file(p)})
        else:
            paths = sorted({p for p in explicit if is_supported_file(p)})

        for path in paths:
            index.add_source_file_at_path(path)

        logger.info(f"Indexed {len(index)} modules ({mode} mode) from {index.project_root}")
        return index

    # ── Context manager ──────────────────────────────────────────────────

    def __enter__(self) -> "ProjectIndex":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, file_path: str) -> bool:
        return self.resolve_path(file_path) in self._files

    # ── Loading ──────────────────────────────────────────────────────────

    def resolve_path(self, file_path: str) -> str:
        """Absolute, normalized path; relative paths are taken from the project root."""
        if not os.path.isabs(file_path):
            file_path = os.path.join(self.project_root, file_path)
        return _path_key(file_path)

    def add_source_file(self, source_file: SourceFile) -> SourceFile:
        self._files[source_file.file_path] = source_file
        return source_file

    def add_source_file_at_path(self, file_path: str) -> Optional[SourceFile]:
        """Read and index a file. Unreadable files are logged and skipped."""
        path = self.resolve_path(file_path)
        try:
            source_file = SourceFile.from_path(path, self.source_root, self.alias_prefix)
        except (OSError, UnicodeError) as e:
            logger.warning(f"Failed to load {path}: {e}")
            return None
        return self.add_source_file(source_file)

    # ── Lookup ───────────────────────────────────────────────────────────

    def get_source_file(self, file_path: str) -> Optional[SourceFile]:
        return self._files.get(self.resolve_path(file_path))

    def get_source_file_or_raise(self, file_path: str) -> SourceFile:
        """Look up a module by path.

        Raises:
            SourceFileNotFoundError: If the module is not indexed
        """
        source_file = self.get_source_file(file_path)
        if source_file is None:
            raise SourceFileNotFoundError(f"Source file not found in project: {file_path}")
        return source_file

    def find_source_file(self, predicate: Callable[[SourceFile], bool]) -> Optional[SourceFile]:
        return next((sf for sf in self.get_source_files() if predicate(sf)), None)

    def get_source_files(self) -> List[SourceFile]:
        """All indexed modules in path order."""
        return [self._files[key] for key in sorted(self._files)]

    def get_target_source_files(self) -> List[SourceFile]:
        """Indexed modules eligible for repair: not vendored, not declarations."""
        return [sf for sf in self.get_source_files() if not sf.is_vendored and not sf.is_declaration_file]

    def remove_source_file(self, file_path: str) -> bool:
        """Drop a module from the index, releasing its memory."""
        source_file = self._files.pop(self.resolve_path(file_path), None)
        if source_file is None:
            return False
        source_file.release_syntax()
        return True

    # ── Specifier resolution ─────────────────────────────────────────────

    def resolve_specifier(self, importer_path: str, specifier: str) -> Optional[SourceFile]:
        """Resolve an alias or relative specifier to an indexed module."""
        if specifier.startswith(self.alias_prefix):
            base = os.path.join(self.source_root, specifier[len(self.alias_prefix):])
        elif specifier.startswith("."):
            base = os.path.join(os.path.dirname(self.resolve_path(importer_path)), specifier)
        else:
            return None

        base = _path_key(base)
        candidates = [base]
        candidates.extend(base + ext for ext in RESOLVE_EXTENSIONS)
        candidates.extend(os.path.join(base, "index" + ext) for ext in RESOLVE_EXTENSIONS)

        for candidate in candidates:
            source_file = self._files.get(candidate)
            if source_file is not None:
                return source_file
        return None

    def locate_module(self, specifier: str) -> Optional[SourceFile]:
        """Find the module an aliased specifier refers to.

        Tries an exact module-specifier match first, then falls back to a
        path-containing heuristic on the specifier's tail.
        """
        exact = self.find_source_file(lambda sf: sf.module_specifier == specifier)
        if exact is not None:
            return exact

        tail = specifier_tail(specifier, self.alias_prefix)
        if not tail:
            return None

        def _matches(sf: SourceFile) -> bool:
            stem = os.path.splitext(sf.file_path)[0].replace("\\", "/")
            return stem.endswith("/" + tail) or stem.endswith("/" + tail + "/index")

        return self.find_source_file(_matches)

    # ── Persistence and teardown ─────────────────────────────────────────

    def get_modified_source_files(self) -> List[SourceFile]:
        return [sf for sf in self.get_source_files() if sf.is_modified]

    def save(self) -> List[str]:
        """Persist every mutated module.

        Write failures are logged and skipped.

        Returns:
            Paths of the files written
        """
        saved = []
        for source_file in self.get_modified_source_files():
            try:
                if source_file.save():
                    saved.append(source_file.file_path)
            except OSError as e:
                logger.error(f"Failed to save {source_file.file_path}: {e}")
        return saved

    def release(self) -> None:
        """Drop every module and its parsed structure."""
        for source_file in self._files.values():
            source_file.release_syntax()
        self._files.clear()
