"""Export Surface: project-wide map of exported symbol → resolving module.

The surface is an explicit object owned by one run and passed to every pass
that needs it. It is rebuilt after any pass that changes export shapes and
cleared when the run ends.

Insertion is first-writer-wins in path order, so when two modules export the
same name the one whose path sorts first is kept.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from ..project.project_index import ProjectIndex
from ..project.source_file import SourceFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportEntry:
    """One externally visible binding."""
    name: str
    module_path: str  # Module specifier to import it from, e.g. "@/components/header"
    is_default: bool
    file_path: Optional[str] = None


class ExportSurface:
    """Name → ExportEntry mapping with an optional cap on retained entries."""

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries
        self._entries: Dict[str, ExportEntry] = {}
        self.dropped = 0

    def add(self, entry: ExportEntry) -> bool:
        """Insert an entry unless the name is taken or the cap is reached."""
        if entry.name in self._entries:
            return False
        if self.max_entries is not None and len(self._entries) >= self.max_entries:
            self.dropped += 1
            return False
        self._entries[entry.name] = entry
        return True

    def get(self, name: str) -> Optional[ExportEntry]:
        return self._entries.get(name)

    def clear(self) -> None:
        self._entries.clear()
        self.dropped = 0

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ExportEntry]:
        return iter(self._entries.values())


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def default_export_name(source_file: SourceFile) -> Optional[str]:
    """Name under which a module's default export is offered.

    Uses the locally declared name when there is one; anonymous defaults
    take the capitalized file base name, or the parent directory name for
    index files.
    """
    default_export = source_file.get_default_export()
    if default_export is None:
        return None
    if default_export.local_name and default_export.local_name != "default":
        return default_export.local_name

    base_name = source_file.base_name_without_extension
    if base_name == "index":
        parent = source_file.file_path.replace("\\", "/").rstrip("/").split("/")[-2]
        return _capitalize(parent)
    return _capitalize(base_name)


def collect_module_exports(source_file: SourceFile) -> List[ExportEntry]:
    """At most one default entry plus every named export of a module."""
    specifier = source_file.module_specifier
    if specifier is None:
        return []

    entries = []
    default_name = default_export_name(source_file)
    if default_name:
        entries.append(ExportEntry(default_name, specifier, True, source_file.file_path))

    for name in source_file.get_named_exports():
        if name != "default":
            entries.append(ExportEntry(name, specifier, False, source_file.file_path))
    return entries


def build_export_surface(
    project: ProjectIndex,
    max_scanned_modules: Optional[int] = None,
    max_entries: Optional[int] = None,
) -> ExportSurface:
    """Scan indexed modules into a fresh ExportSurface.

    Vendored modules, declaration files and files outside the source root
    are skipped. Caps truncate silently: only the first max_scanned_modules
    candidates are scanned and entries beyond max_entries are dropped.
    """
    logger.info("  - [Pass 2] Building project-wide export map...")
    surface = ExportSurface(max_entries=max_entries)

    candidates = [
        sf for sf in project.get_target_source_files()
        if sf.module_specifier is not None
    ]
    if max_scanned_modules is not None and len(candidates) > max_scanned_modules:
        logger.debug(f"Export scan capped at {max_scanned_modules} of {len(candidates)} modules")
        candidates = candidates[:max_scanned_modules]

    for source_file in candidates:
        try:
            for entry in collect_module_exports(source_file):
                surface.add(entry)
        except Exception as e:
            logger.warning(f"Warning: Failed to process file {source_file.base_name}: {e}")

    if surface.dropped:
        logger.debug(f"Export map full, dropped {surface.dropped} entries")
    if not surface:
        logger.warning("Export map is empty; missing-import recovery will have nothing to offer")
    else:
        logger.info(f"  - [Pass 2] Export map built. Found {len(surface)} unique potential imports.")
    return surface
