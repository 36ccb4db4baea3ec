"""Auto-fix orchestrator.

Sequences one repair run:

    preprocess → collect diagnostics → index → export surface
    → normalize named exports → rebuild surface → diagnostic fixes
    → build-log fixes → organize touched imports → persist → release

Per-file failures are logged and leave that file's problems unresolved.
The only fatal conditions are a project that cannot be loaded and an
exhausted wall-clock budget; on timeout nothing further is persisted.
The project index and export surface are released on every exit path.
"""

import logging
import os
from typing import Dict, Iterable, List, Optional, Set

from ..ast_parser import is_declaration_file, is_supported_file, is_vendored_path
from ..buildlog.resolver import BuildLogMismatchResolver
from ..config.config_loader import FixerSettings
from ..diagnostics.bridges.base import DiagnosticsByFile, DiagnosticsProvider
from ..diagnostics.models import FixAction
from ..diagnostics.translator import DiagnosticFixTranslator, fix_diagnostics
from ..exceptions import ProjectLoadError, RunTimeoutError
from ..exports.normalizer import NamedExportNormalizer
from ..exports.surface import ExportSurface, build_export_surface
from ..preprocess.text_preprocessor import TextPreprocessor
from ..project.organizer import organize_imports
from ..project.project_index import ProjectIndex, collect_source_files
from ..project.source_file import SourceFile
from ..stats import RunStats
from .deadline import Deadline

logger = logging.getLogger(__name__)


class AutoFixer:
    """Runs the import/export repair pipeline over a project directory."""

    def __init__(
        self,
        settings: Optional[FixerSettings] = None,
        diagnostics_provider: Optional[DiagnosticsProvider] = None,
    ):
        self.settings = settings or FixerSettings()
        self.diagnostics_provider = diagnostics_provider
        self.stats = RunStats()
        self.actions: List[FixAction] = []

        self._project: Optional[ProjectIndex] = None
        self._surface: Optional[ExportSurface] = None

    # ── Public entry point ───────────────────────────────────────────────

    def fix_project(
        self,
        project_root: str,
        files: Optional[Iterable[str]] = None,
        build_log: Optional[str] = None,
    ) -> RunStats:
        """Repair a project in place.

        Args:
            project_root: Project directory
            files: Explicit target files; discovered from the tree when empty
            build_log: Raw bundler output to mine for export mismatches

        Returns:
            RunStats for this run

        Raises:
            ProjectLoadError: If the project cannot be loaded
            RunTimeoutError: If the run exceeds settings.timeout_seconds
        """
        self.stats = RunStats()
        self.actions = []
        deadline = Deadline(self.settings.timeout_seconds)
        explicit_files = [f for f in (files or []) if f]

        logger.info("Starting TypeScript auto-fix...")
        try:
            if not project_root or not os.path.isdir(project_root):
                raise ProjectLoadError(f"Project directory does not exist: {project_root}")
            project_root = os.path.normpath(os.path.abspath(project_root))

            target_paths = self._resolve_targets(project_root, explicit_files)

            self._preprocess_files(target_paths)
            deadline.check("preprocessing")

            diagnostics = self._collect_diagnostics(project_root, deadline)
            deadline.check("diagnostic collection")

            self._initialize_project(project_root, target_paths, targeted=bool(explicit_files))
            deadline.check("project loading")

            touched = self._execute_fixing_passes(target_paths, explicit_files, diagnostics, build_log, deadline)

            self._organize_imports(touched)
            deadline.check("persisting")

            self._finalize_changes()
            logger.info(f"Auto-fix finished in {deadline.elapsed():.1f}s")
            return self.stats

        except RunTimeoutError as e:
            logger.error(f"{e}; no further changes persisted")
            raise
        finally:
            self._cleanup()

    # ── Phases ───────────────────────────────────────────────────────────

    def _resolve_targets(self, project_root: str, explicit_files: List[str]) -> List[str]:
        """Explicit files (existing, supported) or every repairable module in the tree."""
        if not explicit_files:
            return [
                path for path in collect_source_files(project_root)
                if not is_declaration_file(path) and not is_vendored_path(path)
            ]

        targets = []
        for file_path in explicit_files:
            path = file_path if os.path.isabs(file_path) else os.path.join(project_root, file_path)
            path = os.path.normpath(path)
            if not os.path.isfile(path):
                logger.warning(f"Skipping missing file: {file_path}")
                continue
            if not is_supported_file(path):
                logger.debug(f"Skipping unsupported file: {file_path}")
                continue
            targets.append(path)
        return targets

    def _preprocess_files(self, target_paths: List[str]) -> None:
        if self.settings.skip_preprocessing:
            return

        logger.info("Preprocessing files...")
        preprocessor = TextPreprocessor(
            client_modules=self.settings.client_modules,
            directive=self.settings.client_directive,
            max_workers=self.settings.limits.max_concurrent_preprocess,
        )
        preprocessor.preprocess_files(target_paths)

    def _collect_diagnostics(self, project_root: str, deadline: Deadline) -> DiagnosticsByFile:
        if self.diagnostics_provider is None:
            logger.info("No diagnostics source configured; skipping compiler diagnostics")
            return {}
        try:
            return self.diagnostics_provider.collect(project_root, timeout=deadline.remaining())
        except Exception as e:
            logger.warning(f"Warning: Failed to collect diagnostics: {e}")
            return {}

    def _initialize_project(self, project_root: str, target_paths: List[str], targeted: bool) -> None:
        logger.info("Initializing TypeScript project...")
        mode = self.settings.index_mode
        if mode == "targeted" and not targeted:
            logger.info("No explicit files given; indexing the full project")
            mode = "full"

        self._project = ProjectIndex.load(
            project_root,
            source_root=self.settings.source_root,
            alias_prefix=self.settings.alias_prefix,
            files=target_paths,
            mode=mode,
        )

    def _build_surface(self) -> ExportSurface:
        limits = self.settings.limits
        if self._surface is not None:
            self._surface.clear()
        self._surface = build_export_surface(
            self._project,
            max_scanned_modules=self.settings.cap(limits.max_scanned_modules),
            max_entries=self.settings.cap(limits.max_export_entries),
        )
        return self._surface

    def _execute_fixing_passes(
        self,
        target_paths: List[str],
        explicit_files: List[str],
        diagnostics: DiagnosticsByFile,
        build_log: Optional[str],
        deadline: Deadline,
    ) -> Set[str]:
        logger.info("Executing fixing passes...")
        project = self._project
        touched: Set[str] = set()

        surface = self._build_surface()
        deadline.check("export surface")

        if self.settings.named_export_allow_list:
            normalizer = NamedExportNormalizer(project, self.stats)
            touched |= normalizer.normalize(self.settings.named_export_allow_list)
            # Export shapes changed; the surface must reflect them
            surface = self._build_surface()
            deadline.check("named-export normalization")

        translator = DiagnosticFixTranslator(
            project,
            surface,
            stats=self.stats,
            special_imports=self.settings.special_imports,
            max_diagnostics_per_file=self.settings.cap(self.settings.limits.max_diagnostics_per_file),
        )
        targets = self._target_source_files(target_paths, explicit_files)
        touched |= self._run_diagnostic_batches(translator, targets, diagnostics, deadline)
        self.actions = list(translator.actions)

        if build_log:
            deadline.check("build-log resolution")
            resolver = BuildLogMismatchResolver(project, self.stats)
            touched |= resolver.resolve(build_log)

        return touched

    def _target_source_files(self, target_paths: List[str], explicit_files: List[str]) -> List[SourceFile]:
        if not explicit_files:
            return self._project.get_target_source_files()
        targets = []
        for path in target_paths:
            source_file = self._project.get_source_file(path)
            if source_file is not None and not source_file.is_vendored and not source_file.is_declaration_file:
                targets.append(source_file)
        return targets

    def _run_diagnostic_batches(
        self,
        translator: DiagnosticFixTranslator,
        targets: List[SourceFile],
        diagnostics: Dict,
        deadline: Deadline,
    ) -> Set[str]:
        limits = self.settings.limits
        batch_size = max(1, limits.max_files_per_batch) if limits.constrained else max(1, len(targets))
        touched: Set[str] = set()

        for start in range(0, len(targets), batch_size):
            deadline.check("diagnostic fixes")
            batch = targets[start:start + batch_size]
            changed = fix_diagnostics(translator, batch, diagnostics)
            touched.update(sf.file_path for sf in changed)
            self.stats.files_processed += len(batch)

            if limits.constrained:
                # Parsed trees are rebuilt on demand by later passes
                for source_file in batch:
                    source_file.release_syntax()
                logger.debug(f"Processed batch {start // batch_size + 1} ({len(batch)} files)")

        return touched

    def _organize_imports(self, touched: Set[str]) -> None:
        for path in sorted(touched):
            source_file = self._project.get_source_file(path)
            if source_file is None:
                continue
            try:
                organize_imports(source_file)
            except Exception as e:
                logger.warning(f"Warning: Failed to organize imports in {source_file.base_name}: {e}")

    def _finalize_changes(self) -> None:
        logger.info("Saving changes...")
        saved = self._project.save()
        logger.info(f"All changes saved successfully ({len(saved)} files written).")

    def _cleanup(self) -> None:
        logger.info("Cleaning up resources...")
        if self._surface is not None:
            self._surface.clear()
            self._surface = None
        if self._project is not None:
            self._project.release()
            self._project = None
        logger.info("Cleanup completed.")
