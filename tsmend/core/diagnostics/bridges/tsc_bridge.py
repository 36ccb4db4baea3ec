"""TypeScript compiler bridge.

Runs ``tsc --noEmit --pretty false`` against the project and parses its
diagnostics. Saved compiler output can be replayed with TscOutputFile.
"""

import logging
import os
import re
import shutil
from typing import Dict, Iterable, List, Optional

from ..models import Diagnostic
from .base import DiagnosticsByFile, DiagnosticsProvider, SubprocessBridge

logger = logging.getLogger(__name__)

# src/app/page.tsx(3,8): error TS2613: Module ...
TSC_PLAIN_RE = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+),(?P<column>\d+)\): "
    r"(?P<category>error|warning|message) TS(?P<code>\d+): (?P<message>.*)$"
)

# src/app/page.tsx:3:8 - error TS2613: Module ...
TSC_PRETTY_RE = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<column>\d+) - "
    r"(?P<category>error|warning|message) TS(?P<code>\d+): (?P<message>.*)$"
)

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")

DEFAULT_TIMEOUT = 120


def parse_tsc_output(output: str, project_root: str) -> DiagnosticsByFile:
    """Parse compiler output into diagnostics grouped by absolute path.

    Indented continuation lines (chained message details) are appended to
    the preceding diagnostic's message.
    """
    diagnostics: DiagnosticsByFile = {}
    current: Optional[Diagnostic] = None

    for raw_line in output.splitlines():
        line = ANSI_ESCAPE_RE.sub("", raw_line)
        match = TSC_PLAIN_RE.match(line) or TSC_PRETTY_RE.match(line)
        if match:
            file_path = match.group("file").strip()
            if not os.path.isabs(file_path):
                file_path = os.path.join(project_root, file_path)
            file_path = os.path.normpath(os.path.abspath(file_path))

            current = Diagnostic(
                code=int(match.group("code")),
                message=match.group("message").strip(),
                file_path=file_path,
                line=int(match.group("line")),
                column=int(match.group("column")),
                category=match.group("category"),
            )
            diagnostics.setdefault(file_path, []).append(current)
        elif current is not None and line.startswith("  ") and line.strip():
            current.message += "\n" + line.strip()
        else:
            current = None

    return diagnostics


class TscBridge(SubprocessBridge):
    """Collects diagnostics by running the TypeScript compiler."""

    def __init__(
        self,
        command: Optional[Iterable[str]] = None,
        tsconfig: str = "tsconfig.json",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.command = list(command) if command else ["npx", "--no-install", "tsc"]
        self.tsconfig = tsconfig
        self.timeout = timeout

    def is_available(self) -> bool:
        if not self._availability_checked:
            self._is_available_cache = shutil.which(self.command[0]) is not None
            self._availability_checked = True
        return self._is_available_cache

    def collect(self, project_root: str, timeout: Optional[float] = None) -> DiagnosticsByFile:
        if not self.is_available():
            if not self._warned:
                logger.warning(f"{self.command[0]} not found; skipping compiler diagnostics")
                self._warned = True
            return {}

        tsconfig_path = os.path.join(project_root, self.tsconfig)
        if not os.path.exists(tsconfig_path):
            logger.warning(f"No {self.tsconfig} in {project_root}; skipping compiler diagnostics")
            return {}

        cmd = self.command + ["--noEmit", "--pretty", "false", "-p", tsconfig_path]
        effective_timeout = min(timeout, self.timeout) if timeout is not None else self.timeout
        logger.info(f"Collecting diagnostics: {' '.join(cmd)}")

        output = self._run_tool(cmd, cwd=project_root, timeout=effective_timeout)
        if output is None:
            return {}

        diagnostics = parse_tsc_output(output, project_root)
        total = sum(len(d) for d in diagnostics.values())
        logger.info(f"Compiler reported {total} diagnostics in {len(diagnostics)} files")
        return diagnostics


class TscOutputFile(DiagnosticsProvider):
    """Replays diagnostics from a saved compiler output file."""

    def __init__(self, output_path: str):
        self.output_path = output_path

    def collect(self, project_root: str, timeout: Optional[float] = None) -> DiagnosticsByFile:
        try:
            with open(self.output_path, "r", encoding="utf-8", errors="replace") as f:
                output = f.read()
        except OSError as e:
            logger.error(f"Failed to read diagnostics file {self.output_path}: {e}")
            return {}
        return parse_tsc_output(output, project_root)


class StaticDiagnostics(DiagnosticsProvider):
    """Diagnostics supplied in memory, keyed by file path."""

    def __init__(self, diagnostics: Dict[str, List[Diagnostic]]):
        self._diagnostics = diagnostics

    def collect(self, project_root: str, timeout: Optional[float] = None) -> DiagnosticsByFile:
        result: DiagnosticsByFile = {}
        for file_path, items in self._diagnostics.items():
            if not os.path.isabs(file_path):
                file_path = os.path.join(project_root, file_path)
            key = os.path.normpath(os.path.abspath(file_path))
            result.setdefault(key, []).extend(items)
        return result
