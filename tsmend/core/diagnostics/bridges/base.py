"""Base classes for diagnostic sources.

A DiagnosticsProvider returns compiler diagnostics grouped by absolute file
path. Subprocess-based providers wrap an external CLI tool (tsc). If the
runtime or tool is unavailable the diagnostic pass is skipped with a warning.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..models import Diagnostic

logger = logging.getLogger(__name__)

DiagnosticsByFile = Dict[str, List[Diagnostic]]


class DiagnosticsProvider(ABC):
    """Source of per-file compiler diagnostics."""

    @abstractmethod
    def collect(self, project_root: str, timeout: Optional[float] = None) -> DiagnosticsByFile:
        """Collect diagnostics for a project.

        Args:
            project_root: Project directory
            timeout: Maximum time to spend, in seconds

        Returns:
            Diagnostics keyed by absolute, normalized file path
        """
        ...


class SubprocessBridge(DiagnosticsProvider):
    """Abstract base for providers that shell out to a CLI tool."""

    # Cache availability check per session to avoid repeated lookups
    _availability_checked: bool = False
    _is_available_cache: bool = False
    _warned: bool = False

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the runtime and tool exist."""
        ...

    def _run_tool(
        self,
        cmd: List[str],
        cwd: Optional[str] = None,
        timeout: float = 30,
    ) -> Optional[str]:
        """Run a CLI tool and return its stdout.

        Compilers exit non-zero when they report errors, so stdout is
        returned regardless of the exit code.

        Returns:
            Captured stdout, or None if the tool could not be run
        """
        try:
            proc = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
            if proc.returncode != 0:
                logger.debug(f"{cmd[0]} exited with {proc.returncode}: {proc.stderr[:200]}")
            return proc.stdout

        except subprocess.TimeoutExpired:
            logger.warning(f"{cmd[0]} timed out after {timeout:.0f}s")
            return None
        except FileNotFoundError:
            logger.debug(f"Tool not found: {cmd[0]}")
            return None
        except OSError as e:
            logger.debug(f"Tool error: {e}")
            return None
