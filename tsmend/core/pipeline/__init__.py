"""Orchestration of the auto-repair pipeline."""

from .deadline import Deadline
from .orchestrator import AutoFixer

__all__ = [
    "AutoFixer",
    "Deadline",
]
