"""Run statistics shared by every repair pass."""

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass
class RunStats:
    """Monotonic counters for one run. A new instance is created per run."""
    files_processed: int = 0
    imports_fixed: int = 0
    exports_refactored: int = 0
    diagnostics_resolved: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)
