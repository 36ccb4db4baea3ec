"""Wall-clock budget for a run."""

import time
from typing import Optional

from ..exceptions import RunTimeoutError


class Deadline:
    """Cooperative run deadline, checked between phases and files."""

    def __init__(self, seconds: Optional[float]):
        self.seconds = seconds
        self._started = time.monotonic()
        self._expires = self._started + seconds if seconds else None

    def remaining(self) -> Optional[float]:
        if self._expires is None:
            return None
        return max(0.0, self._expires - time.monotonic())

    def elapsed(self) -> float:
        return time.monotonic() - self._started

    def expired(self) -> bool:
        return self._expires is not None and time.monotonic() >= self._expires

    def check(self, phase: str) -> None:
        """Raise RunTimeoutError if the budget is spent."""
        if self.expired():
            raise RunTimeoutError(f"Auto-fix timed out after {self.seconds:.0f} seconds (during {phase})")
