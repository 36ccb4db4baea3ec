"""Exceptions raised by tsmend.

Only failures that must stop a run are raised past a single pass;
per-file problems are logged and skipped by the pass that hit them.
"""


class TsmendError(Exception):
    """Base class for tsmend errors."""


class ProjectLoadError(TsmendError):
    """The project root could not be loaded."""


class SourceFileNotFoundError(TsmendError, LookupError):
    """A module is not present in the project index."""


class RunTimeoutError(TsmendError, TimeoutError):
    """The run exceeded its wall-clock budget."""
