"""Exception hierarchy for whole-run failures.

Per-file problems are logged and skipped inside components. Only the
errors below propagate to the CLI, which turns them into a non-zero exit.
"""

from pathlib import Path
from typing import Any


class SitekeeperError(Exception):
    """Base class for fatal pipeline errors."""


class TraversalError(SitekeeperError):
    """A directory under the site root could not be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read directory {path}: {reason}")


class ArtifactWriteError(SitekeeperError):
    """One or more artifacts could not be written.

    Raised after every other artifact of the same step has been produced.
    `result` carries what the step produced despite the failures, when the
    caller can still use it.
    """

    def __init__(self, failures: dict[str, str], result: Any = None):
        self.failures = failures
        self.result = result
        listed = "; ".join(f"{path}: {reason}" for path, reason in failures.items())
        super().__init__(f"Failed to write {len(failures)} artifact(s): {listed}")


class RunCancelled(SitekeeperError):
    """The run was interrupted and stopped at a safe boundary."""

    def __init__(self, boundary: str):
        self.boundary = boundary
        super().__init__(f"Run cancelled before {boundary}")
