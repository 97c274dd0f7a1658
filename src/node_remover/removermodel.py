from __future__ import annotations

import dataclasses
from datetime import timedelta

TARGET_NAME = "node_modules"
BYTES_PER_MB = 1024 * 1024


@dataclasses.dataclass(frozen=True)
class TargetDirectory:
    """A matched node_modules directory that is old enough to remove."""

    path: str
    size_bytes: int
    age: timedelta

    @property
    def size_mb(self) -> float:
        return self.size_bytes / BYTES_PER_MB


@dataclasses.dataclass(frozen=True)
class RootResult:
    """The outcome of walking a single root directory."""

    found: int = 0
    removed: int = 0
    size_bytes: int = 0


@dataclasses.dataclass
class RunTotals:
    """Counters accumulated across every root of a run."""

    found: int = 0
    removed: int = 0
    size_bytes: int = 0
    errors: int = 0

    @property
    def size_mb(self) -> float:
        return self.size_bytes / BYTES_PER_MB

    def add(self, result: RootResult) -> None:
        """Fold the result of one root into the totals."""
        self.found += result.found
        self.removed += result.removed
        self.size_bytes += result.size_bytes
