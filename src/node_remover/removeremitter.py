from __future__ import annotations

import logging
import sys
from datetime import timedelta
from typing import TextIO

from .removerconfig import RemoverConfig
from .removerduration import format_duration
from .removermodel import TARGET_NAME
from .removermodel import RunTotals
from .removermodel import TargetDirectory


class RemoverEmitter:
    """
    Write the remover's progress and summary to the console.

    All quiet/verbose gating happens here. Streams are looked up at write
    time when not given so redirected sys.stdout/sys.stderr are honored.
    """

    logger = logging.getLogger(__name__)

    def __init__(
        self,
        config: RemoverConfig,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._config = config
        self._stdout = stdout
        self._stderr = stderr

    def to_stdout(self, line: str) -> None:
        """Print a line unless running quiet."""
        if self._config.quiet:
            return
        print(line, file=self._stdout or sys.stdout)

    def to_stderr(self, line: str) -> None:
        """Print an error line unless running quiet."""
        if self._config.quiet:
            return
        print(line, file=self._stderr or sys.stderr)

    def verbose(self, line: str) -> None:
        """Print a line only in verbose mode."""
        if self._config.show_verbose:
            print(line, file=self._stdout or sys.stdout)

    def preamble(self) -> None:
        """Describe the run before scanning starts."""
        self.verbose(f"Scanning directories: {', '.join(self._config.roots)}")
        self.verbose(f"Age threshold: {format_duration(self._config.age)}")
        if self._config.dry_run:
            self.verbose("DRY RUN MODE - No files will be deleted")
        self.verbose("")

    def scanning(self, root: str) -> None:
        self.verbose(f"Scanning directory: {root}")

    def root_failed(self, root: str, error: OSError) -> None:
        self.to_stderr(f"Error processing directory {root}: {error}")

    def skipping(self, path: str, age: timedelta) -> None:
        self.verbose(
            f"  Skipping {path} (age: {format_duration(age)}, "
            f"threshold: {format_duration(self._config.age)})"
        )

    def size_warning(self, path: str, error: OSError) -> None:
        self.verbose(f"  Warning: Could not calculate size for {path}: {error}")

    def would_remove(self, target: TargetDirectory) -> None:
        self.to_stdout(
            f"  [DRY RUN] Would remove: {target.path} "
            f"(age: {format_duration(target.age)}, size: {target.size_mb:.2f} MB)"
        )

    def removed(self, target: TargetDirectory) -> None:
        self.to_stdout(
            f"  Removed: {target.path} "
            f"(age: {format_duration(target.age)}, size: {target.size_mb:.2f} MB)"
        )

    def remove_failed(self, path: str, error: OSError) -> None:
        self.to_stderr(f"  Error removing {path}: {error}")

    def summary(self, totals: RunTotals) -> None:
        """Print the end of run summary."""
        threshold = format_duration(self._config.age)
        found_line = (
            f"Found {totals.found} {TARGET_NAME} directories older than {threshold}"
        )

        if self._config.dry_run:
            self.to_stdout("\nDRY RUN SUMMARY:")
            self.to_stdout(found_line)
            self.to_stdout(f"Would free approximately {totals.size_mb:.2f} MB")

        else:
            self.to_stdout("\nSUMMARY:")
            self.to_stdout(found_line)
            self.to_stdout(f"Removed {totals.removed} directories")
            self.to_stdout(f"Freed approximately {totals.size_mb:.2f} MB")

        if totals.errors:
            self.to_stdout(f"{totals.errors} directories could not be scanned")

        self.logger.debug(
            "Summary: found=%s removed=%s bytes=%s errors=%s",
            totals.found,
            totals.removed,
            totals.size_bytes,
            totals.errors,
        )
