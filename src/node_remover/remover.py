from __future__ import annotations

import logging
import os
import shutil
import stat
import time
from datetime import timedelta
from typing import Callable

from .removerconfig import RemoverConfig
from .removeremitter import RemoverEmitter
from .removermodel import TARGET_NAME
from .removermodel import RootResult
from .removermodel import RunTotals
from .removermodel import TargetDirectory


class Remover:
    """Find and remove stale node_modules directories under the configured roots."""

    logger = logging.getLogger(__name__)

    def __init__(
        self,
        config: RemoverConfig,
        *,
        emitter: RemoverEmitter | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize a new Remover.

        Args:
            config: The configuration to use for this run.

        Keyword Args:
            emitter: Where progress and summary lines are written. Defaults to
                a console emitter built from the config.
            clock: Returns the current time in seconds since the epoch. Ages
                are measured against this.
        """
        self._config = config
        self._emitter = emitter or RemoverEmitter(config)
        self._clock = clock

    def run(self) -> RunTotals:
        """Process every root in order and report the totals."""
        self.logger.info("Running remover...")
        tic = time.perf_counter()

        totals = RunTotals()
        self._emitter.preamble()

        for root in self._config.roots:
            self._emitter.scanning(root)

            try:
                result = self.process_directory(root)

            except OSError as error:
                self.logger.debug("Skipping root '%s': %s", root, error)
                self._emitter.root_failed(root, error)
                totals.errors += 1
                continue

            totals.add(result)

        self._emitter.summary(totals)

        toc = time.perf_counter()
        self.logger.info("Remover finished in %s seconds", toc - tic)

        return totals

    def process_directory(self, root: str) -> RootResult:
        """
        Walk a root depth-first, handling every node_modules directory found.

        Matched directories are never descended into, whether they were old
        enough to remove or not. Entries that cannot be read are skipped.

        Raises:
            OSError: If the root itself cannot be stat'ed or listed.
        """
        found = removed = total_size = 0

        # (path, stat result, errors are fatal)
        pending: list[tuple[str, os.stat_result, bool]] = [
            (root, os.lstat(root), True)
        ]

        while pending:
            path, info, strict = pending.pop()

            if not stat.S_ISDIR(info.st_mode):
                continue

            if _entry_name(path) == TARGET_NAME:
                result = self._process_target(path, info)
                found += result.found
                removed += result.removed
                total_size += result.size_bytes
                continue

            children: list[tuple[str, os.stat_result, bool]] = []
            for name in self._list_entries(path, strict=strict):
                child = os.path.join(path, name)
                child_info = self._lstat(child)
                if child_info is not None:
                    children.append((child, child_info, False))

            # Reversed so the lexically first child is popped next
            pending.extend(reversed(children))

        self.logger.debug(
            "Root '%s': found=%s removed=%s bytes=%s", root, found, removed, total_size
        )

        return RootResult(found=found, removed=removed, size_bytes=total_size)

    def calculate_dir_size(self, path: str) -> int:
        """
        Return the total size in bytes of every non-directory entry under path.

        Symbolic links are counted by their own size and never followed.
        Entries that cannot be read contribute nothing.

        Raises:
            OSError: If path itself cannot be stat'ed or listed.
        """
        top = os.lstat(path)
        if not stat.S_ISDIR(top.st_mode):
            return top.st_size

        size = 0
        pending = [
            os.path.join(path, name) for name in self._list_entries(path, strict=True)
        ]

        while pending:
            entry = pending.pop()
            info = self._lstat(entry)

            if info is None:
                continue

            if stat.S_ISDIR(info.st_mode):
                pending.extend(
                    os.path.join(entry, name) for name in self._list_entries(entry)
                )

            else:
                size += info.st_size

        return size

    def _process_target(self, path: str, info: os.stat_result) -> RootResult:
        """Size and remove (or pretend to remove) a single node_modules directory."""
        age = timedelta(seconds=self._clock() - info.st_mtime)

        if age < self._config.age:
            self._emitter.skipping(path, age)
            return RootResult()

        try:
            size = self.calculate_dir_size(path)

        except OSError as error:
            self._emitter.size_warning(path, error)
            size = 0

        target = TargetDirectory(path=path, size_bytes=size, age=age)

        if self._config.dry_run:
            self._emitter.would_remove(target)
            return RootResult(found=1, size_bytes=size)

        try:
            shutil.rmtree(path)

        except OSError as error:
            self.logger.debug("Failed to remove '%s': %s", path, error)
            self._emitter.remove_failed(path, error)
            return RootResult(found=1, size_bytes=size)

        self._emitter.removed(target)
        return RootResult(found=1, removed=1, size_bytes=size)

    def _lstat(self, path: str) -> os.stat_result | None:
        """Return the stat result of path without following links, None if unreadable."""
        try:
            return os.lstat(path)

        except OSError as error:
            self.logger.debug("Cannot stat '%s': %s", path, error)
            return None

    def _list_entries(self, path: str, *, strict: bool = False) -> list[str]:
        """
        Return the sorted entry names of a directory.

        Unreadable directories are treated as empty unless strict is set.

        Raises:
            OSError: If strict and the directory cannot be listed.
        """
        try:
            return sorted(os.listdir(path))

        except OSError as error:
            if strict:
                raise
            self.logger.debug("Cannot list '%s': %s", path, error)
            return []


def _entry_name(path: str) -> str:
    """Return the final component of a path, ignoring trailing separators."""
    return os.path.basename(os.path.normpath(path))
