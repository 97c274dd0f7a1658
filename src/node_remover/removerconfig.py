from __future__ import annotations

import argparse
import dataclasses
import logging
import os
from configparser import ConfigParser
from datetime import timedelta
from typing import Iterable

from .removerduration import DurationError
from .removerduration import parse_duration

DEFAULT_AGE = "3m"
DEFAULT_ROOT = "."

NEW_CONFIG = """\
[remover]
# Directories to scan. Comma separated or one per line.
dirs = .

# Remove node_modules directories not modified for this long.
# Examples: 3m, 24h, 90d, 1h30m
age = 3m

# Report what would be removed without deleting anything.
dry_run = true

verbose = false
quiet = false
"""


class ConfigError(ValueError):
    """Raised when the remover cannot be configured."""


def split_directories(value: str) -> list[str]:
    """Split a comma (or newline) separated list of directories, dropping blanks."""
    parts = value.replace("\n", ",").split(",")
    return [part.strip() for part in parts if part.strip()]


@dataclasses.dataclass(frozen=True)
class RemoverConfig:
    """Validated settings for a single run of the remover."""

    roots: tuple[str, ...] = (DEFAULT_ROOT,)
    age: timedelta = timedelta(minutes=3)
    dry_run: bool = False
    verbose: bool = False
    quiet: bool = False

    @classmethod
    def create(
        cls,
        roots: Iterable[str] = (),
        age: timedelta | str = DEFAULT_AGE,
        *,
        dry_run: bool = False,
        verbose: bool = False,
        quiet: bool = False,
    ) -> RemoverConfig:
        """
        Build a config from loosely typed input.

        Args:
            roots: Directories to scan. Blank entries are dropped and the
                current directory is used when none remain.
            age: A timedelta or a duration string such as "90d".

        Raises:
            ConfigError: If the age cannot be parsed or is negative.
        """
        if isinstance(age, str):
            try:
                age = parse_duration(age)
            except DurationError as err:
                raise ConfigError(f"Invalid age duration '{age}': {err}") from err

        if age < timedelta(0):
            raise ConfigError(f"Age threshold cannot be negative: {age}")

        cleaned = [root.strip() for root in roots if root.strip()]

        return cls(
            roots=tuple(cleaned) or (DEFAULT_ROOT,),
            age=age,
            dry_run=dry_run,
            verbose=verbose,
            quiet=quiet,
        )

    @property
    def show_verbose(self) -> bool:
        """True when verbose lines should be printed."""
        return self.verbose and not self.quiet


class ConfigFile:
    """Optional INI file holding default settings for the remover."""

    logger = logging.getLogger("node_remover.ConfigFile")

    def __init__(self, filepath: str) -> None:
        """Load the configuration from the given file."""
        self._config = ConfigParser()
        success = self._config.read(filepath)

        if not success:
            raise ValueError(f"Could not read config file at {filepath}")

        self.logger.debug("Loaded config from %s", filepath)

    @property
    def dirs(self) -> list[str]:
        """Return the directories to scan, user paths expanded."""
        config_line = self._config.get("remover", "dirs", fallback="")
        return [os.path.expanduser(path) for path in split_directories(config_line)]

    @property
    def age(self) -> str | None:
        """Return the raw age threshold string, if set."""
        return self._config.get("remover", "age", fallback=None)

    @property
    def dry_run(self) -> bool:
        """Return whether to report without deleting."""
        return self._config.getboolean("remover", "dry_run", fallback=False)

    @property
    def verbose(self) -> bool:
        """Return whether to print per-directory progress."""
        return self._config.getboolean("remover", "verbose", fallback=False)

    @property
    def quiet(self) -> bool:
        """Return whether to suppress all non-fatal output."""
        return self._config.getboolean("remover", "quiet", fallback=False)


def write_new_config(filename: str) -> None:
    """Write a new config file if one does not exist."""
    if os.path.exists(filename):
        return

    with open(filename, "w") as config_file:
        config_file.write(NEW_CONFIG)


def build_config(
    args: argparse.Namespace,
    config_file: ConfigFile | None = None,
) -> RemoverConfig:
    """
    Merge command line arguments over an optional config file.

    Directories from --dirs and positional arguments replace the file's
    list. Boolean modes are on if either source turns them on.

    Raises:
        ConfigError: If the resulting age is invalid.
    """
    roots = split_directories(args.dirs or "") + list(args.directories or [])
    age = args.age

    if config_file is not None:
        try:
            roots = roots or config_file.dirs
            if age is None:
                age = config_file.age
            dry_run = args.dry_run or config_file.dry_run
            verbose = args.verbose or config_file.verbose
            quiet = args.quiet or config_file.quiet
        except ValueError as err:
            raise ConfigError(f"Invalid config file value: {err}") from err

    else:
        dry_run, verbose, quiet = args.dry_run, args.verbose, args.quiet

    return RemoverConfig.create(
        roots,
        DEFAULT_AGE if age is None else age,
        dry_run=dry_run,
        verbose=verbose,
        quiet=quiet,
    )
