from __future__ import annotations

import argparse
import logging

from node_remover import __version__
from node_remover.remover import Remover
from node_remover.removerconfig import DEFAULT_AGE
from node_remover.removerconfig import ConfigFile
from node_remover.removerconfig import build_config
from node_remover.removerconfig import write_new_config

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

EPILOG = """\
examples:
  node-modules-remover
  node-modules-remover --age 7d --verbose
  node-modules-remover --dirs /path/to/projects,/another/path
  node-modules-remover --dry-run --verbose ~/code
"""

logger = logging.getLogger("node_remover")


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="node-modules-remover",
        description="Remove node_modules directories that have not been modified recently.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "directories",
        nargs="*",
        metavar="DIRECTORIES",
        help="Directories to scan, in addition to --dirs.",
    )
    parser.add_argument(
        "--dirs",
        type=str,
        default=None,
        help="Comma-separated list of directories to scan. Default: current directory.",
    )
    parser.add_argument(
        "--age",
        type=str,
        default=None,
        help=f"Remove node_modules older than this (e.g. 3m, 90d, 24h). Default: {DEFAULT_AGE}",
    )
    parser.add_argument(
        "--dry-run",
        help="Show what would be deleted without deleting anything.",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        help="Show detailed output.",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        help="Minimal output, good for cron. Overrides --verbose.",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Read default settings from this INI file.",
    )
    parser.add_argument(
        "--make-config",
        help="Create a default configuration file at the --config path and exit.",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "--debug",
        help="Enable debug logging.",
        default=False,
        action="store_true",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write log records to this file.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parsed = parser.parse_args(args)

    if parsed.make_config and not parsed.config:
        parser.error("--make-config requires --config")

    return parsed


def add_file_handler_to_logging(log_filepath: str) -> None:
    """Add a file handler to the root logger writing to the given path."""
    file_handler = logging.FileHandler(log_filepath)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logging.getLogger().addHandler(file_handler)


def main(*, cli_args: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(cli_args)

    if args.make_config:
        write_new_config(args.config)
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )

    if args.log_file:
        add_file_handler_to_logging(args.log_file)

    try:
        config_file = ConfigFile(args.config) if args.config else None
        config = build_config(args, config_file)

    except ValueError as error:
        # ConfigError, or an unreadable config file
        logger.error("%s", error)
        return 1

    remover = Remover(config)

    try:
        remover.run()

    except KeyboardInterrupt:
        logger.warning("Interrupted, some directories may be partially removed")
        return 130

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
