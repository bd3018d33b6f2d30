# src/plaintodo/cli/main.py

"""
CLI entrypoint.

Initializes logging, opens the configured task file, runs one command and
flushes if the command changed anything.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..cli.commands import CommandError, registry
from ..config import ConfigError, get_settings
from ..errors import PlainTodoError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plaintodo",
        description="Manage a todo.txt task file and its done file.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path of the config file to use [$XDG_CONFIG_HOME/plaintodo/config.toml].",
    )
    parser.add_argument(
        "-t",
        "--taskfile",
        default=None,
        help="Taskfile to operate on if several are defined [defaults to the first].",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    registry.add_subparsers(parser)
    return parser


def _error(msg: str) -> int:
    print(f"plaintodo: {msg}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None, *, settings=None) -> int:
    args = build_parser().parse_args(argv)

    if settings is None:
        settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = logging.DEBUG if args.verbose else getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=getattr(settings, "data_dir", None), console_level=console_level)

    try:
        state = create_initial_state(settings=settings, config_path=args.config, taskfile=args.taskfile)
    except ConfigError as e:
        logger.debug("Configuration failed.", exc_info=True)
        return _error(f"error loading configuration: {e}")
    except PlainTodoError as e:
        logger.debug("Opening task file failed.", exc_info=True)
        return _error(f"failed to open task file: {e}")

    try:
        reply = registry.handle(state, args.command, args)
    except (CommandError, IndexError) as e:
        return _error(str(e))
    except PlainTodoError as e:
        logger.debug("Command %s failed.", args.command, exc_info=True)
        return _error(str(e))

    if reply:
        print(reply)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
