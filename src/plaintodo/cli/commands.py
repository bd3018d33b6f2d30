# src/plaintodo/cli/commands.py

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from ..core.state import AppState
from ..tasks.task_models import priority_letter
from ..tasks.task_parser import parse_task
from ..tasks.task_store import TaskStore

CommandHandler = Callable[[AppState, argparse.Namespace], str]
ArgsBuilder = Callable[[argparse.ArgumentParser], None]

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """A command was called with arguments it cannot act on."""


@dataclass(slots=True, frozen=True)
class Command:
    name: str
    handler: CommandHandler
    help_text: str
    mutates: bool
    add_arguments: ArgsBuilder | None = None


class CommandRegistry:
    """
    Subcommand registry used by the CLI (ls, add, rm, ...).

    Commands flagged `mutates` get the store flushed after a successful
    run; the store itself never writes on its own.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        *,
        mutates: bool = False,
        add_arguments: ArgsBuilder | None = None,
    ) -> None:
        self._commands[name.lower()] = Command(name.lower(), handler, help_text, mutates, add_arguments)

    def names(self) -> list[str]:
        return list(self._commands)

    def add_subparsers(self, parser: argparse.ArgumentParser) -> None:
        sub = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)
        for cmd in self._commands.values():
            p = sub.add_parser(cmd.name, help=cmd.help_text, description=cmd.help_text)
            if cmd.add_arguments is not None:
                cmd.add_arguments(p)

    def handle(self, state: AppState, name: str, args: argparse.Namespace) -> str:
        cmd = self._commands.get(name.lower())
        if cmd is None:
            raise CommandError(f"unknown command: {name}")

        reply = cmd.handler(state, args)
        if cmd.mutates:
            state.store.flush()
            logger.debug("Flushed after %s", cmd.name)
        return reply


registry = CommandRegistry()


def format_task_line(index: int, task) -> str:
    letter = priority_letter(task.priority) or " "
    return f"{index:>4}  ({letter}) {task.subject}"


def format_listing(store: TaskStore) -> str:
    return "\n".join(format_task_line(idx, task) for idx, task in store.tasks())


def cmd_ls(state: AppState, args: argparse.Namespace) -> str:
    return format_listing(state.store)


def _add_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("text", nargs="+", help="The task, in todo.txt syntax")
    p.add_argument(
        "-d",
        "--date",
        action="store_true",
        help="Set today as creation date if the task has none",
    )


def cmd_add(state: AppState, args: argparse.Namespace) -> str:
    task = parse_task(" ".join(args.text))
    if task.is_done:
        raise CommandError("cannot add a finished task")
    if not task.subject:
        raise CommandError("task has no subject")
    if args.date and task.creation_date is None:
        task.creation_date = date.today()

    idx = state.store.add(task)
    logger.info("Added task %d to %s", idx, state.store.task_path)
    return f"Added task {idx}: {task.subject}"


def _rm_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("index", type=int, help="Index shown by `ls`")


def cmd_rm(state: AppState, args: argparse.Namespace) -> str:
    task = state.store.delete(args.index)
    logger.info("Removed task %d from %s", args.index, state.store.task_path)
    return f"Removed task {args.index}: {task.subject}"


def cmd_archive(state: AppState, args: argparse.Namespace) -> str:
    """Opening already moved finished tasks to the done buffer; the flush does the rest."""
    store = state.store
    n = len(store.archive)
    if n == 0:
        return "Nothing to archive."
    if store.done_path is None:
        return f"Discarded {n} finished task(s)."
    if store.done_path.resolve() == store.task_path.resolve():
        return f"Moved {n} finished task(s) to the end of {store.task_path}."
    return f"Archived {n} finished task(s) to {store.done_path}."


registry.register("ls", cmd_ls, help_text="List the current tasks.")
registry.register(
    "add", cmd_add, help_text="Add a task.", mutates=True, add_arguments=_add_args
)
registry.register(
    "rm", cmd_rm, help_text="Remove a task by index.", mutates=True, add_arguments=_rm_args
)
registry.register(
    "archive", cmd_archive, help_text="Move finished tasks to the done file.", mutates=True
)
