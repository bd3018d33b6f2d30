# src/plaintodo/errors.py

"""Exception types raised by the task store and the record parser."""

from __future__ import annotations

from pathlib import Path


class PlainTodoError(Exception):
    """Base class for every error the core raises on purpose."""


class TaskFileError(PlainTodoError):
    """A task or done file could not be read or written."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"{message}: {self.path}")


class MalformedRecord(PlainTodoError, ValueError):
    """
    A line does not follow the record grammar.

    `path` and `lineno` are only known when the record came from a file;
    the store fills them in before re-raising.
    """

    def __init__(
        self,
        line: str,
        reason: str,
        *,
        path: str | Path | None = None,
        lineno: int | None = None,
    ) -> None:
        self.line = line
        self.reason = reason
        self.path = Path(path) if path is not None else None
        self.lineno = lineno
        super().__init__(line, reason)

    def at(self, path: str | Path, lineno: int) -> MalformedRecord:
        return MalformedRecord(self.line, self.reason, path=path, lineno=lineno)

    def __str__(self) -> str:
        where = ""
        if self.path is not None:
            where = f"{self.path}:{self.lineno}: " if self.lineno else f"{self.path}: "
        return f"{where}{self.reason} in record {self.line!r}"


class StoreInvariantError(AssertionError):
    """Internal consistency failure inside the task store (a bug, not bad input)."""
