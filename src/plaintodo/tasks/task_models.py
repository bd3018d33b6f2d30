# tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

PRIORITY_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
MAX_PRIORITY = len(PRIORITY_LETTERS) - 1


@dataclass(frozen=True, slots=True)
class Started:
    """The task is still open."""


@dataclass(frozen=True, slots=True)
class Finished:
    """The task is done, optionally with the day it was finished."""

    finish_date: date | None = None


Status = Started | Finished

STARTED = Started()


def status_from_fields(finished: bool, finish_date: date | None) -> Status:
    """Build a Status from the flat on-disk fields (done marker + finish date)."""
    if finished:
        return Finished(finish_date)
    if finish_date is not None:
        raise ValueError("finish_date given for a task that is not finished")
    return STARTED


def status_to_fields(status: Status) -> tuple[bool, date | None]:
    """Inverse of status_from_fields."""
    if isinstance(status, Finished):
        return True, status.finish_date
    if isinstance(status, Started):
        return False, None
    raise TypeError(f"not a task status: {status!r}")


def priority_letter(priority: int | None) -> str | None:
    if priority is None:
        return None
    return PRIORITY_LETTERS[priority]


def priority_from_letter(letter: str | None) -> int | None:
    if not letter:
        return None
    idx = PRIORITY_LETTERS.find(letter.upper())
    if idx < 0 or len(letter) != 1:
        raise ValueError(f"invalid priority letter: {letter!r}")
    return idx


@dataclass(slots=True)
class Task:
    """
    One parsed record.

    `subject` keeps the @context, +project and #hashtag markers inline;
    the lists below are extracted copies. key:value tags are not part of
    the subject, they live in `tags` (or in due_date/threshold_date).
    """

    subject: str = ""
    priority: int | None = None
    creation_date: date | None = None
    status: Status = STARTED
    threshold_date: date | None = None
    due_date: date | None = None

    contexts: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    hashtags: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.priority is not None and not 0 <= self.priority <= MAX_PRIORITY:
            raise ValueError(f"priority must be in [0, {MAX_PRIORITY}] or None")
        if not isinstance(self.status, (Started, Finished)):
            raise TypeError(f"not a task status: {self.status!r}")

    @property
    def is_done(self) -> bool:
        return isinstance(self.status, Finished)

    @property
    def finish_date(self) -> date | None:
        if isinstance(self.status, Finished):
            return self.status.finish_date
        return None
