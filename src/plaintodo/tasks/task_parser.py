# tasks/task_parser.py

"""
Record parser: one todo.txt line <-> Task.

Line layout (tokens separated by whitespace):

    [x] [(A)] [finish-date [creation-date] | creation-date] subject... [key:value...]

- finish/creation dates: only a finished task ("x") carries two dates
- due:YYYY-MM-DD and t:YYYY-MM-DD fill due_date / threshold_date
- any other key:value goes to Task.tags (a key never starts with @, + or #)
- everything else is subject text, kept verbatim token by token
"""

from __future__ import annotations

import re
from datetime import date

from ..errors import MalformedRecord
from .task_models import Task, priority_from_letter, priority_letter, status_from_fields, status_to_fields

DONE_MARKER = "x"
DUE_KEY = "due"
THRESHOLD_KEY = "t"

_DATE_SHAPE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_PRIORITY = re.compile(r"^\(([A-Z])\)$")
_TAG = re.compile(r"^([^\s:@+#][^\s:]*):([^\s:/][^\s:]*)$")


def _parse_date(token: str, line: str, what: str) -> date:
    # date.fromisoformat also takes compact/week forms; only YYYY-MM-DD is valid here
    if not _DATE_SHAPE.match(token):
        raise MalformedRecord(line, f"invalid {what} {token!r}")
    try:
        return date.fromisoformat(token)
    except ValueError:
        raise MalformedRecord(line, f"invalid {what} {token!r}") from None


def parse_task(line: str) -> Task:
    """
    Parse one record.

    Raises MalformedRecord for impossible dates in date positions, for
    due:/t: values that are not ISO dates, and for embedded line breaks.
    """
    if "\n" in line or "\r" in line:
        raise MalformedRecord(line, "embedded line break")

    tokens = line.split()
    pos = 0

    finished = bool(tokens) and tokens[0] == DONE_MARKER
    if finished:
        pos += 1

    priority = None
    if pos < len(tokens):
        m = _PRIORITY.match(tokens[pos])
        if m:
            priority = priority_from_letter(m.group(1))
            pos += 1

    dates: list[date] = []
    max_dates = 2 if finished else 1
    while pos < len(tokens) and len(dates) < max_dates and _DATE_SHAPE.match(tokens[pos]):
        dates.append(_parse_date(tokens[pos], line, "date"))
        pos += 1

    if finished:
        finish_date = dates[0] if dates else None
        creation_date = dates[1] if len(dates) > 1 else None
    else:
        finish_date = None
        creation_date = dates[0] if dates else None

    task = Task(
        priority=priority,
        creation_date=creation_date,
        status=status_from_fields(finished, finish_date),
    )

    words: list[str] = []
    for tok in tokens[pos:]:
        m = _TAG.match(tok)
        if m:
            key, value = m.group(1), m.group(2)
            if key == DUE_KEY:
                task.due_date = _parse_date(value, line, "due date")
            elif key == THRESHOLD_KEY:
                task.threshold_date = _parse_date(value, line, "threshold date")
            else:
                task.tags[key] = value
            continue

        words.append(tok)
        if len(tok) > 1:
            if tok[0] == "@":
                task.contexts.append(tok[1:])
            elif tok[0] == "+":
                task.projects.append(tok[1:])
            elif tok[0] == "#":
                task.hashtags.append(tok[1:])

    task.subject = " ".join(words)
    return task


def _check_single_line(task: Task) -> None:
    fields = [task.subject, *task.tags.keys(), *task.tags.values()]
    if any("\n" in s or "\r" in s for s in fields):
        raise MalformedRecord(repr(task), "embedded line break")


def _render(task: Task) -> str:
    finished, finish_date = status_to_fields(task.status)
    parts: list[str] = []

    if finished:
        parts.append(DONE_MARKER)

    letter = priority_letter(task.priority)
    if letter is not None:
        parts.append(f"({letter})")

    if finished:
        if finish_date is not None:
            parts.append(finish_date.isoformat())
            if task.creation_date is not None:
                parts.append(task.creation_date.isoformat())
    elif task.creation_date is not None:
        parts.append(task.creation_date.isoformat())

    subject = " ".join(task.subject.split())
    if subject:
        parts.append(subject)

    if task.due_date is not None:
        parts.append(f"{DUE_KEY}:{task.due_date.isoformat()}")
    if task.threshold_date is not None:
        parts.append(f"{THRESHOLD_KEY}:{task.threshold_date.isoformat()}")
    for key in sorted(task.tags):
        parts.append(f"{key}:{task.tags[key]}")

    return " ".join(parts)


def render_task(task: Task) -> str:
    """
    Canonical single-line form of a task.

    Runs of whitespace in the subject collapse to one space. A creation
    date on a finished task is only written next to a finish date; alone it
    would read back as the finish date.

    Raises MalformedRecord when the line would not read back as the same
    record: a line break in any field, a tag that parse_task would not see
    as a tag (or would see as due:/t:), or subject text that lands in a
    date or marker position.
    """
    _check_single_line(task)
    line = _render(task)
    try:
        reread = _render(parse_task(line))
    except MalformedRecord as e:
        raise MalformedRecord(line, f"does not read back ({e.reason})") from e
    if reread != line:
        raise MalformedRecord(line, f"reads back as {reread!r}")
    return line
