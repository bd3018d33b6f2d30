# tasks/task_store.py

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from datetime import date
from pathlib import Path

from ..errors import MalformedRecord, StoreInvariantError, TaskFileError
from .task_models import Finished, Task
from .task_parser import parse_task, render_task

logger = logging.getLogger(__name__)


def _done_sort_key(task: Task) -> tuple[bool, date, str, str]:
    """
    Order for the done buffer: by finish date, undated tasks after every
    dated one, then by subject, then by the whole rendered line so that
    identical records always end up next to each other.
    """
    status = task.status
    if not isinstance(status, Finished):
        raise StoreInvariantError(f"BUG: unfinished task in the done list: {task!r}")
    finish = status.finish_date
    return (finish is None, finish or date.min, task.subject, render_task(task))


def _dedup_adjacent(tasks: Iterable[Task]) -> list[Task]:
    out: list[Task] = []
    for task in tasks:
        if out and out[-1] == task:
            continue
        out.append(task)
    return out


class TaskStore:
    """
    A todo.txt task file plus its optional done file.

    Finished tasks found in the task file are moved into a pending "done"
    buffer and written to the done file on flush. With no done file they
    are discarded; passing the task file itself as the done file keeps them
    in place (flushing then puts unfinished tasks first, finished last).

    The store holds the state of the file as of the last reload and buffers
    every change in memory. Nothing touches the disk outside reload() and
    flush(); callers decide when to sync.

    Task indices are positions in the active list. They are only valid
    until the next reload().
    """

    def __init__(
        self,
        task_path: str | Path,
        done_path: str | Path | None = None,
        *,
        skip_malformed: bool = False,
    ) -> None:
        self._task_path = Path(task_path)
        self._done_path = Path(done_path) if done_path is not None else None
        self._skip_malformed = skip_malformed
        self._active: list[Task] = []
        self._done: list[Task] = []

    @classmethod
    def open(
        cls,
        task_path: str | Path,
        done_path: str | Path | None = None,
        *,
        skip_malformed: bool = False,
    ) -> TaskStore:
        """Open a task file (and optional done file) and load it."""
        store = cls(task_path, done_path, skip_malformed=skip_malformed)
        store.reload()
        logger.info(
            "TaskStore ready file=%s done=%s active=%d",
            store._task_path,
            store._done_path,
            len(store._active),
        )
        return store

    # ---- low-level helpers ----

    def _read_lines(self) -> list[str]:
        try:
            return self._task_path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError as e:
            raise TaskFileError(self._task_path, "task file not found") from e
        except UnicodeDecodeError as e:
            raise TaskFileError(self._task_path, f"task file is not valid UTF-8 (byte {e.start})") from e
        except OSError as e:
            raise TaskFileError(self._task_path, f"cannot read task file ({e.strerror})") from e

    def _parse_lines(self, lines: list[str]) -> list[Task]:
        tasks: list[Task] = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                tasks.append(parse_task(line))
            except MalformedRecord as e:
                located = e.at(self._task_path, lineno)
                if not self._skip_malformed:
                    raise located from e
                logger.warning("Skipping malformed record: %s", located)
        return tasks

    def _write_active(self) -> None:
        # replace the file a symlink points to, not the link itself
        path = self._task_path.resolve()
        tmp = path.with_suffix(path.suffix + ".tmp")
        lines = [render_task(task) + "\n" for task in self._active]
        try:
            with tmp.open("w", encoding="utf-8") as f:
                f.writelines(lines)
            os.replace(tmp, path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise TaskFileError(self._task_path, f"cannot write task file ({e.strerror})") from e

    def _append_done(self, done_path: Path) -> None:
        try:
            with done_path.open("a", encoding="utf-8") as f:
                for task in self._done:
                    f.write(render_task(task) + "\n")
        except OSError as e:
            raise TaskFileError(done_path, f"cannot append to done file ({e.strerror})") from e

    def _done_is_task_file(self) -> bool:
        if self._done_path is None:
            return False
        return self._done_path.resolve() == self._task_path.resolve()

    # ---- public API ----

    @property
    def task_path(self) -> Path:
        return self._task_path

    @property
    def done_path(self) -> Path | None:
        return self._done_path

    @property
    def active(self) -> tuple[Task, ...]:
        return tuple(self._active)

    @property
    def archive(self) -> tuple[Task, ...]:
        """Finished tasks waiting to be written to the done file, sorted."""
        return tuple(self._done)

    def __len__(self) -> int:
        return len(self._active)

    def reload(self) -> None:
        """
        Re-read the task file, dropping any unflushed change to the active list.

        Finished tasks are merged into the pending done buffer, which is then
        sorted and deduplicated. On any error the in-memory state is left as
        it was. Every index handed out before this call becomes invalid.
        """
        tasks = self._parse_lines(self._read_lines())

        active = [t for t in tasks if not t.is_done]
        done = self._done + [t for t in tasks if t.is_done]
        done.sort(key=_done_sort_key)
        done = _dedup_adjacent(done)

        self._active = active
        self._done = done
        logger.debug(
            "Reloaded %s: active=%d done_pending=%d",
            self._task_path,
            len(self._active),
            len(self._done),
        )

    def flush(self) -> None:
        """
        Write pending changes to disk.

        The task file is rewritten in full from the active list. If a done
        file is set, the pending done tasks are appended to it and dropped
        from the buffer, unless the done file is the task file itself: the
        rewrite just removed them from that file, so they stay buffered and
        every flush puts them back. Without a done file they are discarded.
        """
        self._write_active()

        if self._done_path is None:
            if self._done:
                logger.debug("Discarding %d finished tasks (no done file).", len(self._done))
            self._done.clear()
            return

        self._append_done(self._done_path)
        logger.debug(
            "Flushed %s: active=%d done_appended=%d to %s",
            self._task_path,
            len(self._active),
            len(self._done),
            self._done_path,
        )
        if not self._done_is_task_file():
            self._done.clear()

    def tasks(self) -> Iterator[tuple[int, Task]]:
        """
        Iterate over (index, task) for the unfinished tasks, in file order.

        Each call returns a fresh iterator. Indices are not stable across reload().
        """
        return enumerate(self._active)

    def add(self, task: Task) -> int:
        """
        Append a task to the active list and return its index.

        Raises MalformedRecord, leaving the list unchanged, if the task cannot
        be written as a single record that reads back the same.
        """
        render_task(task)
        self._active.append(task)
        return len(self._active) - 1

    def delete(self, index: int) -> Task:
        """
        Remove the task at `index`; later tasks shift down by one.

        Raises IndexError for anything outside 0 <= index < len(store).
        """
        if not 0 <= index < len(self._active):
            raise IndexError(f"no task at index {index} (have {len(self._active)})")
        return self._active.pop(index)
