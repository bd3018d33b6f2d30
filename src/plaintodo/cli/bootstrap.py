# src/plaintodo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- reads the profile file and picks a task file profile,
- resolves where finished tasks go and opens the TaskStore.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import get_settings, load_taskfiles, select_taskfile
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(
    *,
    settings=None,
    config_path: str | Path | None = None,
    taskfile: str | None = None,
) -> AppState:
    """
    Create AppState for one command run.

    Keeping settings injectable makes the CLI testable without touching the
    user's real config. Explicit config_path / taskfile (from the command
    line) win over settings.
    """
    if settings is None:
        settings = get_settings()

    path = Path(config_path) if config_path is not None else settings.config_path
    name = taskfile if taskfile is not None else getattr(settings, "default_taskfile", None)

    profiles = load_taskfiles(path)
    profile = select_taskfile(profiles, name)
    done_path = profile.archive_path()
    logger.debug(
        "Using taskfile %r from %s: task_file=%s done=%s",
        profile.name,
        path,
        profile.task_file,
        done_path,
    )

    store = TaskStore.open(
        profile.task_file,
        done_path,
        skip_malformed=bool(getattr(settings, "skip_malformed", False)),
    )
    return AppState(settings=settings, taskfile=profile, store=store)
