# src/plaintodo/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..config import TaskFileConfig
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (real Settings or a test stand-in with the same attributes).
    settings: object

    taskfile: TaskFileConfig
    store: TaskStore
