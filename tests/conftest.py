# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest


@pytest.fixture()
def task_path(tmp_path: Path) -> Path:
    return tmp_path / "todo.txt"


@pytest.fixture()
def done_path(tmp_path: Path) -> Path:
    return tmp_path / "done.txt"


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Two profiles: `home` with a separate done file, `inline` keeping done tasks in place."""
    path = tmp_path / "config.toml"
    path.write_text(
        "[[taskfiles]]\n"
        'name = "home"\n'
        'task_file = "todo.txt"\n'
        'done_file = "done.txt"\n'
        "\n"
        "[[taskfiles]]\n"
        'name = "inline"\n'
        'task_file = "inline.txt"\n',
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def settings(config_file: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and the user's files.
    """
    return SimpleNamespace(
        app_name="plaintodo",
        log_level="WARNING",
        data_dir=None,
        config_path=config_file,
        default_taskfile=None,
        skip_malformed=False,
    )
