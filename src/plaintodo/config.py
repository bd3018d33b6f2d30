# src/plaintodo/config.py

"""Settings loaded from environment variables (+ optional .env) and task file profiles from TOML.

- Settings: process-wide knobs (log level, data dir, which profile file to read).
- TaskFileConfig: one named task file / done file pair from the profile file.

Profile file layout:

    [[taskfiles]]
    name = "home"
    task_file = "~/todo/todo.txt"
    done_file = "~/todo/done.txt"   # optional
    discard_done = false            # optional
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

ENV_PREFIX = "PLAINTODO"
APP_DIR_NAME = "plaintodo"

load_dotenv(override=False)


class ConfigError(RuntimeError):
    """Raised when the profile file is missing or invalid."""


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _xdg_dir(var: str, fallback: str) -> Path:
    raw = os.getenv(var)
    if raw and Path(raw).is_absolute():
        return Path(raw)
    return Path.home() / fallback


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Task files ----
    config_path: Path
    default_taskfile: str | None
    skip_malformed: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), APP_DIR_NAME) or APP_DIR_NAME
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), _xdg_dir("XDG_STATE_HOME", ".local/state") / APP_DIR_NAME)
        config_path = _env_path(
            _k("CONFIG"), _xdg_dir("XDG_CONFIG_HOME", ".config") / APP_DIR_NAME / "config.toml"
        )

        default_taskfile = _env(_k("TASKFILE")).strip() or None
        skip_malformed = _env_bool(_k("SKIP_MALFORMED"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            config_path=config_path,
            default_taskfile=default_taskfile,
            skip_malformed=skip_malformed,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS


@dataclass(frozen=True, slots=True)
class TaskFileConfig:
    name: str
    task_file: Path
    done_file: Path | None = None
    discard_done: bool = False

    def archive_path(self) -> Path | None:
        """
        Where finished tasks go on flush.

        An explicit done_file always wins. Otherwise finished tasks stay in
        the task file, unless discard_done asks to drop them (None).
        """
        if self.done_file is not None:
            return self.done_file
        if self.discard_done:
            return None
        return self.task_file


def _resolve(raw: Any, base: Path, field_name: str, profile: str) -> Path:
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigError(f"taskfile {profile!r}: {field_name} must be a non-empty string")
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = base / path
    return path


def _taskfile_from_table(table: Any, base: Path, position: int) -> TaskFileConfig:
    if not isinstance(table, dict):
        raise ConfigError(f"taskfiles[{position}] must be a table")

    name = table.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError(f"taskfiles[{position}]: name must be a non-empty string")

    if "task_file" not in table:
        raise ConfigError(f"taskfile {name!r}: task_file is required")
    task_file = _resolve(table["task_file"], base, "task_file", name)

    done_file = None
    if table.get("done_file") is not None:
        done_file = _resolve(table["done_file"], base, "done_file", name)

    discard_done = table.get("discard_done", False)
    if not isinstance(discard_done, bool):
        raise ConfigError(f"taskfile {name!r}: discard_done must be true or false")

    return TaskFileConfig(name=name, task_file=task_file, done_file=done_file, discard_done=discard_done)


def load_taskfiles(path: str | Path) -> list[TaskFileConfig]:
    """Read every [[taskfiles]] profile from a TOML file."""
    path = Path(path).expanduser()
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        raise ConfigError(
            f"could not find a configuration file at {path}. "
            f"Create it or pass --config (or set {_k('CONFIG')})."
        ) from None
    except OSError as e:
        raise ConfigError(f"could not read file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"could not parse file {path}: {e}") from e

    tables = data.get("taskfiles")
    if not isinstance(tables, list) or not tables:
        raise ConfigError(f"{path}: no [[taskfiles]] defined")

    base = path.parent
    return [_taskfile_from_table(t, base, i) for i, t in enumerate(tables)]


def select_taskfile(taskfiles: list[TaskFileConfig], name: str | None = None) -> TaskFileConfig:
    """Pick a profile by name, or the first one when no name is given."""
    if not taskfiles:
        raise ConfigError("no taskfiles configured")
    if name is None:
        return taskfiles[0]
    for tf in taskfiles:
        if tf.name == name:
            return tf
    raise ConfigError(f"there is no taskfile named {name!r} in the configuration")
