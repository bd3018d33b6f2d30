# tests/test_logging_setup.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from pathlib import Path

from plaintodo.logging_setup import LOG_FILE_NAME, setup_logging


@contextlib.contextmanager
def isolated_root_logger() -> Iterator[None]:
    """setup_logging resets the root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    try:
        yield
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in handlers:
            root.addHandler(h)
        root.setLevel(level)
        logging.captureWarnings(False)


def test_file_handler_gets_everything(tmp_path: Path) -> None:
    with isolated_root_logger():
        log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.ERROR)
        assert log_file == tmp_path / "logs" / LOG_FILE_NAME

        logging.getLogger("plaintodo.tasks.task_store").debug("store detail")
        logging.getLogger("somelib").info("library chatter")
        for h in logging.getLogger().handlers:
            h.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG plaintodo.tasks.task_store: store detail" in text
    assert "library chatter" in text


def test_console_filters_third_party(capsys) -> None:
    with isolated_root_logger():
        assert setup_logging(log_dir=None, console_level=logging.INFO) is None

        logging.getLogger("plaintodo.cli.main").info("ours")
        logging.getLogger("somelib").warning("theirs")
        logging.getLogger("somelib").error("theirs but bad")

    err = capsys.readouterr().err
    assert "ours" in err
    assert "theirs but bad" in err
    assert "WARNING somelib" not in err
