# tests/test_task_models.py

from __future__ import annotations

from datetime import date

import pytest

from plaintodo.tasks.task_models import (
    STARTED,
    Finished,
    Task,
    priority_from_letter,
    priority_letter,
    status_from_fields,
    status_to_fields,
)


def test_status_field_conversions() -> None:
    d = date(2024, 1, 2)
    assert status_from_fields(False, None) == STARTED
    assert status_from_fields(True, None) == Finished(None)
    assert status_from_fields(True, d) == Finished(d)

    assert status_to_fields(STARTED) == (False, None)
    assert status_to_fields(Finished(d)) == (True, d)

    with pytest.raises(ValueError):
        status_from_fields(False, d)
    with pytest.raises(TypeError):
        status_to_fields("done")  # type: ignore[arg-type]


def test_priority_letters() -> None:
    assert priority_letter(None) is None
    assert priority_letter(0) == "A"
    assert priority_letter(25) == "Z"
    assert priority_from_letter("c") == 2
    assert priority_from_letter(None) is None
    with pytest.raises(ValueError):
        priority_from_letter("AB")
    with pytest.raises(ValueError):
        priority_from_letter("1")


@pytest.mark.parametrize("priority", [-1, 26])
def test_priority_out_of_range(priority: int) -> None:
    with pytest.raises(ValueError):
        Task(subject="s", priority=priority)


def test_task_equality_ignores_tag_order() -> None:
    a = Task(subject="s", tags={"a": "1", "b": "2"})
    b = Task(subject="s", tags={"b": "2", "a": "1"})
    assert a == b
    assert a != Task(subject="s", tags={"a": "1"})


def test_done_helpers() -> None:
    assert not Task().is_done
    assert Task().finish_date is None
    t = Task(status=Finished(date(2024, 3, 1)))
    assert t.is_done
    assert t.finish_date == date(2024, 3, 1)
