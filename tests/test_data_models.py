# tests/test_data_models.py

import datetime

import pytest

from taskman_app.models.data_models import (
    NEUTRAL_TAG_COLOR, Tag, Task, tag_color, tag_name
)
from taskman_app.models.theme import Theme


def test_create_sets_defaults() -> None:
    before = datetime.datetime.now().replace(microsecond=0)
    task = Task.create("Read chapter 4")

    assert task.description == "Read chapter 4"
    assert task.id
    assert before <= task.created_at <= datetime.datetime.now()
    assert task.created_at.microsecond == 0
    assert task.completed is False
    assert task.completed_at is None
    assert task.tag is Tag.NONE
    assert task.due_date is None
    assert task.display_order == 0


def test_create_generates_unique_ids() -> None:
    ids = {Task.create("x").id for _ in range(50)}
    assert len(ids) == 50


def test_entity_itself_accepts_empty_description() -> None:
    # Validation is the manager's job, not the entity's.
    assert Task.create("").description == ""


def test_set_completed_keeps_completed_at_in_sync() -> None:
    task = Task.create("Email professor")

    task.set_completed(True)
    assert task.completed is True
    assert task.completed_at is not None

    task.set_completed(False)
    assert task.completed is False
    assert task.completed_at is None


def test_recompleting_does_not_move_timestamp() -> None:
    task = Task.create("Pay rent")
    task.set_completed(True)
    stamp = datetime.datetime(2020, 1, 1, 12, 0, 0)
    task.completed_at = stamp

    task.set_completed(True)
    assert task.completed_at == stamp


def test_toggle_completed_flips_state() -> None:
    task = Task.create("Gym")
    task.toggle_completed()
    assert task.completed and task.completed_at is not None
    task.toggle_completed()
    assert not task.completed and task.completed_at is None


def test_constructor_normalizes_inconsistent_completion() -> None:
    done = Task(id="a", description="x", created_at=datetime.datetime(2023, 1, 1), completed=True)
    assert done.completed_at is not None

    open_task = Task(id="b", description="y", created_at=datetime.datetime(2023, 1, 1),
                     completed=False, completed_at=datetime.datetime(2023, 1, 2))
    assert open_task.completed_at is None


def test_overdue_only_when_incomplete_and_past_due() -> None:
    task = Task.create("Submit essay")
    task.due_date = datetime.datetime.now() - datetime.timedelta(days=1)
    assert task.is_overdue() is True

    task.set_completed(True)
    assert task.is_overdue() is False


def test_no_due_date_is_never_overdue_or_due_soon() -> None:
    task = Task.create("Someday")
    assert task.is_overdue() is False
    assert task.is_due_soon() is False


def test_due_soon_window_is_24_hours() -> None:
    now = datetime.datetime(2024, 6, 1, 12, 0, 0)
    task = Task.create("Dentist")

    task.due_date = now + datetime.timedelta(hours=23)
    assert task.is_due_soon(now) is True
    assert task.is_overdue(now) is False

    task.due_date = now + datetime.timedelta(hours=25)
    assert task.is_due_soon(now) is False


def test_due_soon_uses_wall_clock_by_default() -> None:
    task = Task.create("Call mom")
    task.due_date = datetime.datetime.now() + datetime.timedelta(hours=23)
    assert task.is_due_soon() is True
    task.due_date = datetime.datetime.now() + datetime.timedelta(hours=25)
    assert task.is_due_soon() is False


def test_due_soon_excludes_past_and_completed() -> None:
    now = datetime.datetime(2024, 6, 1, 12, 0, 0)
    task = Task.create("Library books")
    task.due_date = now - datetime.timedelta(hours=1)
    assert task.is_due_soon(now) is False

    task.due_date = now + datetime.timedelta(hours=2)
    task.set_completed(True)
    assert task.is_due_soon(now) is False


@pytest.mark.parametrize(
    "raw, expected",
    [("Work", Tag.WORK), ("None", Tag.NONE), ("Shopping", Tag.SHOPPING)],
)
def test_tag_parse_known(raw: str, expected: Tag) -> None:
    assert Tag.parse(raw) is expected


def test_tag_parse_keeps_unknown_raw_value() -> None:
    parsed = Tag.parse("Hobby")
    assert parsed == "Hobby"
    assert not isinstance(parsed, Tag)
    assert tag_name(parsed) == "Hobby"
    assert tag_color(parsed) == NEUTRAL_TAG_COLOR


def test_tag_colors() -> None:
    assert Tag.URGENT.color == "#ef4444"
    assert Tag.SCHOOL.color == "#3b82f6"
    assert Tag.NONE.color == NEUTRAL_TAG_COLOR

    task = Task.create("x")
    task.tag = Tag.HEALTH
    assert task.tag_color == "#10b981"


def test_theme_lookup_falls_back_to_ocean() -> None:
    assert Theme.from_name("Forest Green") is Theme.FOREST
    assert Theme.from_name("Neon Nights") is Theme.OCEAN
    assert Theme.default().display_name == "Ocean Blue"
    assert len(list(Theme)) == 6
