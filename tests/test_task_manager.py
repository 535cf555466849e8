# tests/test_task_manager.py

import datetime
from pathlib import Path

import pytest

from taskman_app.core.task_manager import TaskManager
from taskman_app.models.data_models import InvalidTaskError, Tag, Task


def _orders(manager: TaskManager):
    return [(t.description, t.display_order) for t in manager.all_tasks()]


def test_add_task_appends_with_display_order(manager: TaskManager) -> None:
    first = manager.add_task("Read")
    second = manager.add_task("  Write  ", tag=Tag.WORK)

    assert first.display_order == 0
    assert second.display_order == 1
    assert second.description == "Write"
    assert second.tag is Tag.WORK
    assert manager.get_task(second.id) is second


@pytest.mark.parametrize("description", ["", "   ", None])
def test_add_task_rejects_empty_description(manager: TaskManager, description) -> None:
    with pytest.raises(InvalidTaskError):
        manager.add_task(description)
    assert manager.all_tasks() == []


def test_add_task_truncates_due_date_to_seconds(manager: TaskManager) -> None:
    due = datetime.datetime(2024, 5, 1, 17, 0, 0, 123456)
    task = manager.add_task("Report", due_date=due)
    assert task.due_date == datetime.datetime(2024, 5, 1, 17, 0, 0)


def test_signals_fire_on_mutation(manager: TaskManager) -> None:
    added, updated, removed, changed = [], [], [], []
    manager.task_added.connect(added.append)
    manager.task_updated.connect(updated.append)
    manager.task_removed.connect(removed.append)
    manager.tasks_changed.connect(lambda: changed.append(True))

    task = manager.add_task("Signal me")
    manager.toggle_completed(task.id)
    manager.delete_task(task.id)

    assert added == [task.id]
    assert updated == [task.id]
    assert removed == [task.id]
    assert len(changed) == 3


def test_update_task(manager: TaskManager) -> None:
    task = manager.add_task("Draft", due_date=datetime.datetime(2024, 1, 1, 9, 0, 0))

    assert manager.update_task(task.id, description="Final", tag=Tag.URGENT) is True
    assert task.description == "Final"
    assert task.tag is Tag.URGENT
    assert task.due_date == datetime.datetime(2024, 1, 1, 9, 0, 0)

    manager.update_task(task.id, due_date=None)
    assert task.due_date is None

    with pytest.raises(InvalidTaskError):
        manager.update_task(task.id, description=" ")
    assert task.description == "Final"

    assert manager.update_task("missing", description="x") is False


def test_set_completed_through_manager(manager: TaskManager) -> None:
    task = manager.add_task("Laundry")
    assert manager.set_completed(task.id, True) is True
    assert task.completed and task.completed_at is not None
    assert manager.toggle_completed(task.id) is True
    assert not task.completed and task.completed_at is None
    assert manager.toggle_completed("missing") is False


def test_delete_and_clear_completed(manager: TaskManager) -> None:
    a = manager.add_task("a")
    b = manager.add_task("b")
    c = manager.add_task("c")
    d = manager.add_task("d")
    manager.set_completed(b.id, True)
    manager.set_completed(d.id, True)

    assert manager.clear_completed() == 2
    assert [t.id for t in manager.all_tasks()] == [a.id, c.id]
    assert _orders(manager) == [("a", 0), ("c", 1)]
    assert manager.clear_completed() == 0

    assert manager.delete_task(a.id) is True
    assert manager.delete_task(a.id) is False
    assert _orders(manager) == [("c", 0)]


def test_move_task_renumbers_everything(manager: TaskManager) -> None:
    for name in "abcd":
        manager.add_task(name)
    d = manager.all_tasks()[3]

    assert manager.move_task(d.id, 1) is True
    assert _orders(manager) == [("a", 0), ("d", 1), ("b", 2), ("c", 3)]

    a = manager.all_tasks()[0]
    manager.move_task(a.id, 99)
    assert _orders(manager) == [("d", 0), ("b", 1), ("c", 2), ("a", 3)]

    manager.move_task(a.id, -5)
    assert [t.description for t in manager.all_tasks()][0] == "a"
    assert manager.move_task("missing", 0) is False


def test_filter_by_text_and_tag(manager: TaskManager) -> None:
    manager.add_task("Buy Milk", tag=Tag.SHOPPING)
    manager.add_task("Milk the cow", tag=Tag.OTHER)
    manager.add_task("Study", tag=Tag.SCHOOL)

    assert [t.description for t in manager.filter_tasks("milk")] == ["Buy Milk", "Milk the cow"]
    assert [t.description for t in manager.filter_tasks("milk", Tag.SHOPPING)] == ["Buy Milk"]
    assert [t.description for t in manager.filter_tasks(tag=Tag.SCHOOL)] == ["Study"]
    assert len(manager.filter_tasks()) == 3
    assert manager.filter_tasks("nothing matches") == []


def test_stats_and_temporal_queries(manager: TaskManager) -> None:
    now = datetime.datetime(2024, 6, 1, 12, 0, 0)
    late = manager.add_task("late", due_date=now - datetime.timedelta(days=1))
    soon = manager.add_task("soon", due_date=now + datetime.timedelta(hours=3))
    done = manager.add_task("done", tag=Tag.WORK)
    manager.set_completed(done.id, True)

    assert manager.overdue_tasks(now) == [late]
    assert manager.due_soon_tasks(now) == [soon]

    stats = manager.stats(now)
    assert (stats.total, stats.completed, stats.pending, stats.overdue) == (3, 1, 2, 1)
    assert stats.progress == pytest.approx(1 / 3)

    assert manager.tag_counts() == {"None": 2, "Work": 1}


def test_stats_on_empty_collection(manager: TaskManager) -> None:
    stats = manager.stats()
    assert stats.total == 0
    assert stats.progress == 0.0


def test_save_and_load_round_trip(manager: TaskManager, repository) -> None:
    manager.add_task("one", tag=Tag.HEALTH)
    manager.add_task("two")
    manager.add_task("three")
    manager.move_task(manager.all_tasks()[2].id, 0)
    manager.save()

    fresh = TaskManager(repository)
    assert fresh.load() == 3
    assert [t.description for t in fresh.all_tasks()] == ["three", "one", "two"]
    assert fresh.all_tasks()[1].tag is Tag.HEALTH


def test_load_sorts_by_display_order_keeping_file_order_on_ties(tasks_path: Path, repository) -> None:
    tasks_path.write_text(
        "t1|second|2023-01-01 10:00:00|false|null|None|null|1\n"
        "Legacy A|2023-01-01 10:00:00\n"
        "t3|first|2023-01-01 10:00:00|false|null|None|null|0\n"
        "Legacy B\n",
        encoding="utf-8",
    )
    manager = TaskManager(repository)
    manager.load()
    assert [t.description for t in manager.all_tasks()] == ["Legacy A", "first", "Legacy B", "second"]


def test_load_propagates_io_errors(tmp_path: Path) -> None:
    from taskman_app.db.task_file_repository import TaskFileRepository

    blocked = tmp_path / "tasks.txt"
    blocked.mkdir()
    manager = TaskManager(TaskFileRepository(blocked))
    with pytest.raises(OSError):
        manager.load()


def test_all_tasks_returns_a_copy(manager: TaskManager) -> None:
    manager.add_task("x")
    snapshot = manager.all_tasks()
    snapshot.append(Task.create("intruder"))
    assert len(manager.all_tasks()) == 1
