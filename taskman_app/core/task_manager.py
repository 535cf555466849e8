import datetime
import logging
from collections import Counter
from typing import Dict, List, Optional, Union

from PySide6.QtCore import QObject, Signal

from taskman_app.db.task_file_repository import TaskFileRepository
from taskman_app.models.data_models import (
    InvalidTaskError, Tag, Task, TaskStats, tag_name
)

logger = logging.getLogger(__name__)

_UNSET = object()


def validate_description(description: str) -> str:
    cleaned = (description or '').strip()
    if not cleaned:
        raise InvalidTaskError("Task description cannot be empty")
    return cleaned


class TaskManager(QObject):
    """Owns the in-memory task list; every mutation goes through here."""

    task_added = Signal(str)    # task_id
    task_updated = Signal(str)  # task_id
    task_removed = Signal(str)  # task_id
    tasks_changed = Signal()

    def __init__(self, repository: TaskFileRepository):
        super().__init__()
        self.repository = repository
        self._tasks: List[Task] = []

    # -------------------- persistence --------------------
    def load(self) -> int:
        """Replace the list with the file contents. OSError propagates to the caller."""
        tasks = self.repository.load_all()
        # sorted() is stable, so file order breaks display_order ties
        self._tasks = sorted(tasks, key=lambda t: t.display_order)
        self.tasks_changed.emit()
        return len(self._tasks)

    def save(self) -> int:
        return self.repository.save_all(self._tasks)

    # -------------------- queries --------------------
    def all_tasks(self) -> List[Task]:
        return list(self._tasks)

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def filter_tasks(self, search_text: str = '', tag: Optional[Union[Tag, str]] = None) -> List[Task]:
        """Case-insensitive description search, optionally limited to one tag."""
        needle = (search_text or '').strip().lower()
        wanted_tag = tag_name(tag) if tag is not None else None
        result = []
        for task in self._tasks:
            if needle and needle not in task.description.lower():
                continue
            if wanted_tag is not None and tag_name(task.tag) != wanted_tag:
                continue
            result.append(task)
        return result

    def overdue_tasks(self, now: Optional[datetime.datetime] = None) -> List[Task]:
        now = now or datetime.datetime.now()
        return [t for t in self._tasks if t.is_overdue(now)]

    def due_soon_tasks(self, now: Optional[datetime.datetime] = None) -> List[Task]:
        now = now or datetime.datetime.now()
        return [t for t in self._tasks if t.is_due_soon(now)]

    def stats(self, now: Optional[datetime.datetime] = None) -> TaskStats:
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        return TaskStats(
            total=total,
            completed=completed,
            pending=total - completed,
            overdue=len(self.overdue_tasks(now)),
            progress=(completed / total) if total else 0.0,
        )

    def tag_counts(self) -> Dict[str, int]:
        return dict(Counter(tag_name(t.tag) for t in self._tasks))

    # -------------------- mutations --------------------
    def add_task(self, description: str, tag: Union[Tag, str] = Tag.NONE,
                 due_date: Optional[datetime.datetime] = None) -> Task:
        """Validate and append a new task at the end of the list."""
        task = Task.create(validate_description(description))
        task.tag = tag
        task.due_date = due_date.replace(microsecond=0) if due_date else None
        task.display_order = len(self._tasks)
        self._tasks.append(task)

        logger.info("Task added: %s (%s)", task.id, task.description)
        self.task_added.emit(task.id)
        self.tasks_changed.emit()
        return task

    def update_task(self, task_id: str, description: Optional[str] = None,
                    tag: Optional[Union[Tag, str]] = None, due_date=_UNSET) -> bool:
        """
        Edit a task in place. Pass due_date=None to clear the deadline;
        leave it out to keep the current one.
        """
        task = self.get_task(task_id)
        if task is None:
            return False

        if description is not None:
            task.description = validate_description(description)
        if tag is not None:
            task.tag = tag
        if due_date is not _UNSET:
            task.due_date = due_date.replace(microsecond=0) if due_date else None

        self.task_updated.emit(task_id)
        self.tasks_changed.emit()
        return True

    def set_completed(self, task_id: str, completed: bool) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False
        task.set_completed(completed)
        self.task_updated.emit(task_id)
        self.tasks_changed.emit()
        return True

    def toggle_completed(self, task_id: str) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False
        return self.set_completed(task_id, not task.completed)

    def delete_task(self, task_id: str) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False
        self._tasks.remove(task)
        self._renumber()

        logger.info("Task deleted: %s", task_id)
        self.task_removed.emit(task_id)
        self.tasks_changed.emit()
        return True

    def clear_completed(self) -> int:
        """Remove every completed task; returns how many were removed."""
        removed = [t for t in self._tasks if t.completed]
        if not removed:
            return 0

        self._tasks = [t for t in self._tasks if not t.completed]
        self._renumber()
        for task in removed:
            self.task_removed.emit(task.id)
        self.tasks_changed.emit()

        logger.info("Cleared %d completed tasks", len(removed))
        return len(removed)

    def move_task(self, task_id: str, new_index: int) -> bool:
        """Drag & drop reorder: move a task, then renumber every display_order."""
        task = self.get_task(task_id)
        if task is None:
            return False

        self._tasks.remove(task)
        new_index = max(0, min(new_index, len(self._tasks)))
        self._tasks.insert(new_index, task)
        self._renumber()

        self.tasks_changed.emit()
        return True

    def _renumber(self):
        for index, task in enumerate(self._tasks):
            task.display_order = index
