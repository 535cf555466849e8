# tests/conftest.py

import datetime
import os
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication  # noqa: E402

from taskman_app.core.task_manager import TaskManager  # noqa: E402
from taskman_app.db.settings_repository import AppSettings, SettingsRepository  # noqa: E402
from taskman_app.db.task_file_repository import TaskFileRepository  # noqa: E402
from taskman_app.models.data_models import Tag, Task  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    """QTimer and friends need an application object; tests never run its event loop."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture()
def tasks_path(tmp_path: Path) -> Path:
    return tmp_path / "tasks.txt"


@pytest.fixture()
def repository(tasks_path: Path) -> TaskFileRepository:
    return TaskFileRepository(tasks_path)


@pytest.fixture()
def manager(repository: TaskFileRepository) -> TaskManager:
    return TaskManager(repository)


@pytest.fixture()
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(SettingsRepository(tmp_path / "settings.json")).load()


@pytest.fixture()
def full_task() -> Task:
    """A task with every optional field populated."""
    task = Task(
        id="3f2b8c1e-0000-4000-8000-000000000001",
        description="Finish lab report",
        created_at=datetime.datetime(2024, 3, 1, 9, 15, 30),
        tag=Tag.SCHOOL,
        due_date=datetime.datetime(2024, 3, 5, 23, 59, 0),
        display_order=4,
    )
    task.completed = True
    task.completed_at = datetime.datetime(2024, 3, 4, 18, 0, 5)
    return task
