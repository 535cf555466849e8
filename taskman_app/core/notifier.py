# taskman_app/core/notifier.py

import logging
from typing import List

from PySide6.QtCore import QObject, QTimer, Signal

from taskman_app import config
from taskman_app.core.task_manager import TaskManager
from taskman_app.db.settings_repository import AppSettings
from taskman_app.models.data_models import Task

logger = logging.getLogger(__name__)


class OverdueNotifier(QObject):
    """
    Periodically scans the task list for overdue tasks.

    The timer lives on the GUI thread, so overdue_found is always delivered
    there; the scan itself only reads the list.
    """

    overdue_found = Signal(object)  # List[Task]

    def __init__(self, task_manager: TaskManager, settings: AppSettings,
                 initial_delay_ms: int = config.NOTIFY_INITIAL_DELAY_MS,
                 interval_ms: int = config.NOTIFY_INTERVAL_MS):
        super().__init__()
        self.task_manager = task_manager
        self.settings = settings
        self.initial_delay_ms = initial_delay_ms
        self.interval_ms = interval_ms

        self.timer = QTimer(self)
        self.timer.timeout.connect(self._on_timeout)

    def start(self):
        # First shot after the initial delay, then the regular interval.
        self.timer.start(self.initial_delay_ms)

    def stop(self):
        self.timer.stop()

    def is_running(self) -> bool:
        return self.timer.isActive()

    def _on_timeout(self):
        if self.timer.interval() != self.interval_ms:
            self.timer.setInterval(self.interval_ms)
        self.check_now()

    def check_now(self) -> List[Task]:
        if not self.settings.notifications_enabled:
            return []

        overdue = self.task_manager.overdue_tasks()
        if overdue:
            logger.info("%d overdue task(s)", len(overdue))
            self.overdue_found.emit(overdue)
        return overdue
