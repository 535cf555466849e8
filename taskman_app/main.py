import logging
import sys

from PySide6.QtCore import qInstallMessageHandler
from PySide6.QtWidgets import QApplication, QMessageBox

from taskman_app import config
from taskman_app.core.logging_setup import qt_message_handler, setup_logging
from taskman_app.core.task_manager import TaskManager
from taskman_app.db.settings_repository import AppSettings, SettingsRepository
from taskman_app.db.task_file_repository import TaskFileRepository
from taskman_app.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def main():
    setup_logging(log_dir=config.LOG_DIR)

    qInstallMessageHandler(qt_message_handler)

    # 1. Settings and tasks live in explicit objects handed to the UI
    settings = AppSettings(SettingsRepository(config.SETTINGS_FILE)).load()
    task_manager = TaskManager(TaskFileRepository(config.TASKS_FILE))

    # 2. Start the application
    app = QApplication(sys.argv)
    app.setApplicationName("Task Manager")

    window = MainWindow(task_manager, settings)

    try:
        task_manager.load()
    except OSError as e:
        logger.error("Could not load %s: %s", config.TASKS_FILE, e)
        QMessageBox.critical(window, "Load Error", f"Failed to load tasks!\n\n{e}")

    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
