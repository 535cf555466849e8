import datetime
import logging
from typing import List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QColor, QIcon, QPixmap
from PySide6.QtWidgets import (
    QAbstractItemView, QApplication, QButtonGroup, QCheckBox, QComboBox,
    QFrame, QHBoxLayout, QLabel, QLineEdit, QListWidget, QListWidgetItem,
    QMainWindow, QMessageBox, QProgressBar, QPushButton, QStackedWidget,
    QVBoxLayout, QWidget
)

from taskman_app import config
from taskman_app.core.notifier import OverdueNotifier
from taskman_app.core.task_manager import TaskManager
from taskman_app.db.settings_repository import AppSettings
from taskman_app.models.data_models import InvalidTaskError, Tag, Task, tag_name
from taskman_app.models.theme import Theme
from taskman_app.ui.stats_window import StatsWindow
from taskman_app.ui.styles import build_stylesheet
from taskman_app.ui.task_dialog import TaskDialog, TaskForm

logger = logging.getLogger(__name__)

DISPLAY_FORMAT = '%b %d, %Y %H:%M'
ALL_TAGS_LABEL = "All Tags"
TASK_ID_ROLE = Qt.UserRole

SCREEN_DASHBOARD = 0
SCREEN_ADD = 1
SCREEN_SETTINGS = 2


def tag_icon(color: str) -> QIcon:
    pixmap = QPixmap(12, 12)
    pixmap.fill(QColor(color))
    return QIcon(pixmap)


def describe_task(task: Task, now: datetime.datetime) -> str:
    """Single list row: description, tag and due-date badge."""
    parts = [task.description, f"[{tag_name(task.tag)}]"]
    if task.due_date is not None:
        due_text = task.due_date.strftime(DISPLAY_FORMAT)
        if task.is_overdue(now):
            parts.append(f"⚠ OVERDUE {due_text}")
        elif task.is_due_soon(now):
            parts.append(f"⏰ Due soon {due_text}")
        else:
            parts.append(f"Due {due_text}")
    return "   ".join(parts)


class MainWindow(QMainWindow):
    def __init__(self, task_manager: TaskManager, settings: AppSettings):
        super().__init__()
        self.task_manager = task_manager
        self.settings = settings
        self._refresh_pending = False

        self.setWindowTitle("Task Manager")
        self.resize(900, 680)

        self.init_ui()
        self.apply_theme(self.settings.theme)

        self.task_manager.tasks_changed.connect(self.schedule_refresh)

        # Overdue/due-soon badges depend on the clock, so re-render periodically
        self.refresh_timer = QTimer(self)
        self.refresh_timer.timeout.connect(self.refresh_dashboard)
        self.refresh_timer.start(config.REFRESH_INTERVAL_MS)

        self.notifier = OverdueNotifier(self.task_manager, self.settings)
        self.notifier.overdue_found.connect(self.show_overdue_alert)
        self.notifier.start()

        self.show_screen(SCREEN_DASHBOARD)
        self.refresh_dashboard()

    # -------------------- layout --------------------
    def init_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QHBoxLayout(central_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.addWidget(self.build_navigation_bar())

        self.stack = QStackedWidget()
        self.stack.addWidget(self.build_dashboard_screen())
        self.stack.addWidget(self.build_add_task_screen())
        self.stack.addWidget(self.build_settings_screen())
        main_layout.addWidget(self.stack, stretch=1)

    def build_navigation_bar(self) -> QWidget:
        nav = QWidget()
        nav.setFixedWidth(170)
        layout = QVBoxLayout(nav)
        layout.setContentsMargins(10, 30, 10, 30)
        layout.setSpacing(8)

        title = QLabel("📋 Tasks")
        title.setObjectName("HeaderLabel")
        layout.addWidget(title)
        layout.addSpacing(20)

        self.nav_group = QButtonGroup(self)
        self.nav_group.setExclusive(True)
        for screen_id, text in ((SCREEN_DASHBOARD, "🏠 Dashboard"),
                                (SCREEN_ADD, "➕ Add Task"),
                                (SCREEN_SETTINGS, "⚙ Settings")):
            btn = QPushButton(text)
            btn.setObjectName("NavButton")
            btn.setCheckable(True)
            btn.setCursor(Qt.PointingHandCursor)
            btn.clicked.connect(lambda checked, s=screen_id: self.show_screen(s))
            self.nav_group.addButton(btn, screen_id)
            layout.addWidget(btn)

        layout.addStretch()
        return nav

    def _stat_card(self, label: str):
        card = QFrame()
        card.setObjectName("StatCard")
        layout = QVBoxLayout(card)
        number = QLabel("0")
        number.setObjectName("StatNumber")
        number.setAlignment(Qt.AlignCenter)
        text = QLabel(label)
        text.setObjectName("StatLabel")
        text.setAlignment(Qt.AlignCenter)
        layout.addWidget(number)
        layout.addWidget(text)
        return card, number

    def build_dashboard_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        layout.setContentsMargins(30, 30, 30, 30)
        layout.setSpacing(15)

        header = QLabel("Dashboard")
        header.setObjectName("HeaderLabel")
        layout.addWidget(header)

        # Stat cards
        stats_layout = QHBoxLayout()
        card, self.lbl_total = self._stat_card("TOTAL")
        stats_layout.addWidget(card)
        card, self.lbl_completed = self._stat_card("COMPLETED")
        stats_layout.addWidget(card)
        card, self.lbl_pending = self._stat_card("PENDING")
        stats_layout.addWidget(card)

        progress_card = QFrame()
        progress_card.setObjectName("StatCard")
        progress_layout = QVBoxLayout(progress_card)
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        progress_layout.addWidget(self.progress_bar)
        progress_text = QLabel("PROGRESS")
        progress_text.setObjectName("StatLabel")
        progress_text.setAlignment(Qt.AlignCenter)
        progress_layout.addWidget(progress_text)
        stats_layout.addWidget(progress_card)
        layout.addLayout(stats_layout)

        # Search + tag filter
        search_layout = QHBoxLayout()
        self.input_search = QLineEdit()
        self.input_search.setPlaceholderText("🔍 Search tasks...")
        self.input_search.textChanged.connect(lambda text: self.refresh_task_list())
        search_layout.addWidget(self.input_search, stretch=1)

        search_layout.addWidget(QLabel("Filter:"))
        self.combo_filter = QComboBox()
        self.combo_filter.addItem(ALL_TAGS_LABEL, None)
        for tag in Tag:
            self.combo_filter.addItem(tag.value, tag)
        self.combo_filter.currentIndexChanged.connect(lambda index: self.refresh_task_list())
        search_layout.addWidget(self.combo_filter)
        layout.addLayout(search_layout)

        # Task list (drag & drop reorder)
        self.task_list = QListWidget()
        self.task_list.setDragDropMode(QAbstractItemView.InternalMove)
        self.task_list.setDefaultDropAction(Qt.MoveAction)
        self.task_list.setSelectionMode(QAbstractItemView.SingleSelection)
        self.task_list.model().rowsMoved.connect(self.on_rows_moved)
        self.task_list.itemDoubleClicked.connect(self.on_item_double_clicked)
        self.task_list.itemChanged.connect(self.on_item_changed)
        layout.addWidget(self.task_list, stretch=1)

        # Actions
        actions = QHBoxLayout()
        btn_edit = QPushButton("✏ Edit")
        btn_edit.clicked.connect(self.edit_selected_task)
        actions.addWidget(btn_edit)

        btn_delete = QPushButton("🗑 Delete")
        btn_delete.setObjectName("DangerButton")
        btn_delete.clicked.connect(self.delete_selected_task)
        actions.addWidget(btn_delete)

        actions.addStretch()

        btn_stats = QPushButton("📊 Statistics")
        btn_stats.clicked.connect(self.open_stats)
        actions.addWidget(btn_stats)

        btn_save = QPushButton("💾 Save")
        btn_save.clicked.connect(self.save_tasks)
        actions.addWidget(btn_save)

        btn_load = QPushButton("📂 Load")
        btn_load.clicked.connect(self.load_tasks)
        actions.addWidget(btn_load)

        btn_clear = QPushButton("🧹 Clear Completed")
        btn_clear.setObjectName("DangerButton")
        btn_clear.clicked.connect(self.clear_completed)
        actions.addWidget(btn_clear)
        layout.addLayout(actions)

        for btn in (btn_edit, btn_delete, btn_stats, btn_save, btn_load, btn_clear):
            btn.setCursor(Qt.PointingHandCursor)

        return screen

    def build_add_task_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        layout.setContentsMargins(30, 30, 30, 30)
        layout.setSpacing(15)

        header = QLabel("Add Task")
        header.setObjectName("HeaderLabel")
        layout.addWidget(header)

        self.add_form = TaskForm()
        self.add_form.input_description.returnPressed.connect(self.add_task_from_form)
        layout.addWidget(self.add_form)

        btn_layout = QHBoxLayout()
        btn_layout.addStretch()
        btn_clear = QPushButton("Clear")
        btn_clear.setCursor(Qt.PointingHandCursor)
        btn_clear.clicked.connect(self.add_form.clear)
        btn_layout.addWidget(btn_clear)

        btn_add = QPushButton("➕ Add Task")
        btn_add.setCursor(Qt.PointingHandCursor)
        btn_add.clicked.connect(self.add_task_from_form)
        btn_layout.addWidget(btn_add)
        layout.addLayout(btn_layout)

        layout.addStretch()
        return screen

    def build_settings_screen(self) -> QWidget:
        screen = QWidget()
        layout = QVBoxLayout(screen)
        layout.setContentsMargins(30, 30, 30, 30)
        layout.setSpacing(15)

        header = QLabel("Settings")
        header.setObjectName("HeaderLabel")
        layout.addWidget(header)

        theme_layout = QHBoxLayout()
        theme_layout.addWidget(QLabel("Theme:"))
        self.combo_theme = QComboBox()
        for theme in Theme:
            self.combo_theme.addItem(theme.display_name, theme)
        self.combo_theme.setCurrentIndex(self.combo_theme.findData(self.settings.theme))
        self.combo_theme.currentIndexChanged.connect(self.on_theme_changed)
        theme_layout.addWidget(self.combo_theme)
        theme_layout.addStretch()
        layout.addLayout(theme_layout)

        self.chk_notifications = QCheckBox("Notify me about overdue tasks")
        self.chk_notifications.setChecked(self.settings.notifications_enabled)
        self.chk_notifications.toggled.connect(self.on_notifications_toggled)
        layout.addWidget(self.chk_notifications)

        layout.addStretch()
        return screen

    def show_screen(self, screen_id: int):
        self.stack.setCurrentIndex(screen_id)
        button = self.nav_group.button(screen_id)
        if button is not None:
            button.setChecked(True)
        if screen_id == SCREEN_ADD:
            self.add_form.clear()
            self.add_form.input_description.setFocus()
        elif screen_id == SCREEN_DASHBOARD:
            self.refresh_dashboard()

    # -------------------- rendering --------------------
    def schedule_refresh(self):
        # Coalesce bursts of signals (e.g. clear completed) into one repaint
        if self._refresh_pending:
            return
        self._refresh_pending = True
        QTimer.singleShot(0, self._do_refresh)

    def _do_refresh(self):
        self._refresh_pending = False
        self.refresh_dashboard()

    def refresh_dashboard(self):
        stats = self.task_manager.stats()
        self.lbl_total.setText(str(stats.total))
        self.lbl_completed.setText(str(stats.completed))
        self.lbl_pending.setText(str(stats.pending))
        self.progress_bar.setValue(int(stats.progress * 100))
        self.refresh_task_list()

    def current_filter_tag(self):
        return self.combo_filter.currentData()

    def is_filtered(self) -> bool:
        return bool(self.input_search.text().strip()) or self.current_filter_tag() is not None

    def refresh_task_list(self):
        selected_id = self.selected_task_id()
        now = datetime.datetime.now()
        tasks = self.task_manager.filter_tasks(self.input_search.text(), self.current_filter_tag())

        self.task_list.blockSignals(True)
        try:
            self.task_list.clear()
            for task in tasks:
                self.task_list.addItem(self._create_item(task, now))
                if task.id == selected_id:
                    self.task_list.setCurrentRow(self.task_list.count() - 1)
        finally:
            self.task_list.blockSignals(False)

        # Reordering a filtered view is ambiguous; only allow it on the full list
        mode = QAbstractItemView.NoDragDrop if self.is_filtered() else QAbstractItemView.InternalMove
        self.task_list.setDragDropMode(mode)

    def _create_item(self, task: Task, now: datetime.datetime) -> QListWidgetItem:
        item = QListWidgetItem(describe_task(task, now))
        item.setData(TASK_ID_ROLE, task.id)
        item.setIcon(tag_icon(task.tag_color))
        item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
        item.setCheckState(Qt.Checked if task.completed else Qt.Unchecked)

        font = item.font()
        font.setStrikeOut(task.completed)
        item.setFont(font)

        if task.is_overdue(now):
            item.setForeground(QColor('#f87171'))
        elif task.is_due_soon(now):
            item.setForeground(QColor('#fbbf24'))
        elif task.completed:
            item.setForeground(QColor('#94a3b8'))

        tooltip = f"Created {task.created_at.strftime(DISPLAY_FORMAT)}"
        if task.completed_at is not None:
            tooltip += f"\nCompleted {task.completed_at.strftime(DISPLAY_FORMAT)}"
        item.setToolTip(tooltip)
        return item

    def selected_task_id(self) -> Optional[str]:
        item = self.task_list.currentItem()
        return item.data(TASK_ID_ROLE) if item is not None else None

    # -------------------- actions --------------------
    def add_task_from_form(self):
        try:
            task = self.task_manager.add_task(
                self.add_form.description(),
                tag=self.add_form.tag(),
                due_date=self.add_form.due_date(),
            )
        except InvalidTaskError as e:
            QMessageBox.warning(self, "Invalid Task", str(e))
            return

        self.statusBar().showMessage(f"Added: {task.description}", 3000)
        self.add_form.clear()
        self.show_screen(SCREEN_DASHBOARD)

    def on_item_changed(self, item: QListWidgetItem):
        task_id = item.data(TASK_ID_ROLE)
        task = self.task_manager.get_task(task_id)
        if task is None:
            return
        checked = item.checkState() == Qt.Checked
        if checked != task.completed:
            self.task_manager.set_completed(task_id, checked)

    def on_item_double_clicked(self, item: QListWidgetItem):
        self.open_edit_dialog(item.data(TASK_ID_ROLE))

    def edit_selected_task(self):
        task_id = self.selected_task_id()
        if task_id is None:
            QMessageBox.information(self, "No Selection", "Select a task to edit first.")
            return
        self.open_edit_dialog(task_id)

    def open_edit_dialog(self, task_id: str):
        task = self.task_manager.get_task(task_id)
        if task is None:
            return
        dialog = TaskDialog(self.task_manager, task, self)
        dialog.exec()

    def delete_selected_task(self):
        task_id = self.selected_task_id()
        task = self.task_manager.get_task(task_id) if task_id else None
        if task is None:
            QMessageBox.information(self, "No Selection", "Select a task to delete first.")
            return

        reply = QMessageBox.question(
            self, "Delete Task", f"Are you sure you want to delete this task?\n\n{task.description}",
            QMessageBox.Yes | QMessageBox.No
        )
        if reply == QMessageBox.Yes:
            self.task_manager.delete_task(task_id)

    def clear_completed(self):
        completed = self.task_manager.stats().completed
        if completed == 0:
            QMessageBox.information(self, "No Completed Tasks",
                                    "There are no completed tasks to clear.")
            return

        reply = QMessageBox.question(
            self, "Clear Completed Tasks",
            f"This will remove {completed} completed task(s).",
            QMessageBox.Yes | QMessageBox.No
        )
        if reply == QMessageBox.Yes:
            self.task_manager.clear_completed()

    def on_rows_moved(self, parent, start, end, destination, row):
        # Drag is only enabled on the unfiltered list, so row indexes match the model
        tasks = self.task_manager.all_tasks()
        if start >= len(tasks):
            return
        moved_id = tasks[start].id
        item_ids = [self.task_list.item(i).data(TASK_ID_ROLE) for i in range(self.task_list.count())]
        if moved_id not in item_ids:
            return
        new_index = item_ids.index(moved_id)
        # Defer: the list widget is still inside its drop handler here
        QTimer.singleShot(0, lambda: self.task_manager.move_task(moved_id, new_index))

    def save_tasks(self):
        try:
            count = self.task_manager.save()
        except OSError as e:
            logger.error("Saving tasks failed: %s", e)
            QMessageBox.critical(self, "Save Error", f"Failed to save tasks!\n\n{e}")
            return
        self.statusBar().showMessage(f"{count} task(s) saved to {self.task_manager.repository.path}", 3000)

    def load_tasks(self, confirm: bool = True) -> bool:
        if confirm and self.task_manager.all_tasks():
            reply = QMessageBox.question(
                self, "Load Tasks",
                "This will replace all current tasks. Load tasks from file?",
                QMessageBox.Yes | QMessageBox.No
            )
            if reply != QMessageBox.Yes:
                return False

        try:
            count = self.task_manager.load()
        except OSError as e:
            logger.error("Loading tasks failed: %s", e)
            QMessageBox.critical(self, "Load Error", f"Failed to load tasks!\n\n{e}")
            return False

        self.statusBar().showMessage(f"{count} task(s) loaded", 3000)
        return True

    def open_stats(self):
        stats_dialog = StatsWindow(self.task_manager, self.settings.theme, self)
        stats_dialog.exec()

    # -------------------- settings --------------------
    def apply_theme(self, theme: Theme):
        app = QApplication.instance()
        if app is not None:
            app.setStyleSheet(build_stylesheet(theme))

    def on_theme_changed(self, index: int):
        theme = self.combo_theme.itemData(index)
        if theme is None:
            return
        self.apply_theme(theme)
        self._persist_setting(self.settings.set_theme, theme)

    def on_notifications_toggled(self, enabled: bool):
        self._persist_setting(self.settings.set_notifications_enabled, enabled)

    def _persist_setting(self, setter, value):
        try:
            setter(value)
        except OSError as e:
            logger.error("Saving settings failed: %s", e)
            QMessageBox.warning(self, "Settings", f"Could not save settings:\n\n{e}")

    def show_overdue_alert(self, overdue: List[Task]):
        lines = "\n".join(f"• {task.description}" for task in overdue)
        box = QMessageBox(QMessageBox.Warning, "Overdue Tasks",
                          f"You have {len(overdue)} overdue task(s)!", QMessageBox.Ok, self)
        box.setInformativeText(lines)
        box.setModal(False)
        box.show()

    def closeEvent(self, event):
        self.notifier.stop()
        self.refresh_timer.stop()
        super().closeEvent(event)
