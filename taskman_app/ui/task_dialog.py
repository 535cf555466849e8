import datetime
from typing import Optional

from PySide6.QtCore import QDateTime, Qt
from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QDateTimeEdit, QDialog, QFormLayout, QHBoxLayout,
    QLineEdit, QMessageBox, QPushButton, QVBoxLayout, QWidget
)

from taskman_app.core.task_manager import TaskManager
from taskman_app.models.data_models import InvalidTaskError, Tag, Task, tag_name


class TaskForm(QWidget):
    """Description, tag and optional due date; shared by the add screen and the edit dialog."""

    def __init__(self, parent=None):
        super().__init__(parent)
        form = QFormLayout(self)
        form.setSpacing(10)

        self.input_description = QLineEdit()
        self.input_description.setPlaceholderText("What needs to be done?")
        form.addRow("Description:", self.input_description)

        self.combo_tag = QComboBox()
        for tag in Tag:
            self.combo_tag.addItem(tag.value, tag)
        form.addRow("Tag:", self.combo_tag)

        due_layout = QHBoxLayout()
        self.chk_has_due = QCheckBox("Set due date")
        self.chk_has_due.toggled.connect(self.on_due_toggled)
        due_layout.addWidget(self.chk_has_due)

        self.input_due = QDateTimeEdit()
        self.input_due.setCalendarPopup(True)
        self.input_due.setDisplayFormat("MMM dd, yyyy HH:mm")
        self.input_due.setDateTime(QDateTime.currentDateTime().addDays(1))
        self.input_due.setEnabled(False)
        due_layout.addWidget(self.input_due)
        form.addRow("Due:", due_layout)

    def on_due_toggled(self, checked: bool):
        self.input_due.setEnabled(checked)

    def description(self) -> str:
        return self.input_description.text()

    def tag(self):
        return self.combo_tag.currentData()

    def due_date(self) -> Optional[datetime.datetime]:
        if not self.chk_has_due.isChecked():
            return None
        return self.input_due.dateTime().toPython().replace(second=0, microsecond=0)

    def set_task(self, task: Task):
        self.input_description.setText(task.description)

        index = self.combo_tag.findText(tag_name(task.tag))
        if index < 0:
            # Unknown tag from disk: show it as-is so editing doesn't silently drop it
            self.combo_tag.addItem(tag_name(task.tag), task.tag)
            index = self.combo_tag.count() - 1
        self.combo_tag.setCurrentIndex(index)

        self.chk_has_due.setChecked(task.due_date is not None)
        if task.due_date is not None:
            self.input_due.setDateTime(task.due_date)

    def clear(self):
        self.input_description.clear()
        self.combo_tag.setCurrentIndex(0)
        self.chk_has_due.setChecked(False)
        self.input_due.setDateTime(QDateTime.currentDateTime().addDays(1))


class TaskDialog(QDialog):
    def __init__(self, task_manager: TaskManager, task: Task, parent=None):
        super().__init__(parent)
        self.task_manager = task_manager
        self.task_id = task.id

        self.setWindowTitle("Edit Task")
        self.setFixedWidth(420)

        layout = QVBoxLayout(self)
        self.form = TaskForm()
        self.form.set_task(task)
        layout.addWidget(self.form)

        buttons = QHBoxLayout()
        buttons.addStretch()
        btn_cancel = QPushButton("Cancel")
        btn_cancel.setCursor(Qt.PointingHandCursor)
        btn_cancel.clicked.connect(self.reject)
        buttons.addWidget(btn_cancel)

        self.btn_save = QPushButton("Save")
        self.btn_save.setCursor(Qt.PointingHandCursor)
        self.btn_save.clicked.connect(self.save_values)
        buttons.addWidget(self.btn_save)
        layout.addLayout(buttons)

    def save_values(self):
        try:
            self.task_manager.update_task(
                self.task_id,
                description=self.form.description(),
                tag=self.form.tag(),
                due_date=self.form.due_date(),
            )
        except InvalidTaskError as e:
            QMessageBox.warning(self, "Invalid Task", str(e))
            return
        self.accept()
