from __future__ import annotations

import logging

from PySide6.QtCore import QDate, QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDateEdit,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from todolist.config import SETTINGS
from todolist.domain.entities import Task
from todolist.domain.enums import FilterMode, Priority
from todolist.domain.errors import PersistenceError, ValidationError
from todolist.infra.storage import TaskFileStorage
from todolist.services.task_service import TaskService
from todolist.services.task_store import TaskStore

from .widgets import PRIORITY_LABELS, TaskTable

logger = logging.getLogger(__name__)

SORT_OPTIONS = [
    ("Insertion order", None),
    ("Due date", "due_date"),
    ("Priority", "priority"),
    ("Description", "description"),
    ("Created", "creation_date"),
]


class MainWindow(QWidget):
    def __init__(self, service: TaskService | None = None):
        super().__init__()
        self.setWindowTitle(SETTINGS.window_title)
        self.resize(980, 640)

        self.service = service or TaskService(TaskStore(), TaskFileStorage())
        self.current_task: Task | None = None
        self._refresh_pending = False

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)
        layout.addWidget(self._build_form())
        layout.addLayout(self._build_toolbar())

        self.task_table = TaskTable(on_toggle=self.on_task_toggled)
        self.task_table.setObjectName("TaskTable")
        self.task_table.currentCellChanged.connect(self.on_task_selected)
        layout.addWidget(self.task_table, 1)
        layout.addLayout(self._build_footer())

        self.service.projection.subscribe(self._schedule_refresh)

        QShortcut(QKeySequence("Ctrl+N"), self, self.new_task)
        QShortcut(QKeySequence("Ctrl+S"), self, self.save_to_file)

        self.load_from_file(show_errors=True)
        self.refresh_tasks()

    def _build_form(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("TaskForm")
        layout = QHBoxLayout(frame)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.setSpacing(8)

        self.description_input = QLineEdit()
        self.description_input.setPlaceholderText("What needs to be done?")
        self.description_input.returnPressed.connect(self.submit_task)

        self.priority_combo = QComboBox()
        self.priority_combo.addItem("Priority", None)
        for priority in Priority:
            self.priority_combo.addItem(PRIORITY_LABELS[priority], priority.value)

        self.due_toggle = QCheckBox("Due")
        self.due_toggle.setChecked(True)
        self.due_toggle.toggled.connect(self.on_due_toggled)

        self.due_input = QDateEdit()
        self.due_input.setCalendarPopup(True)
        self.due_input.setDate(QDate.currentDate())

        self.add_button = QPushButton("Add")
        self.add_button.clicked.connect(self.submit_task)

        self.new_button = QPushButton("New")
        self.new_button.setProperty("variant", "ghost")
        self.new_button.clicked.connect(self.new_task)

        layout.addWidget(self.description_input, 1)
        layout.addWidget(self.priority_combo)
        layout.addWidget(self.due_toggle)
        layout.addWidget(self.due_input)
        layout.addWidget(self.add_button)
        layout.addWidget(self.new_button)
        return frame

    def _build_toolbar(self) -> QHBoxLayout:
        toolbar = QHBoxLayout()

        self.filter_combo = QComboBox()
        for mode in FilterMode:
            self.filter_combo.addItem(mode.value, mode.value)
        self.filter_combo.currentIndexChanged.connect(self.on_filter_change)

        self.sort_combo = QComboBox()
        for label, key in SORT_OPTIONS:
            self.sort_combo.addItem(label, key)
        self.sort_combo.currentIndexChanged.connect(self.on_sort_change)

        save_button = QPushButton("Save")
        save_button.setProperty("variant", "secondary")
        save_button.clicked.connect(self.save_to_file)

        reload_button = QPushButton("Reload")
        reload_button.setProperty("variant", "ghost")
        reload_button.clicked.connect(self.reload_from_file)

        toolbar.addWidget(QLabel("Show"))
        toolbar.addWidget(self.filter_combo)
        toolbar.addWidget(QLabel("Sort by"))
        toolbar.addWidget(self.sort_combo)
        toolbar.addStretch()
        toolbar.addWidget(save_button)
        toolbar.addWidget(reload_button)
        return toolbar

    def _build_footer(self) -> QHBoxLayout:
        footer = QHBoxLayout()

        self.summary_label = QLabel("")
        self.summary_label.setProperty("class", "stats-badge")

        self.delete_button = QPushButton("Delete")
        self.delete_button.setProperty("variant", "danger")
        self.delete_button.clicked.connect(self.delete_task)

        delete_completed_button = QPushButton("Delete completed")
        delete_completed_button.setProperty("variant", "secondary")
        delete_completed_button.clicked.connect(self.delete_completed)

        footer.addWidget(self.summary_label)
        footer.addStretch()
        footer.addWidget(self.delete_button)
        footer.addWidget(delete_completed_button)
        return footer

    def _schedule_refresh(self) -> None:
        if self._refresh_pending:
            return
        self._refresh_pending = True
        QTimer.singleShot(0, self.refresh_tasks)

    def refresh_tasks(self) -> None:
        self._refresh_pending = False
        tasks = self.service.visible_tasks()
        self.task_table.set_tasks(tasks)

        summary = self.service.summary()
        self.summary_label.setText(
            f"{summary.pending_count} pending / {summary.total_visible} tasks in view"
        )

        row = self.task_table.row_of(self.current_task) if self.current_task else -1
        if row >= 0:
            self.task_table.selectRow(row)
        else:
            self.task_table.clearSelection()
        self.delete_button.setEnabled(row >= 0)

    def on_filter_change(self, index: int) -> None:
        self.service.set_filter(self.filter_combo.itemData(index))

    def on_sort_change(self, index: int) -> None:
        self.service.set_sort(self.sort_combo.itemData(index))

    def on_task_selected(self, row: int, *_args) -> None:
        task = self.task_table.task_at(row)
        if task is None:
            return
        self.current_task = task
        self.populate_form(task)

    def on_task_toggled(self, task: Task, done: bool) -> None:
        if task.done != done:
            self.service.toggle_done(task)
            logger.info("Task status changed: %s -> %s", task.description, task.done)

    def on_due_toggled(self, checked: bool) -> None:
        self.due_input.setEnabled(checked)

    def populate_form(self, task: Task) -> None:
        self.description_input.setText(task.description)
        priority_index = self.priority_combo.findData(task.priority.value)
        self.priority_combo.setCurrentIndex(max(priority_index, 0))
        if task.due_date:
            self.due_toggle.setChecked(True)
            self.due_input.setDate(QDate(task.due_date.year, task.due_date.month, task.due_date.day))
        else:
            self.due_toggle.setChecked(False)
        self.add_button.setText("Save changes")
        self.delete_button.setEnabled(True)

    def clear_form(self) -> None:
        self.description_input.clear()
        self.priority_combo.setCurrentIndex(0)
        self.due_toggle.setChecked(True)
        self.due_input.setDate(QDate.currentDate())
        self.add_button.setText("Add")

    def new_task(self) -> None:
        self.current_task = None
        self.task_table.clearSelection()
        self.clear_form()
        self.delete_button.setEnabled(False)
        self.description_input.setFocus()

    def submit_task(self) -> None:
        description = self.description_input.text()
        priority_value = self.priority_combo.currentData()
        priority = Priority(priority_value) if priority_value else None
        due_date = self.due_input.date().toPython() if self.due_toggle.isChecked() else None

        try:
            if self.current_task is None:
                self.service.add_task(description, priority, due_date)
                self.clear_form()
            else:
                self.service.edit_task(self.current_task, description, priority, due_date)
                logger.info("Task updated: %s", self.current_task.description)
        except ValidationError as exc:
            QMessageBox.warning(self, "Validation Error", str(exc))

    def delete_task(self) -> None:
        task = self.current_task
        if task is None:
            return
        confirm = QMessageBox.question(
            self,
            "Confirm Deletion",
            f"Delete task: {task.description}?",
        )
        if confirm != QMessageBox.Yes:
            return
        self.service.remove_task(task)
        logger.info("Task deleted: %s", task.description)
        self.new_task()

    def delete_completed(self) -> None:
        removed = self.service.remove_completed()
        if self.current_task is not None and self.current_task not in self.service.store:
            self.new_task()
        if not removed:
            logger.info("No completed tasks to delete")

    def save_to_file(self) -> None:
        try:
            count = self.service.save()
        except PersistenceError as exc:
            QMessageBox.warning(self, "Save failed", str(exc))
            return
        QMessageBox.information(self, "Saved", f"Saved tasks: {count}.")

    def reload_from_file(self) -> None:
        confirm = QMessageBox.question(
            self,
            "Reload",
            "Discard unsaved changes and reload tasks from disk?",
        )
        if confirm != QMessageBox.Yes:
            return
        self.load_from_file(show_errors=True)

    def load_from_file(self, show_errors: bool = False) -> None:
        try:
            result = self.service.load()
        except PersistenceError as exc:
            QMessageBox.warning(self, "Load failed", str(exc))
            return
        self.new_task()
        if show_errors and result.diagnostics:
            lines = [f"- line {d.line_number}: {d.reason}" for d in result.diagnostics[:5]]
            QMessageBox.warning(
                self,
                "Some tasks were skipped",
                f"Skipped {result.skipped} malformed lines:\n" + "\n".join(lines),
            )

    def closeEvent(self, event) -> None:
        if self.service.save_quietly():
            logger.info("Application exit: tasks saved")
        self.service.projection.unsubscribe(self._schedule_refresh)
        super().closeEvent(event)
