from __future__ import annotations

from datetime import date
from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtGui import QBrush, QColor
from PySide6.QtWidgets import QAbstractItemView, QHeaderView, QTableWidget, QTableWidgetItem

from todolist.domain.classifier import TaskTags, classify
from todolist.domain.entities import Task
from todolist.domain.enums import Priority

COLUMNS = ["Done", "Description", "Priority", "Due date", "Created"]

DONE_COLUMN = 0

PRIORITY_LABELS = {
    Priority.HIGH: "High",
    Priority.MEDIUM: "Medium",
    Priority.LOW: "Low",
}

PRIORITY_COLORS = {
    Priority.HIGH: "#E57B63",
    Priority.MEDIUM: "#E0B25B",
    Priority.LOW: "#7CC4A1",
}

OVERDUE_BACKGROUND = "#4A1D24"
DUE_SOON_BACKGROUND = "#4A3B16"
COMPLETED_FOREGROUND = "#6B7280"


def _format_date(value: date | None) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


class TaskTable(QTableWidget):
    """Table of the visible tasks, one row per task, styled from its tags."""

    def __init__(self, on_toggle: Callable[[Task, bool], None], parent=None):
        super().__init__(0, len(COLUMNS), parent)
        self._on_toggle = on_toggle
        self._tasks: list[Task] = []

        self.setHorizontalHeaderLabels(COLUMNS)
        self.verticalHeader().setVisible(False)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.setAlternatingRowColors(False)
        self.setShowGrid(False)
        header = self.horizontalHeader()
        header.setSectionResizeMode(DONE_COLUMN, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.Stretch)
        for column in range(2, len(COLUMNS)):
            header.setSectionResizeMode(column, QHeaderView.ResizeToContents)
        self.verticalHeader().setDefaultSectionSize(34)

        self.itemChanged.connect(self._handle_item_changed)

    def task_at(self, row: int) -> Task | None:
        if 0 <= row < len(self._tasks):
            return self._tasks[row]
        return None

    def current_task(self) -> Task | None:
        return self.task_at(self.currentRow())

    def row_of(self, task: Task) -> int:
        for row, candidate in enumerate(self._tasks):
            if candidate is task:
                return row
        return -1

    def set_tasks(self, tasks: tuple[Task, ...] | list[Task], today: date | None = None) -> None:
        today = today or date.today()
        self._tasks = list(tasks)
        self.blockSignals(True)
        try:
            self.setRowCount(len(self._tasks))
            for row, task in enumerate(self._tasks):
                self._fill_row(row, task, classify(task, today))
        finally:
            self.blockSignals(False)

    def _fill_row(self, row: int, task: Task, tags: TaskTags) -> None:
        done_item = QTableWidgetItem()
        done_item.setFlags(Qt.ItemIsUserCheckable | Qt.ItemIsEnabled | Qt.ItemIsSelectable)
        done_item.setCheckState(Qt.Checked if task.done else Qt.Unchecked)

        priority_item = QTableWidgetItem(PRIORITY_LABELS[task.priority])
        priority_item.setForeground(QBrush(QColor(PRIORITY_COLORS[task.priority])))

        items = [
            done_item,
            QTableWidgetItem(task.description),
            priority_item,
            QTableWidgetItem(_format_date(task.due_date)),
            QTableWidgetItem(_format_date(task.creation_date)),
        ]

        for column, item in enumerate(items):
            item.setToolTip(" ".join(tags.style_classes()))
            if tags.overdue:
                item.setBackground(QBrush(QColor(OVERDUE_BACKGROUND)))
            elif tags.due_soon:
                item.setBackground(QBrush(QColor(DUE_SOON_BACKGROUND)))
            if tags.completed and column != DONE_COLUMN:
                font = item.font()
                font.setStrikeOut(True)
                item.setFont(font)
                item.setForeground(QBrush(QColor(COMPLETED_FOREGROUND)))
            self.setItem(row, column, item)

    def _handle_item_changed(self, item: QTableWidgetItem) -> None:
        if item.column() != DONE_COLUMN:
            return
        task = self.task_at(item.row())
        if task is None:
            return
        self._on_toggle(task, item.checkState() == Qt.Checked)
